"""Composite XML report document.

Usage:
    document = ReportDocument.from_directory("build/logs")
    files    = document.query("./checkstyle/file[@name]")

Every report file found in the log directory is parsed and its root element is
appended under a single ``<codebrowser>`` root, so adapters can address each
tool's section with a path such as ``./pmd/file``.
"""

import logging
import xml.etree.ElementTree as ET
from pathlib import Path

ROOT_TAG = "codebrowser"

_log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class ReportLoadError(Exception):
    """Raised when the report directory itself cannot be read."""


# ---------------------------------------------------------------------------
# Document
# ---------------------------------------------------------------------------

class ReportDocument:
    """Read-only view over the merged report trees."""

    def __init__(self, reports: list[ET.Element] | None = None) -> None:
        self._root = ET.Element(ROOT_TAG)
        for report in reports or []:
            self._root.append(report)

    @classmethod
    def from_strings(cls, *texts: str) -> "ReportDocument":
        return cls([ET.fromstring(text) for text in texts])

    @classmethod
    def from_directory(
        cls,
        log_dir: str | Path,
        logger: logging.Logger | None = None,
    ) -> "ReportDocument":
        """Parse every ``*.xml`` file directly inside *log_dir*.

        Files that are not well-formed XML are skipped with a warning.

        Raises:
            ReportLoadError: if *log_dir* is not a readable directory.
        """
        logger = logger or _log
        directory = Path(log_dir)
        try:
            paths = sorted(p for p in directory.iterdir() if p.suffix.lower() == ".xml")
        except OSError as exc:
            raise ReportLoadError(f"Unable to read report directory '{log_dir}': {exc}") from exc

        reports: list[ET.Element] = []
        for path in paths:
            try:
                reports.append(ET.parse(path).getroot())
            except ET.ParseError as exc:
                logger.warning("Skipping malformed report '%s': %s", path.name, exc)
                continue
            except OSError as exc:
                logger.warning("Skipping unreadable report '%s': %s", path.name, exc)
                continue
            logger.debug("Loaded report '%s' (<%s>)", path.name, reports[-1].tag)

        return cls(reports)

    @property
    def root(self) -> ET.Element:
        return self._root

    def query(self, path: str) -> list[ET.Element]:
        """Return all elements matching an ElementTree *path* from the root."""
        return self._root.findall(path)

    def __len__(self) -> int:
        return len(self._root)
