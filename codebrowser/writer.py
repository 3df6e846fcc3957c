"""HTML output: review pages, index page and static resources.

Templates live in ``codebrowser/templates`` and receive an explicit context:

    review.html     page: ReviewContext, root: relative link to the output root
    index.html      entries: list[IndexEntry], totals: dict[Severity, int]
    noErrors.html   (no variables)
"""

import logging
import shutil
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from jinja2 import Environment, FileSystemLoader, select_autoescape

from codebrowser.models import RenderLine, Severity

TEMPLATE_DIR = Path(__file__).parent / "templates"
RESOURCE_FOLDERS = ("css", "js")
# review pages live below this folder, clear of index.html and the resources
PAGE_FOLDER = "files"

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReviewContext:
    """Everything a review page may show."""

    file_path: str
    lines: Sequence[RenderLine]
    counts: dict[Severity, int]

    @property
    def total(self) -> int:
        return sum(self.counts.values())


@dataclass(frozen=True)
class IndexEntry:
    file_path: str
    counts: dict[Severity, int]
    page: str | None = None  # None when the source could not be rendered

    @property
    def total(self) -> int:
        return sum(self.counts.values())


class ReviewWriter:
    def __init__(
        self,
        output_dir: str | Path,
        template_dir: str | Path = TEMPLATE_DIR,
        logger: logging.Logger | None = None,
    ) -> None:
        self.output_dir = Path(output_dir)
        self.template_dir = Path(template_dir)
        self._logger = logger or _log
        self._env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape(["html"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )

    # ------------------------------------------------------------------
    # Pages
    # ------------------------------------------------------------------

    @staticmethod
    def page_name(file_path: str) -> str:
        """Output page for a display path, relative to the output root."""
        parts = [p for p in PurePosixPath(file_path.replace("\\", "/")).parts if p not in ("/", "..")]
        return "/".join([PAGE_FOLDER, *parts]) + ".html"

    def write_review(self, page: ReviewContext) -> str:
        """Render and write the review page of one file. Returns its page name.

        Raises:
            OSError: if the page cannot be written.
        """
        name = self.page_name(page.file_path)
        root = "../" * name.count("/")
        html = self._env.get_template("review.html").render(page=page, root=root)
        self._write(name, html)
        return name

    def write_index(self, entries: Sequence[IndexEntry]) -> None:
        """Write ``index.html``; the "no errors" page when nothing was flagged."""
        if not any(entry.total for entry in entries):
            html = self._env.get_template("noErrors.html").render()
        else:
            totals = {severity: 0 for severity in sorted(Severity, reverse=True)}
            for entry in entries:
                for severity, count in entry.counts.items():
                    totals[severity] += count
            html = self._env.get_template("index.html").render(
                entries=sorted(entries, key=lambda e: e.file_path),
                totals=totals,
            )
        self._write("index.html", html)

    def copy_resources(self) -> None:
        for folder in RESOURCE_FOLDERS:
            source = self.template_dir / folder
            if not source.is_dir():
                self._logger.debug("No resource folder '%s' in %s", folder, self.template_dir)
                continue
            shutil.copytree(source, self.output_dir / folder, dirs_exist_ok=True)

    def _write(self, name: str, content: str) -> None:
        target = self.output_dir / name
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
