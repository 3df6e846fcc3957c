"""Issue store: every adapter's records, indexed by file path.

Usage:
    store  = IssueStore(resolve(), document)
    files  = store.files_with_issues()          # set of paths
    issues = store.issues_for("/src/Foo.php")   # adapter order, then document order
"""

import logging
from collections.abc import Sequence

from codebrowser.adapters import Adapter, ParseError
from codebrowser.document import ReportDocument
from codebrowser.models import IssueRecord

_log = logging.getLogger(__name__)


class IssueStore:
    """Built once per run, read-only afterwards.

    Identical findings are kept as independent records; two tools (or two
    runs of one tool) flagging the same line both show up.
    """

    def __init__(
        self,
        adapters: Sequence[Adapter],
        document: ReportDocument,
        logger: logging.Logger | None = None,
    ) -> None:
        self._logger = logger or _log
        self._skipped = 0

        files: set[str] = set()
        index: dict[str, list[IssueRecord]] = {}
        for adapter in adapters:
            files |= adapter.get_files_with_issues(document)
            for file_path, records in adapter.issues_by_file(document, self._on_error).items():
                index.setdefault(file_path, []).extend(records)

        self._files = frozenset(files)
        self._index = {path: tuple(records) for path, records in index.items()}
        if self._skipped:
            self._logger.warning("Skipped %d malformed finding(s).", self._skipped)

    def _on_error(self, adapter: Adapter, exc: ParseError) -> None:
        self._skipped += 1
        self._logger.warning("[%s] skipping finding: %s", adapter.name, exc)

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    @property
    def skipped(self) -> int:
        """Number of findings dropped because of a ParseError."""
        return self._skipped

    def files_with_issues(self) -> set[str]:
        return set(self._files)

    def issues_for(self, file_path: str) -> list[IssueRecord]:
        return list(self._index.get(file_path, ()))

    def total(self) -> int:
        return sum(len(records) for records in self._index.values())
