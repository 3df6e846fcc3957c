"""Data models shared by the adapters, the merger and the renderer.

Contains:
    - Severity     ordered display precedence
    - IssueRecord  one normalised finding
    - Segment      maximal line range with one covering set
    - RenderLine   one annotated output line
"""

from dataclasses import dataclass
from enum import IntEnum


class Severity(IntEnum):
    """Display precedence of a finding. Higher value wins."""

    INFO = 1
    WARNING = 2
    ERROR = 3
    BLOCKER = 4

    @property
    def css_class(self) -> str:
        return self.name.lower()

    @classmethod
    def parse(cls, raw: str | None) -> "Severity":
        """Map a raw tool severity onto the fixed scale.

        Unknown values (``notice``, ``style``, empty...) fall back to INFO.
        """
        value = (raw or "").strip().lower()
        if value in ("blocker", "fatal", "critical"):
            return cls.BLOCKER
        if value == "error":
            return cls.ERROR
        if value in ("warning", "warn"):
            return cls.WARNING
        return cls.INFO


@dataclass(frozen=True)
class IssueRecord:
    file_path: str
    line_start: int
    line_end: int
    source: str
    description: str
    severity: Severity = Severity.INFO

    def __post_init__(self) -> None:
        if not self.file_path:
            raise ValueError("IssueRecord.file_path must not be empty")
        start = max(self.line_start, 1)
        # frozen: assign through object.__setattr__
        object.__setattr__(self, "line_start", start)
        if self.line_end < start:
            object.__setattr__(self, "line_end", start)


@dataclass(frozen=True)
class Segment:
    line_start: int
    line_end: int
    covering_issues: tuple[IssueRecord, ...]
    highlight_class: Severity
    tooltip: str


@dataclass(frozen=True)
class RenderLine:
    line_number: int
    text: str
    highlight_class: Severity | None = None
    tooltip: str = ""


def count_by_severity(issues) -> dict[Severity, int]:
    """Count *issues* per severity, every level present (zero-filled)."""
    counts = {severity: 0 for severity in sorted(Severity, reverse=True)}
    for issue in issues:
        counts[issue.severity] += 1
    return counts
