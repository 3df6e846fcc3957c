"""Line-interval merging.

Given every issue of one file, ``merge()`` returns the ordered list of
Segments: maximal line ranges over which the set of covering issues does not
change. Lines not covered by any issue produce no Segment.

Example::

    A = Warning, lines 3-5        B = Error, line 4

    merge([A, B]) -> [3,3] {A}    warning
                     [4,4] {A, B} error    (B listed first in the tooltip)
                     [5,5] {A}    warning
"""

from collections import defaultdict
from collections.abc import Iterable, Sequence

from codebrowser.models import IssueRecord, Segment

TOOLTIP_SEPARATOR = "\n"


def merge(issues: Iterable[IssueRecord]) -> list[Segment]:
    """Partition the lines touched by *issues* into Segments.

    Sweeps the sorted set of boundaries (every ``line_start`` and
    ``line_end + 1``), keeping the set of issues active between two
    boundaries. Issues are tracked by position, so equal records stay
    distinct members of a covering set.
    """
    issues = list(issues)
    if not issues:
        return []

    opens: dict[int, list[int]] = defaultdict(list)
    closes: dict[int, list[int]] = defaultdict(list)
    for position, issue in enumerate(issues):
        opens[issue.line_start].append(position)
        closes[issue.line_end + 1].append(position)
    boundaries = sorted(opens.keys() | closes.keys())

    runs: list[tuple[int, int, tuple[int, ...]]] = []
    active: set[int] = set()
    for boundary, next_boundary in zip(boundaries, boundaries[1:]):
        active.difference_update(closes.get(boundary, ()))
        active.update(opens.get(boundary, ()))
        if not active:
            continue
        covering = tuple(sorted(active))
        if runs and runs[-1][2] == covering and runs[-1][1] == boundary - 1:
            runs[-1] = (runs[-1][0], next_boundary - 1, covering)
        else:
            runs.append((boundary, next_boundary - 1, covering))

    return [
        _segment(start, end, [(p, issues[p]) for p in covering])
        for start, end, covering in runs
    ]


def _segment(start: int, end: int, covering: Sequence[tuple[int, IssueRecord]]) -> Segment:
    records = tuple(issue for _, issue in covering)
    return Segment(
        line_start=start,
        line_end=end,
        covering_issues=records,
        highlight_class=max(issue.severity for issue in records),
        tooltip=build_tooltip(covering),
    )


def build_tooltip(covering: Sequence[tuple[int, IssueRecord]]) -> str:
    """Join ``"source: description"`` entries, most severe first.

    Ties fall back to source, then description, then position, so the text
    does not depend on the order issues were collected in.
    """
    ordered = sorted(
        covering,
        key=lambda item: (-item[1].severity, item[1].source, item[1].description, item[0]),
    )
    return TOOLTIP_SEPARATOR.join(
        f"{issue.source}: {issue.description}" for _, issue in ordered
    )
