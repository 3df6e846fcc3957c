"""Adapter for Clover coverage reports.

    <coverage>
      <project>
        <package>                       (optional)
          <file name="/src/a.php">
            <line num="12" type="stmt" count="0"/>

Uncovered statement and method lines are grouped into ranges: a range runs
until the next covered marker, so non-executable lines between two uncovered
markers stay highlighted.
"""

import xml.etree.ElementTree as ET

from codebrowser.adapters.base import (
    Extractors,
    SchemaAdapter,
    attribute_extractors,
    fixed_severity,
    int_attr,
)
from codebrowser.models import Severity

NOT_COVERED = "Not covered"

_EXECUTABLE = ("stmt", "method")


def _range(start: str, end: str, count: str = "0") -> ET.Element:
    return ET.Element("uncovered", {"start": start, "end": end, "count": count})


def uncovered_ranges(node: ET.Element, file_path: str) -> list[ET.Element]:
    """Group uncovered markers of a file node into ``<uncovered start end>``.

    Markers with a non-numeric ``num`` or ``count`` are passed on as their
    own range, carrying the raw values, so extraction reports them.
    """
    markers: list[tuple[int, int]] = []
    ranges: list[ET.Element] = []
    for marker in node.findall("line"):
        if marker.get("type", "stmt") not in _EXECUTABLE:
            continue
        num, count = marker.get("num", ""), marker.get("count", "")
        try:
            markers.append((int(num), int(count)))
        except ValueError:
            ranges.append(_range(num, num, count))

    start = end = None
    for num, count in sorted(markers):
        if count == 0:
            if start is None:
                start = num
            end = num
        elif start is not None:
            ranges.append(_range(str(start), str(end)))
            start = end = None
    if start is not None:
        ranges.append(_range(str(start), str(end)))
    return ranges


_ranges = attribute_extractors(line_start="start", line_end="end")


def _range_start(finding: ET.Element, node: ET.Element) -> int:
    int_attr(finding, "count")
    return _ranges.line_start(finding, node)


COVERAGE = SchemaAdapter(
    name="coverage",
    source="Coverage",
    file_query="./coverage//file[@name]",
    findings=uncovered_ranges,
    extractors=Extractors(
        line_start=_range_start,
        line_end=_ranges.line_end,
        description=lambda finding, node: NOT_COVERED,
        severity=fixed_severity(Severity.INFO),
    ),
)
