"""Default report adapter.

An adapter turns one report schema into IssueRecords. ``SchemaAdapter`` holds
the schema description (where the file nodes live, which attribute carries the
path) and an ``Extractors`` struct with one function per record field.
Schema-specific adapters reuse ``attribute_extractors()`` and replace only the
fields they read differently, e.g.::

    PMD = SchemaAdapter(
        name="pmd",
        source="PMD",
        file_query="./pmd/file[@name]",
        extractors=replace(attribute_extractors("beginline", "endline"),
                           description=element_text),
    )
"""

import html
import xml.etree.ElementTree as ET
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Protocol

from codebrowser.document import ReportDocument
from codebrowser.models import IssueRecord, Severity


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class ParseError(Exception):
    """Raised when a finding lacks a required attribute or has a bad value."""


# ---------------------------------------------------------------------------
# Interface
# ---------------------------------------------------------------------------

ErrorCallback = Callable[["Adapter", ParseError], None]


class Adapter(Protocol):
    name: str
    source: str

    def get_files_with_issues(self, document: ReportDocument) -> set[str]: ...

    def map_issues(
        self,
        node: ET.Element,
        file_path: str,
        on_error: ErrorCallback | None = None,
    ) -> list[IssueRecord]: ...

    def issues_by_file(
        self,
        document: ReportDocument,
        on_error: ErrorCallback | None = None,
    ) -> dict[str, list[IssueRecord]]: ...


# ---------------------------------------------------------------------------
# Field extractors
# ---------------------------------------------------------------------------

# Every extractor receives the finding element and the report node it belongs to.
LineStartFn   = Callable[[ET.Element, ET.Element], int]
LineEndFn     = Callable[[ET.Element, ET.Element, int], int]
DescriptionFn = Callable[[ET.Element, ET.Element], str]
SeverityFn    = Callable[[ET.Element, ET.Element], Severity]


@dataclass(frozen=True)
class Extractors:
    line_start: LineStartFn
    line_end: LineEndFn
    description: DescriptionFn
    severity: SeverityFn


def require(element: ET.Element, attr: str) -> str:
    value = element.get(attr)
    if value is None or not value.strip():
        raise ParseError(f"<{element.tag}> is missing required attribute '{attr}'")
    return value


def int_attr(element: ET.Element, attr: str) -> int:
    raw = require(element, attr)
    try:
        return int(raw)
    except ValueError:
        raise ParseError(
            f"<{element.tag}> attribute '{attr}' is not an integer: {raw!r}"
        ) from None


def element_text(finding: ET.Element, node: ET.Element) -> str:
    """Description taken from the element body (PMD style)."""
    text = " ".join((finding.text or "").split())
    if not text:
        raise ParseError(f"<{finding.tag}> has no description text")
    return html.escape(text)


def attribute_extractors(
    line_start: str = "line",
    line_end: str | None = None,
    description: str = "message",
    severity: str = "severity",
) -> Extractors:
    """Build extractors reading plain attributes.

    Without *line_end* (or when the attribute is absent on a finding) the
    finding is single-line.
    """

    def _line_start(finding: ET.Element, node: ET.Element) -> int:
        return int_attr(finding, line_start)

    def _line_end(finding: ET.Element, node: ET.Element, start: int) -> int:
        if line_end is None or finding.get(line_end) is None:
            return start
        return int_attr(finding, line_end)

    def _description(finding: ET.Element, node: ET.Element) -> str:
        return html.escape(require(finding, description))

    def _severity(finding: ET.Element, node: ET.Element) -> Severity:
        return Severity.parse(finding.get(severity))

    return Extractors(_line_start, _line_end, _description, _severity)


def fixed_severity(severity: Severity) -> SeverityFn:
    return lambda finding, node: severity


def element_children(node: ET.Element, file_path: str) -> Iterable[ET.Element]:
    return list(node)


# ---------------------------------------------------------------------------
# Default adapter
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SchemaAdapter:
    """Adapter for one report schema.

    Attributes:
        name:       Registry identifier, also used in log messages.
        source:     Label stored on every record (``IssueRecord.source``).
        file_query: Path of the nodes naming a file with issues.
        path_attr:  Attribute of those nodes holding the file path.
        node_query: Path of the nodes holding findings. Defaults to
                    *file_query* (the file node is the finding container).
        node_files: Returns the file paths a node holds findings for.
        findings:   Returns the finding elements of a node for one file.
    """

    name: str
    source: str
    file_query: str
    extractors: Extractors = field(default_factory=attribute_extractors)
    path_attr: str = "name"
    node_query: str | None = None
    node_files: Callable[[ET.Element], list[str]] | None = None
    findings: Callable[[ET.Element, str], Iterable[ET.Element]] = element_children

    def get_files_with_issues(self, document: ReportDocument) -> set[str]:
        return {
            node.get(self.path_attr)
            for node in document.query(self.file_query)
            if node.get(self.path_attr)
        }

    def map_issues(
        self,
        node: ET.Element,
        file_path: str,
        on_error: ErrorCallback | None = None,
    ) -> list[IssueRecord]:
        """Map the findings of *node* for *file_path* to IssueRecords.

        Findings raising ParseError are skipped and handed to *on_error*.
        """
        records: list[IssueRecord] = []
        for finding in self.findings(node, file_path):
            try:
                records.append(self.map_finding(finding, node, file_path))
            except ParseError as exc:
                if on_error is not None:
                    on_error(self, exc)
        return records

    def map_finding(self, finding: ET.Element, node: ET.Element, file_path: str) -> IssueRecord:
        ex = self.extractors
        start = ex.line_start(finding, node)
        return IssueRecord(
            file_path=file_path,
            line_start=start,
            line_end=ex.line_end(finding, node, start),
            source=self.source,
            description=ex.description(finding, node),
            severity=ex.severity(finding, node),
        )

    def issues_by_file(
        self,
        document: ReportDocument,
        on_error: ErrorCallback | None = None,
    ) -> dict[str, list[IssueRecord]]:
        """Map every node of this schema, grouped by file path in document order."""
        result: dict[str, list[IssueRecord]] = {}
        for node in document.query(self.node_query or self.file_query):
            for file_path in self._files_of(node):
                result.setdefault(file_path, []).extend(
                    self.map_issues(node, file_path, on_error)
                )
        return result

    def _files_of(self, node: ET.Element) -> list[str]:
        if self.node_files is not None:
            return self.node_files(node)
        path = node.get(self.path_attr)
        return [path] if path else []
