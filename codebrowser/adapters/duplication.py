"""Adapter for PMD copy/paste detector reports.

    <pmd-cpd>
      <duplication lines="12" tokens="80">
        <file line="10" path="/src/a.php"/>
        <file line="42" path="/src/b.php"/>
        <codefragment>...</codefragment>
      </duplication>
    </pmd-cpd>

A duplication node names several files, so the finding container is the
duplication itself and each matching ``file`` child becomes one record.
"""

import html
import xml.etree.ElementTree as ET

from codebrowser.adapters.base import (
    Extractors,
    SchemaAdapter,
    fixed_severity,
    int_attr,
)
from codebrowser.models import Severity


def _occurrences(node: ET.Element) -> list[ET.Element]:
    return node.findall("file")


def duplication_files(node: ET.Element) -> list[str]:
    paths: list[str] = []
    for occurrence in _occurrences(node):
        path = occurrence.get("path")
        if path and path not in paths:
            paths.append(path)
    return paths


def duplication_findings(node: ET.Element, file_path: str) -> list[ET.Element]:
    return [o for o in _occurrences(node) if o.get("path") == file_path]


def _line_start(finding: ET.Element, node: ET.Element) -> int:
    return int_attr(finding, "line")


def _line_end(finding: ET.Element, node: ET.Element, start: int) -> int:
    if node.get("lines") is None:
        return start
    return start + int_attr(node, "lines") - 1


def _description(finding: ET.Element, node: ET.Element) -> str:
    others = [
        f"{o.get('path')}:{o.get('line')}"
        for o in _occurrences(node)
        if o is not finding
    ]
    text = f"Duplicate code: {node.get('lines', '?')} lines"
    if others:
        text += ", also in " + ", ".join(others)
    return html.escape(text)


CPD = SchemaAdapter(
    name="cpd",
    source="CPD",
    file_query="./pmd-cpd/duplication/file[@path]",
    path_attr="path",
    node_query="./pmd-cpd/duplication",
    node_files=duplication_files,
    findings=duplication_findings,
    extractors=Extractors(
        line_start=_line_start,
        line_end=_line_end,
        description=_description,
        severity=fixed_severity(Severity.parse("notice")),
    ),
)
