"""Adapters for lint-style reports: one file node with line-level children.

    checkstyle  <checkstyle><file name><error line message severity/>
    pmd         <pmd><file name><violation beginline endline priority>text
    padawan     <padawan><file name><error line message severity/>
"""

import xml.etree.ElementTree as ET
from dataclasses import replace

from codebrowser.adapters.base import (
    SchemaAdapter,
    attribute_extractors,
    element_text,
    int_attr,
)
from codebrowser.models import Severity

# PMD priority 1 (highest) .. 5 (lowest)
_PMD_PRIORITIES = {
    1: Severity.BLOCKER,
    2: Severity.ERROR,
    3: Severity.WARNING,
}


def pmd_priority(finding: ET.Element, node: ET.Element) -> Severity:
    if not (finding.get("priority") or "").strip():
        return Severity.INFO
    return _PMD_PRIORITIES.get(int_attr(finding, "priority"), Severity.INFO)


CHECKSTYLE = SchemaAdapter(
    name="checkstyle",
    source="Checkstyle",
    file_query="./checkstyle/file[@name]",
)

PMD = SchemaAdapter(
    name="pmd",
    source="PMD",
    file_query="./pmd/file[@name]",
    extractors=replace(
        attribute_extractors(line_start="beginline", line_end="endline"),
        description=element_text,
        severity=pmd_priority,
    ),
)

PADAWAN = SchemaAdapter(
    name="padawan",
    source="Padawan",
    file_query="./padawan/file[@name]",
)
