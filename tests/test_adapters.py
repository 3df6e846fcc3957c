"""Tests for codebrowser/adapters"""

import xml.etree.ElementTree as ET

import pytest

from codebrowser.adapters import (
    DEFAULT_ADAPTERS,
    REGISTRY,
    ParseError,
    UnknownAdapterError,
    resolve,
)
from codebrowser.adapters.coverage import COVERAGE, uncovered_ranges
from codebrowser.adapters.duplication import CPD
from codebrowser.adapters.lint import CHECKSTYLE, PADAWAN, PMD
from codebrowser.config import ConfigError
from codebrowser.document import ReportDocument
from codebrowser.models import IssueRecord, Severity

from conftest import CHECKSTYLE_XML, COVERAGE_XML, CPD_XML, PMD_XML

FOO = "/src/app/Foo.php"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _spans(records: list[IssueRecord]) -> list[tuple[int, int]]:
    return [(r.line_start, r.line_end) for r in records]


def _collect_errors():
    errors: list[tuple[str, ParseError]] = []

    def on_error(adapter, exc):
        errors.append((adapter.name, exc))

    return errors, on_error


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

def test_registry_holds_every_schema():
    assert DEFAULT_ADAPTERS == ("checkstyle", "pmd", "cpd", "padawan", "coverage")
    assert REGISTRY["cpd"] is CPD


def test_resolve_defaults_to_all():
    assert [a.name for a in resolve()] == list(DEFAULT_ADAPTERS)


def test_resolve_keeps_requested_order():
    assert resolve(["coverage", "checkstyle"]) == [COVERAGE, CHECKSTYLE]


def test_resolve_unknown_adapter_fails():
    with pytest.raises(UnknownAdapterError, match="phpmd2000"):
        resolve(["checkstyle", "phpmd2000"])


def test_unknown_adapter_is_a_config_error():
    assert issubclass(UnknownAdapterError, ConfigError)


# ---------------------------------------------------------------------------
# Checkstyle (default extraction)
# ---------------------------------------------------------------------------

class TestCheckstyle:
    def test_files_with_issues(self):
        doc = ReportDocument.from_strings(CHECKSTYLE_XML)
        assert CHECKSTYLE.get_files_with_issues(doc) == {FOO, "/src/app/Bar.php"}

    def test_one_record_per_child(self):
        doc = ReportDocument.from_strings(CHECKSTYLE_XML)
        node = doc.query("./checkstyle/file[@name]")[0]
        records = CHECKSTYLE.map_issues(node, FOO)
        assert _spans(records) == [(3, 3), (10, 10)]
        assert [r.severity for r in records] == [Severity.WARNING, Severity.ERROR]
        assert all(r.source == "Checkstyle" and r.file_path == FOO for r in records)

    def test_description_is_html_escaped(self):
        doc = ReportDocument.from_strings(CHECKSTYLE_XML)
        node = doc.query("./checkstyle/file[@name]")[0]
        records = CHECKSTYLE.map_issues(node, FOO)
        assert records[1].description == "Missing &lt;doc&gt; comment"

    def test_missing_line_skips_finding(self):
        node = ET.fromstring(
            '<file name="a.php">'
            '<error severity="error" message="no line"/>'
            '<error line="2" severity="error" message="kept"/>'
            "</file>"
        )
        errors, on_error = _collect_errors()
        records = CHECKSTYLE.map_issues(node, "a.php", on_error)
        assert [r.description for r in records] == ["kept"]
        assert len(errors) == 1
        assert errors[0][0] == "checkstyle"
        assert "line" in str(errors[0][1])

    def test_missing_message_skips_finding(self):
        node = ET.fromstring('<file name="a.php"><error line="2"/></file>')
        errors, on_error = _collect_errors()
        assert CHECKSTYLE.map_issues(node, "a.php", on_error) == []
        assert "message" in str(errors[0][1])

    def test_non_integer_line_skips_finding(self):
        node = ET.fromstring('<file name="a.php"><error line="two" message="m"/></file>')
        errors, on_error = _collect_errors()
        assert CHECKSTYLE.map_issues(node, "a.php", on_error) == []
        assert "not an integer" in str(errors[0][1])

    def test_errors_without_callback_are_dropped_silently(self):
        node = ET.fromstring('<file name="a.php"><error message="m"/></file>')
        assert CHECKSTYLE.map_issues(node, "a.php") == []

    def test_missing_severity_is_info(self):
        node = ET.fromstring('<file name="a.php"><error line="1" message="m"/></file>')
        assert CHECKSTYLE.map_issues(node, "a.php")[0].severity is Severity.INFO


def test_padawan_shares_default_extraction():
    doc = ReportDocument.from_strings(
        '<padawan><file name="a.php"><error line="5" severity="error" message="eval"/></file></padawan>'
    )
    assert PADAWAN.issues_by_file(doc) == {
        "a.php": [IssueRecord("a.php", 5, 5, "Padawan", "eval", Severity.ERROR)]
    }


# ---------------------------------------------------------------------------
# PMD (overridden description and severity)
# ---------------------------------------------------------------------------

class TestPmd:
    def test_range_text_and_priority(self):
        doc = ReportDocument.from_strings(PMD_XML)
        records = PMD.issues_by_file(doc)[FOO]
        assert records == [IssueRecord(FOO, 4, 6, "PMD", "Null dereference", Severity.ERROR)]

    @pytest.mark.parametrize("priority, expected", [
        ("1", Severity.BLOCKER),
        ("2", Severity.ERROR),
        ("3", Severity.WARNING),
        ("4", Severity.INFO),
        ("5", Severity.INFO),
    ])
    def test_priority_mapping(self, priority, expected):
        node = ET.fromstring(
            f'<file name="a.php"><violation beginline="1" priority="{priority}">x</violation></file>'
        )
        assert PMD.map_issues(node, "a.php")[0].severity is expected

    @pytest.mark.parametrize("attrs", ["", ' priority=""', ' priority=" "'])
    def test_absent_or_blank_priority_is_info(self, attrs):
        node = ET.fromstring(
            f'<file name="a.php"><violation beginline="1"{attrs}>x</violation></file>'
        )
        errors, on_error = _collect_errors()
        records = PMD.map_issues(node, "a.php", on_error)
        assert errors == []
        assert records[0].severity is Severity.INFO

    def test_bad_endline_is_clamped(self):
        node = ET.fromstring(
            '<file name="a.php"><violation beginline="7" endline="0" priority="3">x</violation></file>'
        )
        record = PMD.map_issues(node, "a.php")[0]
        assert (record.line_start, record.line_end) == (7, 7)

    def test_empty_text_skips_finding(self):
        node = ET.fromstring('<file name="a.php"><violation beginline="1"> </violation></file>')
        errors, on_error = _collect_errors()
        assert PMD.map_issues(node, "a.php", on_error) == []
        assert len(errors) == 1


# ---------------------------------------------------------------------------
# CPD (duplication spanning several files)
# ---------------------------------------------------------------------------

class TestCpd:
    def test_files_with_issues(self):
        doc = ReportDocument.from_strings(CPD_XML)
        assert CPD.get_files_with_issues(doc) == {FOO, "/src/lib/Baz.php"}

    def test_each_occurrence_gets_its_own_range(self):
        doc = ReportDocument.from_strings(CPD_XML)
        by_file = CPD.issues_by_file(doc)
        assert _spans(by_file[FOO]) == [(20, 24)]
        assert _spans(by_file["/src/lib/Baz.php"]) == [(7, 11)]

    def test_description_names_other_occurrences(self):
        doc = ReportDocument.from_strings(CPD_XML)
        by_file = CPD.issues_by_file(doc)
        assert by_file[FOO][0].description == (
            "Duplicate code: 5 lines, also in /src/lib/Baz.php:7"
        )
        assert by_file[FOO][0].severity is Severity.INFO
        assert by_file[FOO][0].source == "CPD"

    def test_duplication_inside_one_file(self):
        doc = ReportDocument.from_strings(
            '<pmd-cpd><duplication lines="3">'
            '<file line="1" path="a.php"/><file line="10" path="a.php"/>'
            "</duplication></pmd-cpd>"
        )
        records = CPD.issues_by_file(doc)["a.php"]
        assert _spans(records) == [(1, 3), (10, 12)]
        assert records[0].description.endswith("also in a.php:10")


# ---------------------------------------------------------------------------
# Coverage (grouped line markers)
# ---------------------------------------------------------------------------

class TestCoverage:
    def test_files_with_issues_in_nested_packages(self):
        doc = ReportDocument.from_strings(COVERAGE_XML)
        assert COVERAGE.get_files_with_issues(doc) == {FOO}

    def test_uncovered_lines_are_grouped(self):
        doc = ReportDocument.from_strings(COVERAGE_XML)
        records = COVERAGE.issues_by_file(doc)[FOO]
        assert _spans(records) == [(2, 4), (8, 8)]
        assert {r.description for r in records} == {"Not covered"}
        assert {r.severity for r in records} == {Severity.INFO}

    def test_conditional_markers_are_ignored(self):
        node = ET.fromstring(
            '<file name="a.php"><line num="3" type="cond" count="0"/></file>'
        )
        assert uncovered_ranges(node, "a.php") == []

    def test_fully_covered_file_has_no_records(self):
        node = ET.fromstring(
            '<file name="a.php"><line num="1" type="stmt" count="2"/></file>'
        )
        assert COVERAGE.map_issues(node, "a.php") == []

    def test_bad_line_number_is_reported(self):
        node = ET.fromstring(
            '<file name="a.php"><line num="x" type="stmt" count="0"/></file>'
        )
        errors, on_error = _collect_errors()
        assert COVERAGE.map_issues(node, "a.php", on_error) == []
        assert errors[0][0] == "coverage"

    @pytest.mark.parametrize("count", ["", "many"])
    def test_bad_hit_count_is_reported(self, count):
        node = ET.fromstring(
            f'<file name="a.php"><line num="3" type="stmt" count="{count}"/></file>'
        )
        errors, on_error = _collect_errors()
        assert COVERAGE.map_issues(node, "a.php", on_error) == []
        assert len(errors) == 1
        assert "count" in str(errors[0][1])

    def test_marker_without_count_is_reported(self):
        node = ET.fromstring('<file name="a.php"><line num="3" type="stmt"/></file>')
        errors, on_error = _collect_errors()
        assert COVERAGE.map_issues(node, "a.php", on_error) == []
        assert len(errors) == 1
