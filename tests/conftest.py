"""Sample reports shared by the adapter, store and run tests."""

import pytest

CHECKSTYLE_XML = """\
<checkstyle version="5.0">
  <file name="/src/app/Foo.php">
    <error line="3" column="1" severity="warning" message="Unused variable $x" source="Generic"/>
    <error line="10" severity="error" message="Missing &lt;doc&gt; comment" source="Generic"/>
  </file>
  <file name="/src/app/Bar.php">
    <error line="1" severity="info" message="File header" source="Generic"/>
  </file>
</checkstyle>
"""

PMD_XML = """\
<pmd version="4.2">
  <file name="/src/app/Foo.php">
    <violation beginline="4" endline="6" rule="UnusedLocal" priority="2">
      Null dereference
    </violation>
  </file>
</pmd>
"""

CPD_XML = """\
<pmd-cpd>
  <duplication lines="5" tokens="40">
    <file line="20" path="/src/app/Foo.php"/>
    <file line="7" path="/src/lib/Baz.php"/>
    <codefragment>...</codefragment>
  </duplication>
</pmd-cpd>
"""

COVERAGE_XML = """\
<coverage generated="1">
  <project timestamp="1">
    <package name="app">
      <file name="/src/app/Foo.php">
        <line num="1" type="stmt" count="3"/>
        <line num="2" type="stmt" count="0"/>
        <line num="4" type="stmt" count="0"/>
        <line num="5" type="stmt" count="1"/>
        <line num="8" type="method" count="0"/>
      </file>
    </package>
  </project>
</coverage>
"""


@pytest.fixture
def report_dir(tmp_path):
    logs = tmp_path / "logs"
    logs.mkdir()
    (logs / "checkstyle.xml").write_text(CHECKSTYLE_XML, encoding="utf-8")
    (logs / "pmd.xml").write_text(PMD_XML, encoding="utf-8")
    (logs / "cpd.xml").write_text(CPD_XML, encoding="utf-8")
    (logs / "coverage.xml").write_text(COVERAGE_XML, encoding="utf-8")
    return logs
