import pytest
from conftest import summary_xml, unit_test_xml

from trends_app.core.config import SUMMARY_FORMAT, UNIT_TEST_FORMAT
from trends_app.core.discovery import discover
from trends_app.core.errors import MalformedArtifact
from trends_app.core.parsers import (
    SummaryFormatParser,
    UnitTestFormatParser,
    get_parser,
    parse_artifacts,
)


def _artifact(tmp_path, write_artifact, content, name="run.xml"):
    write_artifact(tmp_path, name, content)
    return next(a for a in discover(tmp_path) if a.name == name)


# ------------------ Summary format ------------------
def test_summary_counts_and_rate(tmp_path, write_artifact):
    art = _artifact(tmp_path, write_artifact, summary_xml(total=20, passed=15, failed=3, skipped=2, errors=1))
    rec = SummaryFormatParser().parse(art)
    assert (rec.total, rec.passed, rec.failed, rec.skipped, rec.error_count) == (20, 15, 3, 2, 1)
    assert rec.success_rate == pytest.approx(75.0)
    assert rec.file_name == "run.xml"
    assert rec.file_date == art.file_date
    assert rec.execution_time_seconds is None


def test_summary_nunit3_root_time_and_date_override(tmp_path, write_artifact):
    xml = summary_xml(root="test-run", extra=' time="12.5" date="2024-05-01"')
    rec = SummaryFormatParser().parse(_artifact(tmp_path, write_artifact, xml))
    assert rec.total == 10
    assert rec.execution_time_seconds == pytest.approx(12.5)
    assert rec.file_date == "2024-05-01"


def test_summary_missing_and_non_numeric_attributes_default_to_zero(tmp_path, write_artifact):
    xml = '<test-results total="abc" passed="" time="soon"/>'
    rec = SummaryFormatParser().parse(_artifact(tmp_path, write_artifact, xml))
    assert rec.total == 0 and rec.passed == 0 and rec.failed == 0 and rec.inconclusive == 0
    assert rec.execution_time_seconds == 0.0
    assert rec.success_rate == 0.0


def test_summary_unknown_root_returns_zero_record(tmp_path, write_artifact):
    rec = SummaryFormatParser().parse(_artifact(tmp_path, write_artifact, '<report total="5" passed="5"/>'))
    assert rec.total == 0
    assert rec.passed == 0
    assert rec.success_rate == 0.0


def test_summary_namespaced_root_is_recognised(tmp_path, write_artifact):
    xml = '<test-results xmlns="urn:nunit" total="4" passed="4"/>'
    rec = SummaryFormatParser().parse(_artifact(tmp_path, write_artifact, xml))
    assert rec.total == 4
    assert rec.success_rate == 100.0


def test_summary_rate_is_not_clamped(tmp_path, write_artifact):
    xml = summary_xml(total=2, passed=5, failed=0)
    rec = SummaryFormatParser().parse(_artifact(tmp_path, write_artifact, xml))
    assert rec.success_rate == pytest.approx(250.0)


# ------------------ Unit-test format ------------------
def test_unit_test_counts_case_insensitive(tmp_path, write_artifact):
    xml = unit_test_xml(["Success", "pass", "FAILURE", "fail", "Success"])
    rec = UnitTestFormatParser().parse(_artifact(tmp_path, write_artifact, xml))
    assert rec.total == 5
    assert rec.passed == 3
    assert rec.failed == 2
    assert rec.skipped == 0
    assert rec.success_rate == pytest.approx(60.0)
    assert rec.execution_time_seconds == pytest.approx(1.25)


def test_unit_test_unrecognised_results_become_skipped(tmp_path, write_artifact):
    xml = unit_test_xml(["Success", "Error", "Ignored", ""])
    rec = UnitTestFormatParser().parse(_artifact(tmp_path, write_artifact, xml))
    assert rec.total == 4
    assert rec.skipped == rec.total - rec.passed - rec.failed == 3


def test_unit_test_bad_duration_defaults_to_zero(tmp_path, write_artifact):
    xml = unit_test_xml(["Success"], duration="n/a", root="tSQLt")
    rec = UnitTestFormatParser().parse(_artifact(tmp_path, write_artifact, xml))
    assert rec.total == 1
    assert rec.execution_time_seconds == 0.0


def test_unit_test_without_duration(tmp_path, write_artifact):
    xml = unit_test_xml(["Success"], duration=None)
    rec = UnitTestFormatParser().parse(_artifact(tmp_path, write_artifact, xml))
    assert rec.execution_time_seconds is None


def test_unit_test_no_cases_rate_zero(tmp_path, write_artifact):
    rec = UnitTestFormatParser().parse(_artifact(tmp_path, write_artifact, "<TestResults/>"))
    assert rec.total == 0
    assert rec.success_rate == 0.0


def test_unit_test_unknown_root_returns_zero_record(tmp_path, write_artifact):
    xml = unit_test_xml(["Success", "Success"], root="Results")
    rec = UnitTestFormatParser().parse(_artifact(tmp_path, write_artifact, xml))
    assert rec.total == 0
    assert rec.passed == 0


# ------------------ Shared behaviour ------------------
@pytest.mark.parametrize("parser", [SummaryFormatParser(), UnitTestFormatParser()])
def test_malformed_xml_raises(tmp_path, write_artifact, parser):
    art = _artifact(tmp_path, write_artifact, "<test-results total='1'>")
    with pytest.raises(MalformedArtifact) as info:
        parser.parse(art)
    assert info.value.file_name == "run.xml"


@pytest.mark.parametrize("parser", [SummaryFormatParser(), UnitTestFormatParser()])
def test_other_family_root_never_throws(tmp_path, write_artifact, parser):
    for i, xml in enumerate([summary_xml(), unit_test_xml(["Success"]), "<anything/>"]):
        rec = parser.parse(_artifact(tmp_path, write_artifact, xml, name=f"f{i}.xml"))
        assert 0.0 <= rec.success_rate <= 100.0


def test_parse_artifacts_collects_errors(tmp_path, write_artifact):
    write_artifact(tmp_path, "good.xml", summary_xml())
    write_artifact(tmp_path, "bad.xml", "not xml at all")
    outcome = parse_artifacts(SummaryFormatParser(), discover(tmp_path))
    assert [r.file_name for r in outcome.results] == ["good.xml"]
    assert [e.file_name for e in outcome.errors] == ["bad.xml"]
    assert "bad.xml" in outcome.errors[0].message


def test_get_parser_by_format():
    assert isinstance(get_parser(SUMMARY_FORMAT), SummaryFormatParser)
    assert isinstance(get_parser(UNIT_TEST_FORMAT), UnitTestFormatParser)
    with pytest.raises(ValueError):
        get_parser("junit")
