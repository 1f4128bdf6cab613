import pytest
from conftest import unit_test_xml

from trends_app.core.discovery import discover
from trends_app.core.errors import InvalidSelector, MalformedArtifact
from trends_app.core.extractor import PathExtractor
from trends_app.core.parsers import UnitTestFormatParser, load_document

CATALOG = """<catalog>
  <item id="1" type="error">disk full</item>
  <item id="2" type="info">started</item>
  <item id="3" type="error">disk <b>very</b> full</item>
  <!-- trailing comment -->
</catalog>
"""

def _artifact(tmp_path, write_artifact, content, name="doc.xml"):
    write_artifact(tmp_path, name, content)
    return next(a for a in discover(tmp_path) if a.name == name)

def test_element_items_carry_text_and_attributes(tmp_path, write_artifact):
    art = _artifact(tmp_path, write_artifact, CATALOG)
    items = PathExtractor().extract_file(art, "//item")
    assert [i.raw_value for i in items] == ["disk full", "started", "disk very full"]
    assert items[0].attributes == {"id": "1", "type": "error"}
    assert all(i.source_file == "doc.xml" for i in items)

def test_attribute_and_predicate_selectors(tmp_path, write_artifact):
    art = _artifact(tmp_path, write_artifact, CATALOG)
    extractor = PathExtractor()
    ids = extractor.extract_file(art, "//item[@type='error']/@id")
    assert [i.raw_value for i in ids] == ["1", "3"]
    assert ids[0].attributes == {}
    wildcard = extractor.extract_file(art, "/catalog/*")
    assert len(wildcard) == 3

def test_text_nodes_and_contains(tmp_path, write_artifact):
    art = _artifact(tmp_path, write_artifact, CATALOG)
    items = PathExtractor().extract_file(art, "//item[contains(text(), 'disk')]/text()")
    assert [i.raw_value for i in items] == ["disk full", "disk ", " full"]

def test_scalar_results(tmp_path, write_artifact):
    art = _artifact(tmp_path, write_artifact, CATALOG)
    extractor = PathExtractor()
    assert [i.raw_value for i in extractor.extract_file(art, "count(//item)")] == ["3"]
    assert [i.raw_value for i in extractor.extract_file(art, "count(//item) div 2")] == ["1.5"]
    assert [i.raw_value for i in extractor.extract_file(art, "boolean(//item)")] == ["true"]
    assert [i.raw_value for i in extractor.extract_file(art, "string(//item[2]/@type)")] == ["info"]

def test_no_match_is_empty(tmp_path, write_artifact):
    art = _artifact(tmp_path, write_artifact, CATALOG)
    assert PathExtractor().extract_file(art, "//missing") == []

def test_count_matches_unit_test_parser_total(tmp_path, write_artifact):
    xml = unit_test_xml(["Success", "Failure", "Success", "Ignored"])
    art = _artifact(tmp_path, write_artifact, xml)
    (item,) = PathExtractor().extract_file(art, "count(//TestCase)")
    assert int(item.raw_value) == UnitTestFormatParser().parse(art).total == 4

@pytest.mark.parametrize("root", ["TestResults", "tSQLt"])
def test_count_matches_parser_total_with_default_namespace(tmp_path, write_artifact, root):
    xml = (
        f'<{root} xmlns="urn:t"><TestCase Result="Success"/>'
        f'<Group><TestCase Result="Failure"/></Group></{root}>'
    )
    art = _artifact(tmp_path, write_artifact, xml)
    record = UnitTestFormatParser().parse(art)
    (item,) = PathExtractor().extract_file(art, "count(//TestCase)")
    assert int(item.raw_value) == record.total == 2
    results = PathExtractor().extract_file(art, "//TestCase/@Result")
    assert [i.raw_value for i in results] == ["Success", "Failure"]

def test_prefixed_test_cases_are_not_counted(tmp_path, write_artifact):
    xml = (
        '<TestResults xmlns:t="urn:t">'
        '<t:TestCase Result="Success"/><TestCase Result="Failure"/></TestResults>'
    )
    art = _artifact(tmp_path, write_artifact, xml)
    (item,) = PathExtractor().extract_file(art, "count(//TestCase)")
    assert int(item.raw_value) == UnitTestFormatParser().parse(art).total == 1
    prefixed = PathExtractor().extract_file(art, "//t:TestCase/@Result")
    assert [i.raw_value for i in prefixed] == ["Success"]

def test_invalid_selector_raises(tmp_path, write_artifact):
    art = _artifact(tmp_path, write_artifact, CATALOG)
    with pytest.raises(InvalidSelector) as info:
        PathExtractor().extract(load_document(art), "//item[")
    assert info.value.expression == "//item["

def test_extract_many_is_fail_soft_per_file(tmp_path, write_artifact):
    write_artifact(tmp_path, "a.xml", '<r xmlns:t="urn:t"><t:Case>x</t:Case></r>', age_days=2)
    write_artifact(tmp_path, "b.xml", "<r><Case>y</Case></r>", age_days=1)
    write_artifact(tmp_path, "c.xml", "<r><broken></r>")
    outcome = PathExtractor().extract_many(discover(tmp_path, oldest_first=True), "//t:Case")
    assert [(i.source_file, i.raw_value) for i in outcome.results] == [("a.xml", "x")]
    assert sorted(e.file_name for e in outcome.errors) == ["b.xml", "c.xml"]

def test_extract_named_records_selector_errors(tmp_path, write_artifact):
    art = _artifact(tmp_path, write_artifact, CATALOG)
    result = PathExtractor().extract_named(art, {"errors": "//item[@type='error']", "bad": "//item["})
    assert [i.raw_value for i in result.extracted_elements["errors"]] == ["disk full", "disk very full"]
    assert "bad" in result.selector_errors
    assert result.error is None
    assert result.file_name == "doc.xml"

def test_extract_named_unreadable_file(tmp_path, write_artifact):
    art = _artifact(tmp_path, write_artifact, "<oops")
    result = PathExtractor().extract_named(art, {"all": "//*"})
    assert result.error is not None
    assert result.extracted_elements == {}
    with pytest.raises(MalformedArtifact):
        PathExtractor().extract_file(art, "//*")
