"""Schema parsers turning one XML artifact into a normalized TestRunRecord.

Two report shapes are supported:

* summary format (NUnit 2.x ``<test-results>`` / 3.x ``<test-run>``), where the
  counts live as attributes on the root element;
* unit-test format (``<TestResults>`` / ``<tSQLt>``), where every ``TestCase``
  descendant carries a ``Result`` attribute and counts are derived.

A document whose root is not recognised by a parser yields a zero-filled record
rather than an error. Only unreadable or non-well-formed files raise
``MalformedArtifact``.

Element names are matched after the default namespace is removed, so a
prefixed ``<t:TestCase>`` is not a test case. XPath selectors see the same tree.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Protocol

from lxml import etree

from .config import (
    DURATION_TAG,
    FAILED_RESULTS,
    PASSED_RESULTS,
    RESULT_ATTRIBUTE,
    SUMMARY_FORMAT,
    SUMMARY_ROOT_TAGS,
    TEST_CASE_TAG,
    UNIT_TEST_FORMAT,
    UNIT_TEST_ROOT_TAGS,
)
from .errors import MalformedArtifact
from .models import ArtifactFile, BatchOutcome, FileError, TestRunRecord

logger = logging.getLogger(__name__)


def _xml_parser() -> etree.XMLParser:
    # Parser instances are not shared between threads; build one per document.
    return etree.XMLParser(resolve_entities=False, no_network=True, remove_blank_text=False)


def strip_default_namespace(root) -> None:
    """Move elements in their in-scope default namespace to no namespace.

    Unprefixed names in selectors then match the same elements the parsers
    count. Prefixed elements and attributes are left alone.
    """
    for element in root.iter(etree.Element):
        qname = etree.QName(element)
        if qname.namespace is not None and element.nsmap.get(None) == qname.namespace:
            element.tag = qname.localname


def load_document(artifact: ArtifactFile) -> etree._ElementTree:
    """Parse ``artifact`` into an lxml element tree with the default namespace removed."""
    try:
        document = etree.parse(str(artifact.path), _xml_parser())
    except (etree.XMLSyntaxError, OSError) as exc:
        raise MalformedArtifact(artifact.name, str(exc)) from exc
    strip_default_namespace(document.getroot())
    return document


def int_attribute(element, name: str, default: int = 0) -> int:
    value = element.get(name)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError:
        return default


def float_value(text: str | None, default: float = 0.0) -> float:
    if text is None:
        return default
    try:
        return float(text.strip())
    except ValueError:
        return default


def success_rate(passed: int, total: int) -> float:
    # Not clamped: a report claiming more passes than tests yields > 100.
    if total > 0:
        return passed / total * 100
    return 0.0


class ArtifactParser(Protocol):
    format: str

    def parse(self, artifact: ArtifactFile) -> TestRunRecord: ...


class SummaryFormatParser:
    format = SUMMARY_FORMAT

    def parse(self, artifact: ArtifactFile) -> TestRunRecord:
        root = load_document(artifact).getroot()
        record = TestRunRecord(file_name=artifact.name, file_date=artifact.file_date)
        if root.tag not in SUMMARY_ROOT_TAGS:
            logger.debug("%s: root <%s> is not a summary report", artifact.name, root.tag)
            return record

        record.total = int_attribute(root, "total")
        record.passed = int_attribute(root, "passed")
        record.failed = int_attribute(root, "failed")
        record.skipped = int_attribute(root, "skipped")
        record.error_count = int_attribute(root, "errors")
        record.inconclusive = int_attribute(root, "inconclusive")

        time_attr = root.get("time")
        if time_attr:
            record.execution_time_seconds = float_value(time_attr)

        date_attr = root.get("date")
        if date_attr:
            record.file_date = date_attr

        record.success_rate = success_rate(record.passed, record.total)
        return record


class UnitTestFormatParser:
    format = UNIT_TEST_FORMAT

    def parse(self, artifact: ArtifactFile) -> TestRunRecord:
        root = load_document(artifact).getroot()
        record = TestRunRecord(file_name=artifact.name, file_date=artifact.file_date)
        if root.tag not in UNIT_TEST_ROOT_TAGS:
            logger.debug("%s: root <%s> is not a unit-test report", artifact.name, root.tag)
            return record

        total = passed = failed = 0
        for case in root.iter(TEST_CASE_TAG):
            total += 1
            outcome = (case.get(RESULT_ATTRIBUTE) or "").lower()
            if outcome in PASSED_RESULTS:
                passed += 1
            elif outcome in FAILED_RESULTS:
                failed += 1

        record.total = total
        record.passed = passed
        record.failed = failed
        # Cases with a missing or unrecognised Result count as skipped; not clamped.
        record.skipped = total - passed - failed

        duration = next(root.iter(DURATION_TAG), None)
        if duration is not None:
            record.execution_time_seconds = float_value("".join(duration.itertext()))

        record.success_rate = success_rate(passed, total)
        return record


PARSERS: dict[str, ArtifactParser] = {
    SUMMARY_FORMAT: SummaryFormatParser(),
    UNIT_TEST_FORMAT: UnitTestFormatParser(),
}


def get_parser(format_name: str) -> ArtifactParser:
    try:
        return PARSERS[format_name]
    except KeyError:
        raise ValueError(f"Unknown artifact format: {format_name}") from None


def parse_artifacts(parser: ArtifactParser, artifacts: Iterable[ArtifactFile]) -> BatchOutcome:
    """Parse each artifact, collecting failures instead of raising."""
    outcome = BatchOutcome()
    for artifact in artifacts:
        try:
            outcome.results.append(parser.parse(artifact))
        except MalformedArtifact as exc:
            logger.warning("Error parsing %s file %s: %s", parser.format, artifact.name, exc.reason)
            outcome.errors.append(FileError(file_name=artifact.name, message=str(exc)))
    return outcome
