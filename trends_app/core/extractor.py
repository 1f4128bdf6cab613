"""Selector-driven extraction (XPath 1.0) from parsed artifacts."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping

from lxml import etree

from .errors import InvalidSelector, MalformedArtifact
from .models import ArtifactFile, BatchOutcome, CustomFileResult, ExtractedItem, FileError
from .parsers import load_document

logger = logging.getLogger(__name__)


def _format_number(value: float) -> str:
    if value.is_integer():
        return str(int(value))
    return repr(value)


def _document_namespaces(document) -> dict[str, str]:
    root = document.getroot() if hasattr(document, "getroot") else document
    # XPath cannot bind the default (unprefixed) namespace
    return {prefix: uri for prefix, uri in root.nsmap.items() if prefix}


def compile_selector(expression: str, namespaces: Mapping[str, str] | None = None) -> etree.XPath:
    try:
        return etree.XPath(expression, namespaces=dict(namespaces or {}))
    except etree.XPathError as exc:
        raise InvalidSelector(expression, str(exc)) from exc


def node_to_item(node, source_file: str) -> ExtractedItem:
    """Convert one XPath result node into an :class:`ExtractedItem`.

    Elements yield their full text content plus their own attributes; attribute
    and text results yield the literal string with no attributes.
    """
    if isinstance(node, etree._Element):
        if isinstance(node.tag, str):
            return ExtractedItem(
                source_file=source_file,
                raw_value="".join(node.itertext()),
                attributes={str(k): str(v) for k, v in node.attrib.items()},
            )
        # comment / processing instruction
        return ExtractedItem(source_file=source_file, raw_value=node.text or "")
    if isinstance(node, tuple):
        # namespace axis yields (prefix, uri)
        return ExtractedItem(source_file=source_file, raw_value=str(node[1]))
    return ExtractedItem(source_file=source_file, raw_value=str(node))


def _result_items(result, source_file: str) -> Iterator[ExtractedItem]:
    if isinstance(result, bool):
        yield ExtractedItem(source_file=source_file, raw_value="true" if result else "false")
    elif isinstance(result, float):
        yield ExtractedItem(source_file=source_file, raw_value=_format_number(result))
    elif isinstance(result, list):
        for node in result:
            yield node_to_item(node, source_file)
    else:
        yield ExtractedItem(source_file=source_file, raw_value=str(result))


class PathExtractor:
    """Evaluate selector expressions against parsed documents.

    Prefixes declared on a document's root element are bound for that
    document, so ``//t:Case`` works wherever ``xmlns:t`` is declared and
    raises :class:`InvalidSelector` elsewhere.
    """

    def extract(self, document, expression: str, source_file: str = "") -> list[ExtractedItem]:
        selector = compile_selector(expression, _document_namespaces(document))
        try:
            result = selector(document)
        except etree.XPathError as exc:
            raise InvalidSelector(expression, str(exc)) from exc
        return list(_result_items(result, source_file))

    def extract_file(self, artifact: ArtifactFile, expression: str) -> list[ExtractedItem]:
        return self.extract(load_document(artifact), expression, source_file=artifact.name)

    def extract_many(self, artifacts: Iterable[ArtifactFile], expression: str) -> BatchOutcome:
        """Run one selector across files; per-file failures become ``FileError`` entries."""
        outcome = BatchOutcome()
        for artifact in artifacts:
            try:
                outcome.results.extend(self.extract_file(artifact, expression))
            except (MalformedArtifact, InvalidSelector) as exc:
                logger.warning("Error processing %s: %s", artifact.name, exc)
                outcome.errors.append(FileError(file_name=artifact.name, message=str(exc)))
        return outcome

    def extract_named(
        self,
        artifact: ArtifactFile,
        selectors: Mapping[str, str],
    ) -> CustomFileResult:
        """Evaluate every named selector on one file.

        A selector that fails is recorded under ``selector_errors`` and the
        remaining selectors still run. An unreadable file sets ``error``.
        """
        result = CustomFileResult(
            file_name=artifact.name,
            file_path=str(artifact.path),
            file_last_modified=artifact.modified_at,
        )
        try:
            document = load_document(artifact)
        except MalformedArtifact as exc:
            logger.warning("Error processing %s: %s", artifact.name, exc.reason)
            result.error = str(exc)
            return result
        for name, expression in selectors.items():
            try:
                result.extracted_elements[name] = self.extract(document, expression, artifact.name)
            except InvalidSelector as exc:
                logger.debug("Selector %s failed on %s: %s", name, artifact.name, exc.reason)
                result.selector_errors[name] = exc.reason
        return result
