"""Structural document metrics built on a single element fold."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import TypeVar

from lxml import etree

from trends_app.core.config import BUSINESS_TAG_MARKERS
from trends_app.core.models import ArtifactFile, FileMetrics

T = TypeVar("T")


def _tag_name(element) -> str:
    return etree.QName(element).localname


def fold_elements(root, func: Callable[[T, etree._Element], T], initial: T) -> T:
    """Left fold over ``root`` and every descendant element in document order.

    Comments and processing instructions are not visited.
    """
    acc = initial
    for element in root.iter(etree.Element):
        acc = func(acc, element)
    return acc


def count_elements(root) -> int:
    return fold_elements(root, lambda n, _el: n + 1, 0)


def tag_histogram(root) -> dict[str, int]:
    def visit(counts: dict[str, int], element) -> dict[str, int]:
        name = _tag_name(element)
        counts[name] = counts.get(name, 0) + 1
        return counts

    return fold_elements(root, visit, {})


def count_tags_containing(root, fragment: str) -> int:
    """Count elements whose tag name contains ``fragment`` (case-insensitive)."""
    needle = fragment.lower()
    return fold_elements(root, lambda n, el: n + (needle in _tag_name(el).lower()), 0)


def count_marker_tags(root, markers: Mapping[str, str] = BUSINESS_TAG_MARKERS) -> dict[str, int]:
    """Apply :func:`count_tags_containing` to every ``markers`` entry."""
    return {key: count_tags_containing(root, fragment) for key, fragment in markers.items()}


def file_metrics(root, artifact: ArtifactFile) -> FileMetrics:
    markers = count_marker_tags(root)
    return FileMetrics(
        file_name=artifact.name,
        file_last_modified=artifact.modified_at,
        root_element_name=_tag_name(root),
        total_elements=count_elements(root),
        element_types=tag_histogram(root),
        error_count=markers["error_count"],
        warning_count=markers["warning_count"],
        config_count=markers["config_count"],
        record_count=markers["record_count"],
    )
