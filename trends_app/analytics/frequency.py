"""Frequency and business-metric aggregations over extracted data."""

from __future__ import annotations

from collections.abc import Sequence

import pandas as pd

from trends_app.core.config import TOP_VALUES_LIMIT
from trends_app.core.mappers import items_to_dataframe
from trends_app.core.models import BusinessTrends, ExtractedItem, ExtractionStats, FileMetrics


def value_frequencies(values: pd.Series, limit: int | None = TOP_VALUES_LIMIT) -> pd.Series:
    """Count occurrences, most frequent first.

    Equal counts keep first-encountered order.
    """
    counts = values.groupby(values, sort=False).size()
    counts = counts.sort_values(ascending=False, kind="stable")
    if limit is not None:
        counts = counts.head(limit)
    return counts


def aggregate_extracted(
    items: Sequence[ExtractedItem],
    limit: int = TOP_VALUES_LIMIT,
) -> ExtractionStats:
    if not items:
        return ExtractionStats()
    df = items_to_dataframe(items)
    file_count = int(df["source_file"].nunique())
    total = len(df)
    counts = value_frequencies(df["raw_value"], limit=None)
    return ExtractionStats(
        file_count=file_count,
        total_data_points=total,
        average_data_points_per_file=total / max(file_count, 1),
        unique_values=len(counts),
        most_common_values={str(k): int(v) for k, v in counts.head(limit).items()},
    )


def aggregate_business_metrics(metrics: Sequence[FileMetrics]) -> BusinessTrends:
    if not metrics:
        return BusinessTrends()
    df = pd.DataFrame(
        {
            "root_element_name": [m.root_element_name for m in metrics],
            "total_elements": [m.total_elements for m in metrics],
            "error_count": [m.error_count for m in metrics],
            "warning_count": [m.warning_count for m in metrics],
        }
    )
    roots = value_frequencies(df["root_element_name"], limit=None)
    return BusinessTrends(
        average_elements_per_file=float(df["total_elements"].mean()),
        total_errors_across_files=int(df["error_count"].sum()),
        total_warnings_across_files=int(df["warning_count"].sum()),
        files_with_errors=int((df["error_count"] > 0).sum()),
        root_element_types={str(k): int(v) for k, v in roots.items()},
    )
