"""Aggregations over parsed artifacts: trends, frequencies, structure and health."""

from trends_app.analytics.frequency import aggregate_business_metrics, aggregate_extracted
from trends_app.analytics.health import combine, health_status
from trends_app.analytics.structure import (
    count_elements,
    count_tags_containing,
    file_metrics,
    fold_elements,
    tag_histogram,
)
from trends_app.analytics.trends import aggregate, classify_trend, sort_records

__all__ = [
    "aggregate",
    "aggregate_business_metrics",
    "aggregate_extracted",
    "classify_trend",
    "combine",
    "count_elements",
    "count_tags_containing",
    "file_metrics",
    "fold_elements",
    "health_status",
    "sort_records",
    "tag_histogram",
]
