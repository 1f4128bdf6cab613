"""Health classification and the combined cross-family summary."""

from __future__ import annotations

from collections.abc import Mapping

from trends_app.core.config import HEALTH_THRESHOLDS
from trends_app.core.models import CombinedSummary, FamilyTrends, HealthStatus


def health_status(success_rate: float) -> HealthStatus:
    """Map a success rate (0-100) to a health bucket; lower bounds are inclusive.

    >>> health_status(95.0).value
    'EXCELLENT'
    >>> health_status(49.9).value
    'CRITICAL'
    """
    for lower_bound, label in HEALTH_THRESHOLDS:
        if success_rate >= lower_bound:
            return HealthStatus(label)
    return HealthStatus.CRITICAL


def combine(families: Mapping[str, FamilyTrends]) -> CombinedSummary:
    """Merge the families that were processed successfully.

    The overall rate is the mean of the family average rates; a single family
    is used as-is, and no family at all yields 0.0.
    """
    total_files = sum(f.total_files for f in families.values())
    rates = [f.trend_analysis.average_success_rate for f in families.values()]
    overall = sum(rates) / len(rates) if rates else 0.0
    return CombinedSummary(
        total_test_files=total_files,
        overall_success_rate=overall,
        health_status=health_status(overall),
    )
