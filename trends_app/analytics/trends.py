"""Trend aggregation over per-file test run records (pure functions)."""

from __future__ import annotations

from collections.abc import Sequence

import pandas as pd

from trends_app.core.config import TREND_DELTA_THRESHOLD
from trends_app.core.mappers import records_to_dataframe
from trends_app.core.models import TestRunRecord, TrendAnalysis, TrendDirection


def sort_records(records: Sequence[TestRunRecord]) -> list[TestRunRecord]:
    """Order records ascending by ``file_date``; ties keep their input order.

    ISO dates sort correctly as plain strings.
    """
    return sorted(records, key=lambda r: r.file_date)


def classify_trend(
    rates: Sequence[float],
    threshold: float = TREND_DELTA_THRESHOLD,
) -> TrendDirection:
    """Compare the first and last success rate of an already-sorted series.

    Intermediate points are ignored.
    """
    if not rates:
        return TrendDirection.NO_DATA
    if len(rates) < 2:
        return TrendDirection.INSUFFICIENT_DATA
    first, last = float(rates[0]), float(rates[-1])
    if last > first + threshold:
        return TrendDirection.IMPROVING
    if last < first - threshold:
        return TrendDirection.DECLINING
    return TrendDirection.STABLE


def aggregate(records: Sequence[TestRunRecord]) -> TrendAnalysis:
    """Reduce per-file records into a :class:`TrendAnalysis`.

    The average success rate is the unweighted mean of each record's rate,
    not total passed over total tests.
    """
    if not records:
        return TrendAnalysis()
    df = records_to_dataframe(sort_records(records))
    durations = pd.to_numeric(df["execution_time_seconds"], errors="coerce").dropna()
    return TrendAnalysis(
        average_success_rate=float(df["success_rate"].mean()),
        total_tests=int(df["total"].sum()),
        total_passed=int(df["passed"].sum()),
        total_failed=int(df["failed"].sum()),
        days_with_data=len(df),
        average_execution_seconds=float(durations.mean()) if not durations.empty else None,
        trend_direction=classify_trend(df["success_rate"].tolist()),
    )
