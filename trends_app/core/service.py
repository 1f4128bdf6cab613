"""Services orchestrating discovery, parsing, extraction and aggregation.

``TestingTrendService`` drives the fixed schema families under a base
directory and merges them into one report. ``ArtifactService`` serves ad-hoc
selector and structural queries over an arbitrary artifact directory.
Both are stateless between calls; every call re-reads the filesystem.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from datetime import datetime
from pathlib import Path

import pytz

from trends_app.analytics.frequency import aggregate_business_metrics, aggregate_extracted
from trends_app.analytics.health import combine
from trends_app.analytics.structure import file_metrics
from trends_app.analytics.trends import aggregate, sort_records

from .config import (
    EXTENDED_LOOKBACK_DAYS,
    MONTHLY_LOOKBACK_DAYS,
    QUICK_LOOKBACK_DAYS,
    SELECTOR_EXAMPLES,
    TEST_FAMILIES,
    AppSettings,
    FamilyConfig,
    load_settings,
)
from .discovery import discover, list_artifacts
from .errors import MalformedArtifact, TrendsError
from .extractor import PathExtractor
from .models import (
    BusinessMetricsReport,
    CustomExtractionReport,
    FamilyTrends,
    FileError,
    FilesSummary,
    TestingTrendsReport,
    TrendExtractionReport,
)
from .parsers import get_parser, load_document, parse_artifacts

logger = logging.getLogger(__name__)


def _executed_at(tz_name: str) -> str:
    return datetime.now(pytz.timezone(tz_name)).isoformat()


class TestingTrendService:
    __test__ = False

    def __init__(
        self,
        settings: AppSettings | None = None,
        families: Sequence[FamilyConfig] = TEST_FAMILIES,
    ):
        self.settings = settings or load_settings()
        self.families = tuple(families)

    def family_directory(self, family: FamilyConfig) -> Path:
        return Path(self.settings.base_directory) / family.subdirectory

    def family_trends(self, family: FamilyConfig, lookback_days: int) -> FamilyTrends:
        """Discover, parse and aggregate one family.

        Raises ``DirectoryNotFound`` when the family directory is missing.
        Individual bad files are reported in ``processing_errors``.
        """
        artifacts = discover(self.family_directory(family), lookback_days)
        outcome = parse_artifacts(get_parser(family.format), artifacts)
        records = sort_records(outcome.results)
        logger.info(
            "%s: %s file(s), %s parsed, %s failed",
            family.label,
            len(artifacts),
            len(records),
            len(outcome.errors),
        )
        return FamilyTrends(
            test_type=family.label,
            total_files=len(artifacts),
            daily_results=records,
            trend_analysis=aggregate(records),
            processing_errors=outcome.errors,
        )

    def get_testing_trends(self, lookback_days: int | None = None) -> TestingTrendsReport:
        days = self.settings.lookback_days if lookback_days is None else lookback_days
        report = TestingTrendsReport(
            lookback_days=days,
            base_directory=self.settings.base_directory,
            executed_at=_executed_at(self.settings.timezone),
        )
        for family in self.families:
            try:
                report.families[family.name] = self.family_trends(family, days)
            except TrendsError as exc:
                logger.warning("%s trends unavailable: %s", family.label, exc)
                report.family_errors[f"{family.name}Error"] = str(exc)
        report.summary = combine(report.families)
        return report

    def quick_trends(self) -> TestingTrendsReport:
        return self.get_testing_trends(QUICK_LOOKBACK_DAYS)

    def extended_trends(self) -> TestingTrendsReport:
        return self.get_testing_trends(EXTENDED_LOOKBACK_DAYS)

    def monthly_trends(self) -> TestingTrendsReport:
        return self.get_testing_trends(MONTHLY_LOOKBACK_DAYS)


class ArtifactService:
    def __init__(self, settings: AppSettings | None = None, extractor: PathExtractor | None = None):
        self.settings = settings or load_settings()
        self.extractor = extractor or PathExtractor()

    def _resolve(self, directory: str | Path | None) -> str:
        return str(directory) if directory is not None else self.settings.xml_directory

    def get_xml_files_summary(self, directory: str | Path | None = None) -> FilesSummary:
        target = self._resolve(directory)
        return FilesSummary(
            directory_path=target,
            executed_at=_executed_at(self.settings.timezone),
            files=list_artifacts(target),
        )

    def extract_trend_data(
        self,
        directory: str | Path | None,
        selector: str,
    ) -> TrendExtractionReport:
        """Run ``selector`` over every artifact (oldest first) and summarise values."""
        if not selector or not selector.strip():
            raise ValueError("A selector expression is required")
        target = self._resolve(directory)
        artifacts = discover(target, oldest_first=True)
        outcome = self.extractor.extract_many(artifacts, selector)
        return TrendExtractionReport(
            directory_path=target,
            selector=selector,
            files_processed=len(artifacts),
            executed_at=_executed_at(self.settings.timezone),
            extracted_data=outcome.results,
            processing_errors=outcome.errors,
            trend_analysis=aggregate_extracted(outcome.results),
        )

    def extract_business_metrics_trends(
        self,
        directory: str | Path | None = None,
    ) -> BusinessMetricsReport:
        target = self._resolve(directory)
        artifacts = discover(target, oldest_first=True)
        report = BusinessMetricsReport(
            directory_path=target,
            files_processed=len(artifacts),
            executed_at=_executed_at(self.settings.timezone),
        )
        for artifact in artifacts:
            try:
                root = load_document(artifact).getroot()
            except MalformedArtifact as exc:
                logger.warning("Error processing %s: %s", artifact.name, exc.reason)
                report.processing_errors.append(FileError(file_name=artifact.name, message=str(exc)))
                continue
            report.business_metrics.append(file_metrics(root, artifact))
        report.aggregated_trends = aggregate_business_metrics(report.business_metrics)
        return report

    def extract_custom_elements(
        self,
        directory: str | Path | None,
        selectors: Mapping[str, str],
    ) -> CustomExtractionReport:
        if not selectors:
            raise ValueError("At least one named selector is required")
        target = self._resolve(directory)
        artifacts = discover(target)
        return CustomExtractionReport(
            directory_path=target,
            element_selectors=dict(selectors),
            files_processed=len(artifacts),
            executed_at=_executed_at(self.settings.timezone),
            extracted_data=[self.extractor.extract_named(a, selectors) for a in artifacts],
        )

    def get_xml_analytics_dashboard(self, directory: str | Path | None = None) -> dict:
        """File listing and business metrics for one directory, side by side."""
        return {
            "dashboardType": "xml-analytics",
            "directoryPath": self._resolve(directory),
            "fileSummary": self.get_xml_files_summary(directory),
            "businessMetrics": self.extract_business_metrics_trends(directory),
        }

    @staticmethod
    def selector_examples() -> Mapping[str, Mapping[str, str]]:
        return SELECTOR_EXAMPLES
