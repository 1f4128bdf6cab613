"""Domain data models for XML artifacts, test runs, extractions and reports."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, ClassVar

import pytz


class TrendDirection(str, Enum):
    IMPROVING = "IMPROVING"
    DECLINING = "DECLINING"
    STABLE = "STABLE"
    INSUFFICIENT_DATA = "INSUFFICIENT_DATA"
    NO_DATA = "NO_DATA"


class HealthStatus(str, Enum):
    EXCELLENT = "EXCELLENT"
    GOOD = "GOOD"
    FAIR = "FAIR"
    POOR = "POOR"
    CRITICAL = "CRITICAL"


@dataclass(frozen=True, slots=True)
class ArtifactFile:
    path: Path
    name: str
    last_modified: float  # epoch seconds
    size_bytes: int

    @property
    def modified_at(self) -> datetime:
        return datetime.fromtimestamp(self.last_modified, tz=pytz.UTC)

    @property
    def file_date(self) -> str:
        """ISO date (UTC) of the last modification."""
        return self.modified_at.date().isoformat()


@dataclass(slots=True)
class TestRunRecord:
    __test__ = False  # not a pytest class

    file_name: str
    file_date: str
    total: int = 0
    passed: int = 0
    failed: int = 0
    skipped: int = 0
    error_count: int = 0
    inconclusive: int = 0
    execution_time_seconds: float | None = None
    success_rate: float = 0.0


@dataclass(slots=True)
class ExtractedItem:
    source_file: str
    raw_value: str
    attributes: dict[str, str] = field(default_factory=dict)


@dataclass(slots=True)
class FileError:
    file_name: str
    message: str


@dataclass(slots=True)
class BatchOutcome:
    """Fail-soft batch result: everything that worked plus per-file errors."""

    results: list[Any] = field(default_factory=list)
    errors: list[FileError] = field(default_factory=list)


@dataclass(slots=True)
class TrendAnalysis:
    average_success_rate: float = 0.0
    total_tests: int = 0
    total_passed: int = 0
    total_failed: int = 0
    days_with_data: int = 0
    average_execution_seconds: float | None = None
    trend_direction: TrendDirection = TrendDirection.NO_DATA


@dataclass(slots=True)
class FamilyTrends:
    test_type: str
    total_files: int
    daily_results: list[TestRunRecord] = field(default_factory=list)
    trend_analysis: TrendAnalysis = field(default_factory=TrendAnalysis)
    processing_errors: list[FileError] = field(default_factory=list)


@dataclass(slots=True)
class CombinedSummary:
    total_test_files: int
    overall_success_rate: float
    health_status: HealthStatus


@dataclass(slots=True)
class ExtractionStats:
    file_count: int = 0
    total_data_points: int = 0
    average_data_points_per_file: float = 0.0
    unique_values: int = 0
    most_common_values: dict[str, int] = field(default_factory=dict)  # ordered by frequency


@dataclass(slots=True)
class FileMetrics:
    file_name: str
    file_last_modified: datetime
    root_element_name: str
    total_elements: int
    element_types: dict[str, int] = field(default_factory=dict)
    error_count: int = 0
    warning_count: int = 0
    config_count: int = 0
    record_count: int = 0


@dataclass(slots=True)
class BusinessTrends:
    average_elements_per_file: float = 0.0
    total_errors_across_files: int = 0
    total_warnings_across_files: int = 0
    files_with_errors: int = 0
    root_element_types: dict[str, int] = field(default_factory=dict)


# ------------------ Reports ------------------
@dataclass(slots=True)
class TestingTrendsReport:
    __test__ = False

    query_type: ClassVar[str] = "testing_trends"
    description: ClassVar[str] = "Automated testing history trends"

    lookback_days: int
    base_directory: str
    executed_at: str
    families: dict[str, FamilyTrends] = field(default_factory=dict)
    family_errors: dict[str, str] = field(default_factory=dict)
    summary: CombinedSummary | None = None


@dataclass(slots=True)
class FilesSummary:
    query_type: ClassVar[str] = "xml_files_summary"
    description: ClassVar[str] = "Summary of XML files in directory"

    directory_path: str
    executed_at: str
    files: list[ArtifactFile] = field(default_factory=list)

    @property
    def total_xml_files(self) -> int:
        return len(self.files)


@dataclass(slots=True)
class TrendExtractionReport:
    query_type: ClassVar[str] = "xml_trend_extraction"
    description: ClassVar[str] = "Trend data extracted from multiple XML files"

    directory_path: str
    selector: str
    files_processed: int
    executed_at: str
    extracted_data: list[ExtractedItem] = field(default_factory=list)
    processing_errors: list[FileError] = field(default_factory=list)
    trend_analysis: ExtractionStats = field(default_factory=ExtractionStats)


@dataclass(slots=True)
class BusinessMetricsReport:
    query_type: ClassVar[str] = "xml_business_metrics"
    description: ClassVar[str] = "Business metrics trends from XML files"

    directory_path: str
    files_processed: int
    executed_at: str
    business_metrics: list[FileMetrics] = field(default_factory=list)
    processing_errors: list[FileError] = field(default_factory=list)
    aggregated_trends: BusinessTrends = field(default_factory=BusinessTrends)


@dataclass(slots=True)
class CustomFileResult:
    file_name: str
    file_path: str
    file_last_modified: datetime | None = None
    extracted_elements: dict[str, list[ExtractedItem]] = field(default_factory=dict)
    selector_errors: dict[str, str] = field(default_factory=dict)
    error: str | None = None


@dataclass(slots=True)
class CustomExtractionReport:
    query_type: ClassVar[str] = "xml_custom_extraction"
    description: ClassVar[str] = "Custom element extraction from XML files"

    directory_path: str
    element_selectors: dict[str, str]
    files_processed: int
    executed_at: str
    extracted_data: list[CustomFileResult] = field(default_factory=list)
