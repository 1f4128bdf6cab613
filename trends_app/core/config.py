"""Central configuration, constants, and runtime settings for artifact trends."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

logger = logging.getLogger(__name__)

# =============================================================================
# Filesystem Locations
# =============================================================================
DEFAULT_BASE_DIRECTORY = "/data/testing-history"
DEFAULT_XML_DIRECTORY = "/data/xml"
ARTIFACT_EXTENSION = ".xml"
TIMEZONE = "UTC"

# =============================================================================
# Lookback Windows (days)
# =============================================================================
DEFAULT_LOOKBACK_DAYS: int = 7
QUICK_LOOKBACK_DAYS: int = 3
EXTENDED_LOOKBACK_DAYS: int = 14
MONTHLY_LOOKBACK_DAYS: int = 30

# =============================================================================
# Schema Families
# =============================================================================
SUMMARY_FORMAT = "summary"
UNIT_TEST_FORMAT = "unit_test"


@dataclass(frozen=True, slots=True)
class FamilyConfig:
    name: str
    subdirectory: str
    format: str
    label: str


# Each family lives in its own subdirectory of the base directory
TEST_FAMILIES: Sequence[FamilyConfig] = (
    FamilyConfig(name="pester", subdirectory="Pester", format=SUMMARY_FORMAT, label="Pester"),
    FamilyConfig(name="tsqlt", subdirectory="tSQLt", format=UNIT_TEST_FORMAT, label="tSQLt"),
)

# NUnit 2.x uses <test-results>, NUnit 3.x uses <test-run>
SUMMARY_ROOT_TAGS: frozenset[str] = frozenset({"test-results", "test-run"})
SUMMARY_COUNT_ATTRIBUTES: Sequence[str] = (
    "total",
    "passed",
    "failed",
    "skipped",
    "errors",
    "inconclusive",
)

UNIT_TEST_ROOT_TAGS: frozenset[str] = frozenset({"TestResults", "tSQLt"})
TEST_CASE_TAG = "TestCase"
DURATION_TAG = "Duration"
RESULT_ATTRIBUTE = "Result"

# Lowercase for case-insensitive matching of the Result attribute
PASSED_RESULTS: frozenset[str] = frozenset({"success", "pass"})
FAILED_RESULTS: frozenset[str] = frozenset({"failure", "fail"})

# =============================================================================
# Trend & Health Classification
# =============================================================================
TREND_DELTA_THRESHOLD: float = 5.0

# Inclusive lower bounds, checked in order
HEALTH_THRESHOLDS: Sequence[tuple[float, str]] = (
    (95.0, "EXCELLENT"),
    (85.0, "GOOD"),
    (70.0, "FAIR"),
    (50.0, "POOR"),
)

TOP_VALUES_LIMIT: int = 10

# Output key -> case-insensitive tag-name fragment
BUSINESS_TAG_MARKERS: Mapping[str, str] = {
    "error_count": "error",
    "warning_count": "warning",
    "config_count": "config",
    "record_count": "record",
}

# =============================================================================
# Selector Examples
# =============================================================================
SELECTOR_EXAMPLES: Mapping[str, Mapping[str, str]] = {
    "common": {
        "All elements": "//*",
        "Root element": "/*",
        "All text content": "//text()",
        "Elements with specific name": "//elementName",
        "Elements with attribute": "//*[@attributeName]",
        "Elements with specific attribute value": "//*[@type='error']",
        "Nested elements": "//parent/child",
        "Elements containing text": "//*[contains(text(), 'searchText')]",
        "First element of type": "//elementName[1]",
        "Last element of type": "//elementName[last()]",
    },
    "log_files": {
        "Error messages": "//log[@level='ERROR']/message",
        "Timestamps": "//log/@timestamp",
        "User activities": "//log[contains(@message, 'user')]",
        "Warning counts": "count(//log[@level='WARN'])",
    },
    "config_files": {
        "Configuration values": "//config/setting/@value",
        "Database settings": "//config[@type='database']",
        "Environment variables": "//env/@name",
    },
    "test_results": {
        "Test case count": "count(//TestCase)",
        "Failed test cases": "//TestCase[@Result='Failure']",
        "Test case names": "//TestCase/@Name",
        "Suite totals": "/test-results/@total",
    },
}


@dataclass(slots=True)
class AppSettings:
    base_directory: str = DEFAULT_BASE_DIRECTORY
    xml_directory: str = DEFAULT_XML_DIRECTORY
    lookback_days: int = DEFAULT_LOOKBACK_DAYS
    timezone: str = TIMEZONE
    log_level: str = "INFO"


def _env_int(environ: Mapping[str, str], key: str, default: int) -> int:
    raw = environ.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r; using %s", key, raw, default)
        return default


def _env_log_level(environ: Mapping[str, str], key: str, default: str = "INFO") -> str:
    level = (environ.get(key) or default).strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        logger.warning("Ignoring unknown %s=%r; using %s", key, environ.get(key), default)
        return default
    return level


def load_settings(environ: Mapping[str, str] | None = None) -> AppSettings:
    """Build settings from ``TRENDS_*`` environment variables.

    Unset variables keep the module defaults.
    """
    env = os.environ if environ is None else environ
    return AppSettings(
        base_directory=env.get("TRENDS_BASE_DIRECTORY") or DEFAULT_BASE_DIRECTORY,
        xml_directory=env.get("TRENDS_XML_DIRECTORY") or DEFAULT_XML_DIRECTORY,
        lookback_days=_env_int(env, "TRENDS_LOOKBACK_DAYS", DEFAULT_LOOKBACK_DAYS),
        timezone=env.get("TRENDS_TIMEZONE") or TIMEZONE,
        log_level=_env_log_level(env, "TRENDS_LOG_LEVEL"),
    )
