"""Mapping domain models into DataFrames and JSON-ready payloads."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import asdict, fields, is_dataclass
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import Any

import pandas as pd

from .models import (
    CustomExtractionReport,
    CustomFileResult,
    ExtractedItem,
    FilesSummary,
    TestingTrendsReport,
    TestRunRecord,
    TrendExtractionReport,
)

RECORD_COLUMNS = [f.name for f in fields(TestRunRecord)]


def records_to_dataframe(records: Iterable[TestRunRecord]) -> pd.DataFrame:
    rows = [asdict(r) for r in records]
    return pd.DataFrame(rows, columns=RECORD_COLUMNS)


def items_to_dataframe(items: Iterable[ExtractedItem]) -> pd.DataFrame:
    rows = [{"source_file": i.source_file, "raw_value": i.raw_value} for i in items]
    return pd.DataFrame(rows, columns=["source_file", "raw_value"])


def camel_case(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def to_payload(value: Any) -> Any:
    """Recursively convert models into plain JSON-compatible structures.

    Dataclass field names become camelCase; dictionary keys are data and are
    left untouched.
    """
    if isinstance(value, TestingTrendsReport):
        return testing_trends_payload(value)
    if isinstance(value, FilesSummary):
        return files_summary_payload(value)
    if isinstance(value, CustomExtractionReport):
        return custom_extraction_payload(value)
    if isinstance(value, CustomFileResult):
        return custom_file_payload(value)
    if isinstance(value, TrendExtractionReport):
        return trend_extraction_payload(value)
    if is_dataclass(value) and not isinstance(value, type):
        out = {camel_case(f.name): to_payload(getattr(value, f.name)) for f in fields(value)}
        _add_report_header(value, out)
        return out
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, dict):
        return {str(k): to_payload(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_payload(v) for v in value]
    return value


def _add_report_header(report: Any, out: dict[str, Any]) -> None:
    query_type = getattr(type(report), "query_type", None)
    if query_type:
        out["queryType"] = query_type
        out["description"] = type(report).description


def testing_trends_payload(report: TestingTrendsReport) -> dict[str, Any]:
    out: dict[str, Any] = {
        "lookbackDays": report.lookback_days,
        "baseDirectory": report.base_directory,
    }
    for name, trends in report.families.items():
        out[f"{name}Trends"] = to_payload(trends)
    for key, message in report.family_errors.items():
        out[key] = message
    if report.summary is not None:
        out["summary"] = to_payload(report.summary)
    out["executedAt"] = report.executed_at
    _add_report_header(report, out)
    return out


def files_summary_payload(report: FilesSummary) -> dict[str, Any]:
    out = {
        "directoryPath": report.directory_path,
        "totalXMLFiles": report.total_xml_files,
        "files": [
            {
                "name": f.name,
                "path": str(f.path),
                "size": f.size_bytes,
                "lastModified": f.modified_at.isoformat(),
            }
            for f in report.files
        ],
        "executedAt": report.executed_at,
    }
    _add_report_header(report, out)
    return out


def custom_file_payload(result: CustomFileResult) -> dict[str, Any]:
    if result.error is not None:
        return {"fileName": result.file_name, "error": result.error}
    elements: dict[str, Any] = {
        name: [{"value": i.raw_value, "attributes": dict(i.attributes)} for i in items]
        for name, items in result.extracted_elements.items()
    }
    for name, message in result.selector_errors.items():
        elements[f"{name}_error"] = message
    return {
        "fileName": result.file_name,
        "filePath": result.file_path,
        "fileLastModified": to_payload(result.file_last_modified),
        "extractedElements": elements,
    }


def custom_extraction_payload(report: CustomExtractionReport) -> dict[str, Any]:
    out = {
        "directoryPath": report.directory_path,
        "elementSelectors": dict(report.element_selectors),
        "filesProcessed": report.files_processed,
        "extractedData": [custom_file_payload(r) for r in report.extracted_data],
        "executedAt": report.executed_at,
    }
    _add_report_header(report, out)
    return out


def trend_extraction_payload(report: TrendExtractionReport) -> dict[str, Any]:
    out = {
        "directoryPath": report.directory_path,
        "selector": report.selector,
        "filesProcessed": report.files_processed,
        "extractedDataCount": len(report.extracted_data),
        "extractedData": to_payload(report.extracted_data),
        "processingErrors": to_payload(report.processing_errors),
        "trendAnalysis": to_payload(report.trend_analysis),
        "executedAt": report.executed_at,
    }
    _add_report_header(report, out)
    return out
