"""Test configuration ensuring local package import when editable install not active.

If users invoke `pytest` outside the project's virtualenv, we still add the project
root to sys.path so `import trends_app` works. Shared fixtures write XML
artifacts with controlled modification times.
"""

from __future__ import annotations

import os
import sys
import time
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

DAY = 24 * 60 * 60


def summary_xml(total=10, passed=9, failed=1, skipped=0, errors=0, extra="", root="test-results"):
    return (
        f'<?xml version="1.0" encoding="utf-8"?>\n'
        f'<{root} name="Pester" total="{total}" passed="{passed}" failed="{failed}" '
        f'skipped="{skipped}" errors="{errors}" inconclusive="0"{extra}>\n'
        f'  <test-suite name="suite" result="Success"/>\n'
        f"</{root}>\n"
    )


def unit_test_xml(results, duration="1.25", root="TestResults"):
    cases = "\n".join(
        f'    <TestCase Name="test_{i}" Result="{r}"/>' for i, r in enumerate(results)
    )
    duration_el = f"  <Duration>{duration}</Duration>\n" if duration is not None else ""
    return (
        f'<?xml version="1.0" encoding="utf-8"?>\n'
        f"<{root}>\n"
        f"{duration_el}"
        f'  <TestSuite Name="suite">\n{cases}\n  </TestSuite>\n'
        f"</{root}>\n"
    )


@pytest.fixture
def write_artifact():
    """Write ``content`` to ``directory/name`` and backdate its mtime by ``age_days``."""

    def _write(directory: Path, name: str, content: str, age_days: float = 0.0) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / name
        path.write_text(content, encoding="utf-8")
        stamp = time.time() - age_days * DAY
        os.utime(path, (stamp, stamp))
        return path

    return _write


@pytest.fixture
def history_dir(tmp_path, write_artifact):
    """Base directory with both schema families populated."""
    base = tmp_path / "history"
    pester = base / "Pester"
    tsqlt = base / "tSQLt"
    write_artifact(pester, "run1.xml", summary_xml(total=10, passed=5, failed=5), age_days=3)
    write_artifact(pester, "run2.xml", summary_xml(total=10, passed=9, failed=1), age_days=1)
    write_artifact(tsqlt, "unit1.xml", unit_test_xml(["Success", "Success", "Failure", "Success"]), age_days=2)
    return base
