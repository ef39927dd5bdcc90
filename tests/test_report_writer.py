"""Tests for soul_bench.report_writer."""
from __future__ import annotations

import json
from datetime import datetime, timezone

import pytest
from conftest import make_profile

from soul_bench.aggregation import ThresholdStability, reduce_samples
from soul_bench.benchmark_results import RunResult
from soul_bench.classification import classify, summarize
from soul_bench.errors import PersistenceFailure
from soul_bench.report_writer import COMPLETION_MARKER, BenchmarkReport, render_markdown, write_reports
from soul_bench.scenario import Scenario


@pytest.fixture
def report() -> BenchmarkReport:
    stats = reduce_samples([60.0] * 10, ThresholdStability(15), peak_memory_bytes=100 * 1024 * 1024)
    results = [
        RunResult.success(Scenario("Small", 100), stats, classify(stats.mean_fps, stats.stable)),
        RunResult.failure(Scenario("Large", 1000), "navigation to http://localhost:5173/ timed out after 30s"),
    ]
    return BenchmarkReport(
        profile=make_profile(),
        results=results,
        summary=summarize(results),
        system_info={"platform": "Linux x86_64", "hardwareConcurrency": 8},
        base_url="http://localhost:5173",
        generated_at=datetime(2026, 10, 16, 12, 30, 0, tzinfo=timezone.utc),
    )


def test_write_reports_creates_archive_latest_and_markdown(tmp_path, report):
    paths = write_reports(report, tmp_path / "out")
    names = sorted(p.name for p in paths)
    assert names == ["unit-2026-10-16T12-30-00-000000Z.json", "unit-latest.json", "unit-report.md"]
    assert all(p.exists() for p in paths)
    # no temp files left behind
    assert sorted(p.name for p in (tmp_path / "out").iterdir()) == names


def test_json_report_contents(tmp_path, report):
    write_reports(report, tmp_path)
    data = json.loads((tmp_path / "unit-latest.json").read_text())
    assert data["complete"] is True
    assert data["system_info"]["hardwareConcurrency"] == 8
    assert data["results"][0]["classification"] == "EXCELLENT"
    assert data["results"][0]["statistics"]["peak_memory_mb"] == 100.0
    assert data["results"][1]["status"] == "failed"
    assert data["results"][1]["statistics"] is None
    assert data["summary"]["errors"] == 1


def test_markdown_has_rows_and_completion_marker(report):
    text = render_markdown(report)
    assert "| Small | 100 | instanced | 60.0 | 100.0% | 100.0 | STABLE | EXCELLENT |" in text
    assert "| Large | 1000 | instanced | ERROR |" in text
    assert "timed out after 30s" in text
    assert "**Overall Assessment:** OUTSTANDING" in text
    assert text.rstrip().endswith(COMPLETION_MARKER)


def test_latest_is_overwritten(tmp_path, report):
    (tmp_path / "unit-latest.json").write_text("stale")
    write_reports(report, tmp_path)
    assert json.loads((tmp_path / "unit-latest.json").read_text())["complete"] is True


def test_unwritable_output_dir_is_persistence_failure(tmp_path, report):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("")
    with pytest.raises(PersistenceFailure):
        write_reports(report, blocker)
