import json
import subprocess

from trendyol_tools.report_tools.allure_utils import (
    AllureReportProcessor,
    TestResultSummary,
    write_environment_properties,
)


def write_result(directory, name, status, start=0, stop=1000):
    (directory / f"{name}-result.json").write_text(
        json.dumps({"name": name, "status": status, "start": start, "stop": stop}),
        encoding="utf-8",
    )


def test_environment_properties(tmp_path):
    results_dir = tmp_path / "allure-results"

    path = write_environment_properties(
        str(results_dir),
        {"Browser": "chromium", "Base URL": "https://www.trendyol.com/", "Skipped": None},
    )

    lines = path.read_text(encoding="utf-8").splitlines()
    assert "Browser=chromium" in lines
    assert "Base.URL=https://www.trendyol.com/" in lines
    assert any(line.startswith("Python=") for line in lines)
    assert not any(line.startswith("Skipped") for line in lines)


def test_summary_counts_statuses_and_skips_broken_files(tmp_path):
    write_result(tmp_path, "a", "passed", 0, 1500)
    write_result(tmp_path, "b", "passed", 0, 500)
    write_result(tmp_path, "c", "failed")
    write_result(tmp_path, "d", "skipped", 0, 0)
    write_result(tmp_path, "e", "mystery", 0, 0)
    (tmp_path / "f-result.json").write_text("{not json", encoding="utf-8")

    summary = AllureReportProcessor(tmp_path).generate_summary()

    assert (summary.total, summary.passed, summary.failed, summary.skipped, summary.unknown) == (5, 2, 1, 1, 1)
    assert summary.duration_ms == 3000
    assert summary.pass_rate == 40.0
    assert summary.to_dict()["pass_rate"] == "40.00%"


def test_empty_summary_has_zero_pass_rate():
    assert TestResultSummary().pass_rate == 0.0


def test_generate_report_copies_history_and_handles_missing_cli(tmp_path, monkeypatch):
    results_dir = tmp_path / "allure-results"
    results_dir.mkdir()
    history = tmp_path / "allure-report" / "history"
    history.mkdir(parents=True)
    (history / "history.json").write_text("[]", encoding="utf-8")

    def missing_cli(*args, **kwargs):
        raise FileNotFoundError("allure")

    monkeypatch.setattr(subprocess, "run", missing_cli)
    processor = AllureReportProcessor(results_dir)

    assert processor.generate_report() is False
    assert (results_dir / "history" / "history.json").exists()


def test_generate_report_reports_cli_result(tmp_path, monkeypatch):
    calls = []

    def fake_run(cmd, **kwargs):
        calls.append(cmd)
        return subprocess.CompletedProcess(cmd, 0, stdout="", stderr="")

    monkeypatch.setattr(subprocess, "run", fake_run)

    assert AllureReportProcessor(tmp_path / "results", tmp_path / "html").generate_report()
    assert calls[0][:2] == ["allure", "generate"]
    assert "--clean" in calls[0]
