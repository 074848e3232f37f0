"""
================================================================================
Allure Report Utilities
================================================================================

Helpers for enriching Allure reports of the Trendyol UI suites and for
post-processing the raw results.

Features:
- Attachment helpers (text, JSON, PNG screenshots, page state)
- environment.properties writer (browser, base URL, locale, platform)
- Result summary and HTML report generation

================================================================================
"""

import json
import platform
import shutil
import subprocess
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import allure
from loguru import logger


# ================================================================================
# Attachment Helpers
# ================================================================================

def attach_json(data: Any, name: str = "Data"):
    """
    Attach JSON data to Allure report.

    Args:
        data: Data to attach (will be JSON serialized)
        name: Attachment name
    """
    json_str = json.dumps(data, indent=2, default=str, ensure_ascii=False)
    allure.attach(
        json_str,
        name=name,
        attachment_type=allure.attachment_type.JSON
    )


def attach_text(text: str, name: str = "Text"):
    """
    Attach text content to Allure report.

    Args:
        text: Text to attach
        name: Attachment name
    """
    allure.attach(
        text,
        name=name,
        attachment_type=allure.attachment_type.TEXT
    )


def attach_png(image: bytes, name: str = "Screenshot"):
    """
    Attach a PNG screenshot to Allure report.

    Args:
        image: Raw PNG bytes (as returned by ``page.screenshot()``)
        name: Attachment name
    """
    allure.attach(
        image,
        name=name,
        attachment_type=allure.attachment_type.PNG
    )


def attach_page_state(url: str, title: str = "", name: str = "Page State"):
    """Attach the current URL and document title of a page."""
    attach_json({"url": url, "title": title}, name=name)


# ================================================================================
# Environment
# ================================================================================

def write_environment_properties(
    results_dir: str,
    properties: Optional[Mapping[str, Any]] = None,
) -> Path:
    """
    Write ``environment.properties`` into the Allure results directory.

    Platform and Python version are always included; ``properties`` adds
    run-specific entries such as browser name, base URL and locale.

    Returns:
        Path of the written file
    """
    entries: Dict[str, Any] = {
        "OS": f"{platform.system()} {platform.release()}",
        "Python": platform.python_version(),
    }
    entries.update(properties or {})

    path = Path(results_dir)
    path.mkdir(parents=True, exist_ok=True)
    env_file = path / "environment.properties"

    lines = [
        f"{key.replace(' ', '.')}={value}"
        for key, value in entries.items()
        if value is not None
    ]
    env_file.write_text("\n".join(lines) + "\n", encoding="utf-8")
    logger.debug(f"Allure environment written: {env_file}")
    return env_file


# ================================================================================
# Report Processing
# ================================================================================

@dataclass
class TestResultSummary:
    """Summary of test execution results."""
    __test__ = False

    total: int = 0
    passed: int = 0
    failed: int = 0
    broken: int = 0
    skipped: int = 0
    unknown: int = 0
    duration_ms: int = 0
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())

    @property
    def pass_rate(self) -> float:
        """Calculate pass rate percentage."""
        if self.total == 0:
            return 0.0
        return (self.passed / self.total) * 100

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "passed": self.passed,
            "failed": self.failed,
            "broken": self.broken,
            "skipped": self.skipped,
            "unknown": self.unknown,
            "pass_rate": f"{self.pass_rate:.2f}%",
            "duration_ms": self.duration_ms,
            "timestamp": self.timestamp,
        }


class AllureReportProcessor:
    """
    Processes Allure results and generates reports.

    Usage:
        processor = AllureReportProcessor(Path("reports/allure-results"))
        summary = processor.generate_summary()
        processor.generate_report()
    """

    def __init__(
        self,
        results_dir: Path,
        report_dir: Optional[Path] = None,
    ):
        """
        Initialize processor.

        Args:
            results_dir: Allure results directory
            report_dir: Output report directory (sibling "allure-report" by default)
        """
        self.results_dir = Path(results_dir)
        self.report_dir = Path(report_dir or self.results_dir.parent / "allure-report")

    def parse_results(self) -> List[Dict[str, Any]]:
        """
        Parse Allure result files.

        Unreadable files are skipped with a warning.
        """
        results = []

        for result_file in sorted(self.results_dir.glob("*-result.json")):
            try:
                with open(result_file, encoding="utf-8") as f:
                    results.append(json.load(f))
            except (OSError, json.JSONDecodeError) as e:
                logger.warning(f"Failed to parse {result_file}: {e}")

        return results

    def generate_summary(self) -> TestResultSummary:
        results = self.parse_results()
        summary = TestResultSummary(total=len(results))

        for result in results:
            status = result.get("status", "unknown")
            if status in ("passed", "failed", "broken", "skipped"):
                setattr(summary, status, getattr(summary, status) + 1)
            else:
                summary.unknown += 1

            summary.duration_ms += result.get("stop", 0) - result.get("start", 0)

        return summary

    def copy_history(self):
        """Copy history from previous report to results (trend graphs)."""
        history_source = self.report_dir / "history"
        history_dest = self.results_dir / "history"

        if history_source.exists():
            if history_dest.exists():
                shutil.rmtree(history_dest)
            shutil.copytree(history_source, history_dest)
            logger.info("Copied history from previous report")

    def generate_report(self) -> bool:
        """
        Generate Allure HTML report with the ``allure`` command line.

        Returns:
            True if successful
        """
        self.copy_history()

        cmd = [
            "allure", "generate",
            str(self.results_dir),
            "-o", str(self.report_dir),
            "--clean"
        ]

        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except FileNotFoundError:
            logger.error("Allure command not found. Install allure-commandline.")
            return False

        if result.returncode == 0:
            logger.info(f"Report generated at {self.report_dir}")
            return True

        logger.error(f"Report generation failed: {result.stderr}")
        return False

    def print_summary(self):
        """Print summary to console."""
        summary = self.generate_summary()

        print("\n" + "=" * 60)
        print("TEST EXECUTION SUMMARY")
        print("=" * 60)
        print(f"Total Tests:    {summary.total}")
        print(f"Passed:         {summary.passed} ✅")
        print(f"Failed:         {summary.failed} ❌")
        print(f"Broken:         {summary.broken} ⚠️")
        print(f"Skipped:        {summary.skipped} ⏭️")
        print(f"Pass Rate:      {summary.pass_rate:.2f}%")
        print(f"Duration:       {summary.duration_ms / 1000:.2f}s")
        print("=" * 60 + "\n")


# ================================================================================
# Convenience Functions
# ================================================================================

def generate_allure_report(
    results_dir: str,
    output_dir: Optional[str] = None,
    open_report: bool = False
) -> bool:
    """
    Generate Allure report from results and print the summary.

    Args:
        results_dir: Path to allure-results directory
        output_dir: Optional output directory
        open_report: Whether to open report in browser

    Returns:
        True if successful
    """
    processor = AllureReportProcessor(
        Path(results_dir),
        Path(output_dir) if output_dir else None
    )

    success = processor.generate_report()

    if success:
        processor.print_summary()
        if open_report:
            subprocess.run(["allure", "open", str(processor.report_dir)])

    return success


__all__ = [
    "attach_json",
    "attach_text",
    "attach_png",
    "attach_page_state",
    "write_environment_properties",
    "TestResultSummary",
    "AllureReportProcessor",
    "generate_allure_report",
]
