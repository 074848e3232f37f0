#!/usr/bin/env python3
# ================================================================================
# Test Runner Script
# ================================================================================
#
# Single entry point for the Trendyol UI automation suites.
#
# Features:
#   - Run the offline unit suite (page objects against fake pages)
#   - Run the live storefront journeys (search, navigation, cart)
#   - Parallel workers (pytest-xdist) and failed-test reruns (pytest-rerunfailures)
#   - Allure results, HTML report and summary
#
# Usage:
#   python run_tests.py --suite unit
#   python run_tests.py --suite ui --live --browser firefox --no-headless
#   python run_tests.py --suite all --live --tags smoke --parallel 3
#
# ================================================================================

import argparse
import subprocess
import sys
from pathlib import Path
from typing import List, Optional

from loguru import logger

from trendyol_tools.common import get_config
from trendyol_tools.report_tools.allure_utils import generate_allure_report


# Configure logging
logger.remove()
logger.add(
    sys.stdout,
    format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | {message}",
    level="INFO"
)


SUITE_PATHS = {
    "unit": "trendyol_suites/unit",
    "ui": "trendyol_suites/ui_testing/tests",
    "all": "trendyol_suites/",
}

BROWSERS = ["chromium", "chrome", "edge", "firefox", "webkit"]


class TestRunner:
    """
    Builds and executes the pytest command for a suite, then reports.

    Live journeys only run with ``live=True``; without it the ui suite is
    collected and skipped.
    """

    def __init__(
        self,
        suite: str = "all",
        tags: Optional[List[str]] = None,
        live: bool = False,
        parallel: int = 1,
        browser: Optional[str] = None,
        headless: Optional[bool] = None,
        reruns: int = 0,
        allure_report: bool = True,
        verbose: bool = False
    ):
        """
        Initialize test runner.

        Args:
            suite: Test suite to run - "unit", "ui", "all"
            tags: Pytest markers to filter tests (joined with "or")
            live: Run journeys against the live storefront
            parallel: Number of parallel workers
            browser: Browser override; None keeps browser.name from config
            headless: False shows the browser window; None keeps config
            reruns: Reruns for failed tests
            allure_report: Generate Allure report
            verbose: Enable verbose output
        """
        self.suite = suite
        self.tags = tags or []
        self.live = live
        self.parallel = parallel
        self.browser = browser
        self.headless = headless
        self.reruns = reruns
        self.allure_report = allure_report
        self.verbose = verbose

        # Paths
        self.root_dir = Path(__file__).parent
        self.reports_dir = self.root_dir / get_config("reporting.report_dir", "reports")
        self.allure_results = self.reports_dir / "allure-results"
        self.allure_report_dir = self.reports_dir / "allure-report"

    def run(self) -> int:
        """
        Execute the test run.

        Returns:
            pytest exit code (0 for success)
        """
        logger.info("=" * 60)
        logger.info("Starting Test Execution")
        logger.info("=" * 60)
        logger.info(f"Suite: {self.suite}")
        logger.info(f"Tags: {self.tags or 'All'}")
        logger.info(f"Live: {self.live}")
        logger.info(f"Parallel Workers: {self.parallel}")
        if self.live:
            logger.info(f"Browser: {self.browser or get_config('browser.name', 'chromium')}")
            logger.info(f"Headless: {get_config('browser.headless') if self.headless is None else self.headless}")
        logger.info("=" * 60)

        self._prepare_environment()

        cmd = self.build_pytest_command()
        logger.info(f"Executing: {' '.join(cmd)}")

        try:
            exit_code = subprocess.run(cmd, cwd=str(self.root_dir)).returncode
        except OSError as e:
            logger.error(f"Test execution failed: {e}")
            exit_code = 1

        if self.allure_report:
            self._generate_allure_report()

        self._print_summary(exit_code)
        return exit_code

    def _prepare_environment(self) -> None:
        self.reports_dir.mkdir(parents=True, exist_ok=True)
        if self.allure_report:
            self.allure_results.mkdir(parents=True, exist_ok=True)
        logger.debug("Environment prepared")

    def build_pytest_command(self) -> List[str]:
        """Build the pytest command with all options."""
        cmd = [sys.executable, "-m", "pytest", SUITE_PATHS[self.suite]]

        if self.tags:
            cmd.extend(["-m", " or ".join(self.tags)])

        if self.live:
            cmd.append("--live")

        if self.parallel > 1:
            cmd.extend(["-n", str(self.parallel)])

        if self.reruns > 0:
            cmd.extend(["--reruns", str(self.reruns)])

        if self.allure_report:
            cmd.extend(["--alluredir", str(self.allure_results)])

        cmd.append("-v" if self.verbose else "-q")

        if self.browser:
            cmd.append(f"--ui-browser={self.browser}")
        if self.headless is False:
            cmd.append("--ui-headed")

        return cmd

    def _generate_allure_report(self) -> None:
        logger.info("Generating Allure report...")
        if not generate_allure_report(str(self.allure_results), str(self.allure_report_dir)):
            logger.warning("Allure report not generated; raw results kept")

    def _print_summary(self, exit_code: int) -> None:
        logger.info("=" * 60)
        if exit_code == 0:
            logger.info("✅ TEST EXECUTION COMPLETED SUCCESSFULLY")
        else:
            logger.error(f"❌ TEST EXECUTION FAILED (exit code: {exit_code})")

        if self.allure_report:
            logger.info(f"📊 Report available at: {self.allure_report_dir}")

        logger.info("=" * 60)


def default_parallel_workers(live: bool) -> int:
    """Live journeys fan out over execution.parallel_workers; the offline suite runs in-process."""
    if not live:
        return 1
    return max(1, int(get_config("execution.parallel_workers", 1)))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Trendyol UI Automation Test Runner",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Offline unit suite
  python run_tests.py --suite unit

  # Live smoke journeys in parallel
  python run_tests.py --suite ui --live --tags smoke --parallel 3

  # Live cart journeys with a visible Firefox window
  python run_tests.py --suite ui --live --tags cart --no-headless --browser firefox
        """
    )

    parser.add_argument(
        "--suite",
        choices=sorted(SUITE_PATHS),
        default="all",
        help="Test suite to run (default: all)"
    )

    parser.add_argument(
        "--tags",
        nargs="+",
        default=[],
        help="Pytest markers to filter tests (e.g., P0 smoke search cart)"
    )

    parser.add_argument(
        "--live",
        action="store_true",
        help="Run journeys against the live storefront"
    )

    parser.add_argument(
        "--parallel", "-n",
        type=int,
        default=None,
        help="Number of parallel workers (default: execution.parallel_workers for live runs, else 1)"
    )

    parser.add_argument(
        "--browser",
        choices=BROWSERS,
        default=None,
        help="Browser for live journeys (default: browser.name from config)"
    )

    parser.add_argument(
        "--no-headless",
        action="store_true",
        help="Run browser in headed mode (visible)"
    )

    parser.add_argument(
        "--reruns",
        type=int,
        default=None,
        help="Reruns for failed tests (default: retry.count from config)"
    )

    parser.add_argument(
        "--no-allure",
        action="store_true",
        help="Disable Allure report generation"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose output"
    )

    return parser


def main():
    args = build_parser().parse_args()

    parallel = args.parallel
    if parallel is None:
        parallel = default_parallel_workers(args.live)

    reruns = args.reruns
    if reruns is None:
        reruns = int(get_config("retry.count", 0)) if args.live else 0

    runner = TestRunner(
        suite=args.suite,
        tags=args.tags,
        live=args.live,
        parallel=parallel,
        browser=args.browser,
        headless=False if args.no_headless else None,
        reruns=reruns,
        allure_report=not args.no_allure,
        verbose=args.verbose
    )

    sys.exit(runner.run())


if __name__ == "__main__":
    main()
