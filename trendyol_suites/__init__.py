"""
Trendyol test suites package.

Kept importable to support:
  - IDE navigation
  - programmatic runners (e.g., `run_tests.py`)
  - shared test helpers (`trendyol_suites.unit.fakes`)

Live-site journeys live under `ui_testing/tests`; browser-free tests under `unit`.
"""
