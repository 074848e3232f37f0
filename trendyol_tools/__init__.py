"""
================================================================================
Trendyol Tools
================================================================================

Support utilities shared by the Trendyol UI automation suites.

Modules:
    - common: Configuration loading and logging setup
    - report_tools: Allure attachments, environment info and result summaries

Example:
    from trendyol_tools.common import get_config, init_logger

    init_logger()
    base_url = get_config("app.base_url", "https://www.trendyol.com/")

================================================================================
"""

__version__ = "1.0.0"

__all__ = [
    "common",
    "report_tools",
]
