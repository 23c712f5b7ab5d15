"""工具函数模块"""

from daily_task_bot.utils.formatter import (
    banner,
    format_account_stats,
    format_generated_content,
    format_shutdown_line,
    format_totals,
    separator,
)
from daily_task_bot.utils.validator import clean_input, missing_fields, validate_private_key

__all__ = [
    "banner",
    "separator",
    "format_account_stats",
    "format_generated_content",
    "format_shutdown_line",
    "format_totals",
    "validate_private_key",
    "clean_input",
    "missing_fields",
]
