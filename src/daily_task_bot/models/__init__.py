"""数据模型模块"""

from daily_task_bot.models.account import Account, AccountStats, DailyTaskStatus, SessionToken

__all__ = [
    "Account",
    "AccountStats",
    "SessionToken",
    "DailyTaskStatus",
]
