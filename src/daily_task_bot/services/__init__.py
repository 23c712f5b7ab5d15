"""业务服务模块"""

from daily_task_bot.services.auth import AuthSession
from daily_task_bot.services.orchestrator import TaskOrchestrator
from daily_task_bot.services.registry import AccountRegistry
from daily_task_bot.services.stats import StatsAggregator, StatsSummary

__all__ = [
    "AccountRegistry",
    "AuthSession",
    "TaskOrchestrator",
    "StatsAggregator",
    "StatsSummary",
]
