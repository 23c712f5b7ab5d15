"""统计汇总服务"""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from daily_task_bot.core.timezone import timestamp
from daily_task_bot.services.registry import AccountRegistry
from daily_task_bot.utils.formatter import (
    banner,
    format_account_stats,
    format_shutdown_line,
    format_totals,
    separator,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StatsSummary:
    """全部账号的汇总统计"""

    total_points: int
    total_agents: int
    total_requests: int
    total_txs: int
    total_errors: int
    runtime_minutes: int


class StatsAggregator:
    """只读汇总账号统计"""

    def __init__(self, clock: Callable[[], float] = timestamp):
        self.clock = clock

    def summarize(self, registry: AccountRegistry) -> StatsSummary:
        """
        汇总所有账号统计

        Args:
            registry: 账号注册表

        Returns:
            汇总结果
        """
        all_stats = [stats for _, stats in registry.items()]
        return StatsSummary(
            total_points=sum(s.total_point or 0 for s in all_stats),
            total_agents=sum(s.agents for s in all_stats),
            total_requests=sum(s.requests for s in all_stats),
            total_txs=sum(s.txs for s in all_stats),
            total_errors=sum(s.errors for s in all_stats),
            runtime_minutes=int((self.clock() - registry.start_time) // 60),
        )

    def log_summary(self, registry: AccountRegistry) -> StatsSummary:
        """输出每个账号的统计和汇总"""
        logger.info(banner("📊 全部账号统计"))
        for account, stats in registry.items():
            for line in format_account_stats(account, stats):
                logger.info(line)

        summary = self.summarize(registry)
        for line in format_totals(summary):
            logger.info(line)
        return summary

    def log_shutdown_report(self, registry: AccountRegistry) -> None:
        """退出时输出最终统计（不抛出异常）"""
        try:
            logger.info(separator())
            logger.info(banner("🚨 正在关闭"))
            logger.info("📊 最终统计:")
            for account, stats in registry.items():
                logger.info(format_shutdown_line(account, stats))
        except Exception as e:
            logger.error(f"输出最终统计失败: {e}")
        logger.info("👋 程序已安全退出，再见！")
