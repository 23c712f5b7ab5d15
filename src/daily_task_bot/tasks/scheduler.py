"""轮次调度器"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from functools import partial

from daily_task_bot.clients.base import TaskApi
from daily_task_bot.core.errors import AuthenticationFailure, CriticalLoopFailure, WorkflowFailure
from daily_task_bot.core.timezone import timestamp
from daily_task_bot.models.account import Account, AccountStats, SessionToken
from daily_task_bot.services.auth import AuthSession
from daily_task_bot.services.orchestrator import TaskOrchestrator
from daily_task_bot.services.registry import AccountRegistry
from daily_task_bot.services.stats import StatsAggregator
from daily_task_bot.tasks.countdown import wait_with_progress
from daily_task_bot.utils.formatter import banner, separator

logger = logging.getLogger(__name__)

DEFAULT_WAIT_SECONDS = 12 * 3600
DEFAULT_ACCOUNT_DELAY = 3.0
DEFAULT_RECOVERY_DELAY = 300.0


class CycleScheduler:
    """
    顺序处理所有账号的轮次调度器

    每轮按索引顺序逐个处理账号（前一个账号完全结束后才开始下一个），
    账号之间固定间隔，全部处理完后输出统计并进入冷却等待，如此循环。
    单个账号的失败不会影响其他账号；逃逸出整轮的异常等待一段时间后恢复。
    """

    def __init__(
        self,
        registry: AccountRegistry,
        auth: AuthSession,
        orchestrator: TaskOrchestrator,
        api: TaskApi,
        aggregator: StatsAggregator | None = None,
        wait_seconds: float = DEFAULT_WAIT_SECONDS,
        account_delay: float = DEFAULT_ACCOUNT_DELAY,
        recovery_delay: float = DEFAULT_RECOVERY_DELAY,
        progress_interval: float = 60,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = timestamp,
        cooldown: Callable[[float], Awaitable[None]] | None = None,
    ):
        self.registry = registry
        self.auth = auth
        self.orchestrator = orchestrator
        self.api = api
        self.aggregator = aggregator or StatsAggregator(clock=clock)
        self.wait_seconds = wait_seconds
        self.account_delay = account_delay
        self.recovery_delay = recovery_delay
        self._sleep = sleep
        self._clock = clock
        self._cooldown = cooldown or partial(wait_with_progress, interval=progress_interval, sleep=sleep)

        self.cycle = 0
        # 会话跨轮次保留，按账号索引存放
        self.sessions: list[SessionToken | None] = [None] * len(registry)

    async def run_forever(self, max_cycles: int | None = None) -> None:
        """
        无限循环执行轮次

        Args:
            max_cycles: 最多执行的轮数，None 表示不限
        """
        while max_cycles is None or self.cycle < max_cycles:
            try:
                await self.run_cycle()
                await self._cooldown(self.wait_seconds)
            except Exception as e:
                failure = CriticalLoopFailure(f"第 {self.cycle} 轮主循环异常: {e}")
                logger.error(f"❌ [{failure.kind.value}] {failure}", exc_info=True)
                logger.warning(f"⚠️ {self.recovery_delay:g} 秒后尝试恢复...")
                await self._sleep(self.recovery_delay)

    async def run_cycle(self) -> None:
        """执行一轮：按顺序处理全部账号并输出统计"""
        self.cycle += 1
        logger.info(banner(f"🔄 第 {self.cycle} 轮 - 顺序处理"))

        total = len(self.registry)
        for account in self.registry:
            logger.info(f">>> 开始处理账号 {account.label}...")
            self.sessions[account.index] = await self.process_account(account)

            if account.index < total - 1:
                logger.info(f"⏳ 等待 {self.account_delay:g} 秒后处理下一个账号...")
                await self._sleep(self.account_delay)

        logger.info(separator())
        self.aggregator.log_summary(self.registry)

    async def process_account(self, account: Account) -> SessionToken | None:
        """
        处理单个账号

        Args:
            account: 账号

        Returns:
            下一轮沿用的会话令牌，认证失败时为 None
        """
        total = len(self.registry)
        logger.info(banner(f"处理账号 {account.label}/{total}"))

        stats = self.registry.stats(account)

        try:
            session = await self._ensure_session(account, self.sessions[account.index])
        except AuthenticationFailure as e:
            logger.error(f"❌ 账号 {account.label} 认证失败 [{e.kind.value}]: {e} - 跳过")
            return None

        try:
            succeeded = await self.orchestrator.run(account, session, stats)
        except Exception as e:
            failure = WorkflowFailure(f"账号 {account.label} 任务流程异常: {e}")
            stats.errors += 1
            logger.error(f"❌ [{failure.kind.value}] {failure}", exc_info=True)
            logger.warning("跳过，处理下一个账号...")
            return session

        if not succeeded:
            logger.warning(f"⚠️ 账号 {account.label} 任务执行失败 - 跳过")
            return session

        await self._refresh_profile(account, session, stats)
        logger.info(banner(f"✅ 账号 {account.label} 处理完成"))
        return session

    async def _ensure_session(self, account: Account, session: SessionToken | None) -> SessionToken:
        """沿用有效令牌，缺失或过期时重新认证"""
        if session is None:
            return await self.auth.acquire(account)

        if self.auth.is_valid(session, self._clock()):
            logger.info(f"✅ 账号 {account.label} 令牌有效")
            return session

        self.auth.mark_expired(account)
        return await self.auth.acquire(account)

    async def _refresh_profile(self, account: Account, session: SessionToken, stats: AccountStats) -> None:
        """刷新用户资料（失败只记录日志）"""
        try:
            data = await self.api.get_user_data(session.token)
            if not data:
                logger.warning(f"账号 {account.label} 用户资料为空")
                return

            total_point = int(data.get("total_point") or 0)
            days = int(data.get("days") or 0)
        except Exception as e:
            logger.warning(f"账号 {account.label} 刷新用户资料失败: {e}")
            return

        stats.uid = data.get("uid")
        stats.total_point = total_point
        stats.days = days
        logger.info(f"UID: {stats.uid} | 积分: {stats.total_point} | 天数: {stats.days}")
