"""每日任务编排服务"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime, tzinfo

from daily_task_bot.clients.base import ChainClient, ContentGenerator, TaskApi
from daily_task_bot.config.constants import DAILY_WINDOW_SECONDS, TaskKind
from daily_task_bot.core.errors import DailyTaskError, InvalidTaskResponse
from daily_task_bot.core.retry import RetryPolicy
from daily_task_bot.core.timezone import format_countdown, get_timezone, timestamp
from daily_task_bot.models.account import Account, AccountStats, DailyTaskStatus, SessionToken
from daily_task_bot.utils.formatter import banner, format_generated_content

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TaskFlow:
    """一种每日任务的创建方式和链上登记方式"""

    kind: TaskKind
    title: str
    contract_method: str
    counter: str
    create: Callable[[TaskApi, str, dict], Awaitable[dict | None]]
    contract_args: Callable[[str, dict], tuple]


TASK_FLOWS: dict[TaskKind, TaskFlow] = {
    TaskKind.AGENT: TaskFlow(
        kind=TaskKind.AGENT,
        title="智能体",
        contract_method="addNewAgent",
        counter="agents",
        create=lambda api, token, c: api.create_agent(token, c["name_agent"], c["description"]),
        contract_args=lambda task_id, c: (task_id, c["name_agent"], c["description"]),
    ),
    TaskKind.REQUEST: TaskFlow(
        kind=TaskKind.REQUEST,
        title="需求",
        contract_method="addNewRequest",
        counter="requests",
        create=lambda api, token, c: api.create_request(token, c["title"], c["description"]),
        contract_args=lambda task_id, c: (task_id, c["title"]),
    ),
}


class TaskOrchestrator:
    """
    单个账号的每日任务流程

    查询任务状态 -> 按需创建智能体/需求 -> 链上登记 -> 更新统计。
    每个远程调用都经过 RetryPolicy；单个任务失败只计一次错误，不影响另一个任务。
    """

    def __init__(
        self,
        api: TaskApi,
        content: ContentGenerator,
        chain: ChainClient,
        retry: RetryPolicy | None = None,
        clock: Callable[[], float] = timestamp,
        tz: tzinfo | None = None,
    ):
        self.api = api
        self.content = content
        self.chain = chain
        self.retry = retry or RetryPolicy()
        self.clock = clock
        self.tz = tz

    async def run(self, account: Account, session: SessionToken, stats: AccountStats) -> bool:
        """
        执行账号的每日任务

        Args:
            account: 账号
            session: 有效的会话令牌
            stats: 账号统计（原地更新）

        Returns:
            任务状态查询成功返回 True，状态无效或查询失败返回 False
        """
        logger.info(banner(f"🚀 开始每日任务 - 账号 {account.label}"))

        try:
            payload = await self.retry.execute(
                lambda: self.api.verify_daily_task(session.token, session.address)
            )
            status = DailyTaskStatus.from_payload(payload)
        except DailyTaskError as e:
            stats.errors += 1
            logger.error(f"账号 {account.label} 查询每日任务状态失败 [{e.kind.value}]: {e}")
            logger.warning("跳过该账号...")
            return False

        now = self.clock()
        stats.cooldown_seconds = status.finish_time + DAILY_WINDOW_SECONDS - now

        completed = False
        for kind, done in ((TaskKind.AGENT, status.agent_done), (TaskKind.REQUEST, status.request_done)):
            flow = TASK_FLOWS[kind]
            if done:
                logger.info(f"✅ {flow.title}任务今日已完成")
                continue

            logger.info(f"{flow.title}任务可执行，开始处理...")
            if await self._complete_task(flow, account, session, stats):
                completed = True

        if status.all_done:
            logger.warning("🏆 今日任务已全部完成！")
            logger.info(f"下一次任务窗口: {format_countdown(stats.cooldown_seconds)} 后")

        stats.last_run = datetime.fromtimestamp(now, tz=self.tz or get_timezone())

        if completed:
            logger.info(banner("✅ 任务执行成功"))

        return True

    async def _complete_task(
        self,
        flow: TaskFlow,
        account: Account,
        session: SessionToken,
        stats: AccountStats,
    ) -> bool:
        """
        生成内容 -> 平台创建 -> 链上登记

        Returns:
            链上交易成功返回 True
        """
        logger.info(f"========== 创建{flow.title} - 账号 {account.label} ==========")

        try:
            content = await self.content.generate(flow.kind)
            logger.info(f"\n{format_generated_content(flow.kind, content)}")

            created = await self.retry.execute(lambda: flow.create(self.api, session.token, content))
            task_id = created.get("id") if created else None
            if not task_id:
                raise InvalidTaskResponse(f"创建{flow.title}响应缺少 id")
            logger.info(f"{flow.title}已创建: ID={task_id}")

            tx_hash = await self.retry.execute(
                lambda: self.chain.contract_call(
                    account.private_key,
                    flow.contract_method,
                    *flow.contract_args(task_id, content),
                )
            )
            if not tx_hash:
                raise InvalidTaskResponse(f"{flow.contract_method} 未返回交易哈希")

        except DailyTaskError as e:
            stats.errors += 1
            logger.error(f"账号 {account.label} 创建{flow.title}失败 [{e.kind.value}]: {e}")
            return False
        except Exception as e:
            stats.errors += 1
            logger.error(f"账号 {account.label} 创建{flow.title}异常: {e}", exc_info=True)
            return False

        setattr(stats, flow.counter, getattr(stats, flow.counter) + 1)
        stats.txs += 1
        logger.info(f"⛓️ 链上登记成功: TX Hash {tx_hash}")
        return True
