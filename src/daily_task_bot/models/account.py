"""账号数据模型"""

from dataclasses import dataclass, field
from datetime import datetime

from daily_task_bot.core.errors import InvalidTaskResponse


@dataclass(frozen=True)
class Account:
    """账号模型（启动时创建，运行期间不变）"""

    index: int
    private_key: str = field(repr=False)

    @property
    def label(self) -> str:
        """日志中使用的账号编号（从 1 开始）"""
        return f"#{self.index + 1}"


@dataclass
class AccountStats:
    """账号运行统计"""

    start_time: float
    uid: str | None = None
    total_point: int = 0
    days: int = 0
    agents: int = 0
    requests: int = 0
    txs: int = 0
    errors: int = 0
    last_run: datetime | None = None
    cooldown_seconds: float = 0


@dataclass(frozen=True)
class SessionToken:
    """会话令牌（失效时整体替换，不原地修改）"""

    token: str = field(repr=False)
    expires_at: float
    address: str

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


@dataclass(frozen=True)
class DailyTaskStatus:
    """每日任务状态（每轮获取，用完即弃）"""

    agent_done: bool
    request_done: bool
    finish_time: float

    @property
    def all_done(self) -> bool:
        return self.agent_done and self.request_done

    @classmethod
    def from_payload(cls, data: dict | None) -> "DailyTaskStatus":
        """
        从接口响应构造任务状态

        Args:
            data: 接口返回的 data 字段

        Raises:
            InvalidTaskResponse: 响应为空或缺少完成标记
        """
        if not isinstance(data, dict):
            raise InvalidTaskResponse("每日任务状态响应无效")

        if "is_create_agent" not in data or "is_create_request" not in data:
            raise InvalidTaskResponse("每日任务状态缺少完成标记")

        return cls(
            agent_done=bool(data["is_create_agent"]),
            request_done=bool(data["is_create_request"]),
            finish_time=float(data.get("finish_time") or 0),
        )
