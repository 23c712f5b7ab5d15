"""指数退避重试"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_BASE_DELAY = 5.0


class RetryPolicy:
    """
    对单个可失败操作进行有限次数的指数退避重试

    第 i 次（从 0 开始）失败且不是最后一次时，等待 base_delay * 2**i 后重试；
    最后一次失败时原样抛出异常，不包装也不吞掉。
    """

    def __init__(
        self,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        base_delay: float = DEFAULT_BASE_DELAY,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self._sleep = sleep

    def delay_for(self, attempt: int, base_delay: float | None = None) -> float:
        """第 attempt 次失败后的等待时间"""
        delay = self.base_delay if base_delay is None else base_delay
        return delay * (2 ** attempt)

    async def execute(
        self,
        operation: Callable[[], Awaitable[T]],
        max_attempts: int | None = None,
        base_delay: float | None = None,
    ) -> T:
        """
        执行操作，失败时按指数退避重试

        Args:
            operation: 无参数的异步操作
            max_attempts: 最大尝试次数（默认使用实例配置）
            base_delay: 首次重试等待时间（默认使用实例配置）

        Returns:
            第一次成功的结果
        """
        attempts = max_attempts or self.max_attempts

        for attempt in range(attempts):
            try:
                return await operation()
            except Exception as e:
                if attempt == attempts - 1:
                    raise

                wait_time = self.delay_for(attempt, base_delay)
                logger.warning(f"第 {attempt + 1}/{attempts} 次尝试失败: {e}，{wait_time:g} 秒后重试...")
                await self._sleep(wait_time)

