"""轮次之间的冷却等待"""

import asyncio
import logging
import sys
import time
from collections.abc import Awaitable, Callable

from daily_task_bot.core.timezone import format_countdown
from daily_task_bot.utils.formatter import separator

logger = logging.getLogger(__name__)

CLEAR_WIDTH = 80


def render_progress(remaining: float) -> None:
    """在同一行刷新剩余时间"""
    remaining = int(remaining)
    hours, minutes = remaining // 3600, (remaining % 3600) // 60
    sys.stdout.write(f"\r⏳ 距离下次检查: {format_countdown(remaining)} ({hours}h {minutes}m remaining)")
    sys.stdout.flush()


def clear_progress() -> None:
    sys.stdout.write("\r" + " " * CLEAR_WIDTH + "\r")
    sys.stdout.flush()


async def _tick(
    stop: asyncio.Event,
    end_time: float,
    interval: float,
    display: Callable[[float], None],
    clock: Callable[[], float],
) -> None:
    """每 interval 秒显示一次进度，直到 stop 被设置"""
    while not stop.is_set():
        try:
            await asyncio.wait_for(stop.wait(), timeout=interval)
        except asyncio.TimeoutError:
            remaining = end_time - clock()
            if remaining <= 0:
                return
            display(remaining)


async def wait_with_progress(
    seconds: float,
    interval: float = 60,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    display: Callable[[float], None] = render_progress,
    clock: Callable[[], float] = time.monotonic,
) -> None:
    """
    等待 seconds 秒，期间定期显示剩余时间

    进度显示绑定在 stop 事件上：等待结束或被中断（取消）时都会停止。

    Args:
        seconds: 等待时间（秒）
        interval: 进度刷新间隔（秒）
        sleep: 实际等待函数
        display: 进度显示函数
        clock: 单调时钟
    """
    logger.info(separator())
    logger.info(f"⌛ {int(seconds // 3600)} 小时后进行下一次任务检查")
    logger.info(separator())

    stop = asyncio.Event()
    ticker = asyncio.create_task(_tick(stop, clock() + seconds, interval, display, clock))

    try:
        await sleep(seconds)
    finally:
        stop.set()
        await ticker
        clear_progress()
