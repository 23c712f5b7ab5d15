"""时区处理模块"""

import time
from datetime import datetime
from zoneinfo import ZoneInfo

from daily_task_bot.config.settings import get_settings


def get_timezone() -> ZoneInfo:
    """获取配置的时区"""
    return ZoneInfo(get_settings().timezone)


def now() -> datetime:
    """获取当前时区的当前时间（带时区信息）"""
    return datetime.now(get_timezone())


def timestamp() -> float:
    """当前 Unix 时间戳（秒）"""
    return time.time()


def format_datetime(dt: datetime, fmt: str = "%Y-%m-%d %H:%M:%S") -> str:
    """格式化 datetime 为本地时区字符串"""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=get_timezone())
    return dt.astimezone(get_timezone()).strftime(fmt)


def format_countdown(seconds: float) -> str:
    """
    格式化倒计时为 HH:MM:SS

    Args:
        seconds: 剩余秒数，负数按 0 处理

    Returns:
        倒计时字符串
    """
    seconds = max(int(seconds), 0)
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"
