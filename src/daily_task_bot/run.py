"""程序启动入口"""

import asyncio
import logging
import signal
import sys
import time
from datetime import datetime

from pydantic import ValidationError

from daily_task_bot.clients.api import TaskApiClient
from daily_task_bot.clients.chain import JsonRpcChainClient
from daily_task_bot.clients.content import OpenAIContentGenerator
from daily_task_bot.clients.signer import EthSigner
from daily_task_bot.config.credentials import load_private_keys
from daily_task_bot.config.settings import Settings, get_settings
from daily_task_bot.core.errors import ConfigurationError
from daily_task_bot.core.retry import RetryPolicy
from daily_task_bot.core.timezone import format_datetime, get_timezone, now
from daily_task_bot.services import AccountRegistry, AuthSession, TaskOrchestrator
from daily_task_bot.tasks.scheduler import CycleScheduler
from daily_task_bot.utils.formatter import banner, separator


# ANSI 颜色代码
class Colors:
    """ANSI 颜色代码"""
    RESET = "\033[0m"


# 日志级别颜色映射（清爽配色）
LOG_COLORS = {
    logging.DEBUG: "\033[38;5;245m",      # 灰色（柔和）
    logging.INFO: "\033[38;5;79m",        # 青绿色（清爽）
    logging.WARNING: "\033[38;5;221m",    # 柔和橙黄
    logging.ERROR: "\033[38;5;203m",      # 柔和红
    logging.CRITICAL: "\033[1;38;5;203m", # 粗体柔和红
}

# 日志级别名称映射
LOG_LEVEL_NAMES = {
    logging.DEBUG: "DEBUG",
    logging.INFO: "INFO ",
    logging.WARNING: "WARN ",
    logging.ERROR: "ERROR",
    logging.CRITICAL: "CRIT ",
}

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


class ColorFormatter(logging.Formatter):
    """带颜色和对齐的日志格式化器"""

    def formatTime(self, record, datefmt=None):
        """使用配置时区的时间格式化器"""
        dt = datetime.fromtimestamp(record.created, tz=get_timezone())
        ct = dt.replace(tzinfo=None).timetuple()

        if datefmt:
            return time.strftime(datefmt, ct)
        return time.strftime(self.default_time_format, ct)[:19]

    def format(self, record):
        """格式化日志记录，添加颜色"""
        level_color = LOG_COLORS.get(record.levelno, "")
        record.levelname = LOG_LEVEL_NAMES.get(record.levelno, record.levelname)

        result = super().format(record)

        # 整条消息应用颜色
        if level_color:
            result = f"{level_color}{result}{Colors.RESET}"

        return result


def setup_logging(level: int = logging.INFO) -> None:
    """配置根日志（彩色输出到 stdout）"""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ColorFormatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    logging.basicConfig(level=level, handlers=[handler], force=True)

    # 隐藏冗余的库日志
    logging.getLogger("asyncio").setLevel(logging.INFO)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)


def build_scheduler(settings: Settings, registry: AccountRegistry) -> CycleScheduler:
    """按配置组装调度器"""
    api = TaskApiClient()
    retry = RetryPolicy(max_attempts=settings.max_retries, base_delay=settings.retry_delay)
    orchestrator = TaskOrchestrator(
        api=api,
        content=OpenAIContentGenerator(),
        chain=JsonRpcChainClient(),
        retry=retry,
        tz=get_timezone(),
    )
    return CycleScheduler(
        registry=registry,
        auth=AuthSession(api=api, signer=EthSigner()),
        orchestrator=orchestrator,
        api=api,
        wait_seconds=settings.wait_seconds,
        account_delay=settings.account_delay,
        recovery_delay=settings.recovery_delay,
        progress_interval=settings.progress_interval,
    )


def _raise_interrupt(signum, frame):
    raise KeyboardInterrupt


def main():
    """启动任务循环"""
    try:
        settings = get_settings()
    except ValidationError as e:
        print(f"配置错误:\n{e}", file=sys.stderr)
        sys.exit(1)

    setup_logging(settings.log_level)
    logger = logging.getLogger(__name__)

    try:
        registry = AccountRegistry(load_private_keys(settings.credentials_file))
    except ConfigurationError as e:
        logger.error(f"❌ [{e.kind.value}] {e}")
        sys.exit(1)

    logger.info(banner("🔥 系统已初始化"))
    logger.info(f"启动时间: {format_datetime(now())}")
    logger.info(f"模式: 顺序处理（每 {settings.wait_hours} 小时一轮）")
    logger.info(f"账号总数: {len(registry)}")
    logger.info(separator())

    scheduler = build_scheduler(settings, registry)
    signal.signal(signal.SIGTERM, _raise_interrupt)

    try:
        asyncio.run(scheduler.run_forever())
    except KeyboardInterrupt:
        scheduler.aggregator.log_shutdown_report(registry)
        sys.exit(0)
    except Exception as e:
        logger.critical(f"致命错误: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
