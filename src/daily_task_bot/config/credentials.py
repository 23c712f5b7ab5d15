"""账号私钥加载模块"""

import logging
from pathlib import Path

from daily_task_bot.core.errors import ConfigurationError
from daily_task_bot.utils.validator import clean_input, validate_private_key

logger = logging.getLogger(__name__)

PRIVATE_KEY_PREFIX = "PRIVATE_KEY="


def parse_private_keys(text: str) -> list[str]:
    """
    从配置文本中解析私钥

    每行一个 PRIVATE_KEY=0x...，键名不带编号，按出现顺序保留。

    Args:
        text: 配置文件内容

    Returns:
        合法私钥列表
    """
    keys = []
    for lineno, line in enumerate(text.splitlines(), start=1):
        line = clean_input(line)
        if not line.startswith(PRIVATE_KEY_PREFIX):
            continue

        key = line[len(PRIVATE_KEY_PREFIX):].strip().strip('"').strip("'")
        if validate_private_key(key):
            keys.append(key)
        else:
            logger.warning(f"忽略第 {lineno} 行: 私钥格式无效")

    return keys


def load_private_keys(path: str | Path) -> list[str]:
    """
    加载私钥列表

    Args:
        path: 配置文件路径

    Returns:
        合法私钥列表（至少一个）

    Raises:
        ConfigurationError: 文件不存在或没有合法私钥
    """
    path = Path(path)
    if not path.is_file():
        raise ConfigurationError(f"配置文件不存在: {path}")

    keys = parse_private_keys(path.read_text(encoding="utf-8"))
    if not keys:
        raise ConfigurationError(
            f"{path} 中没有找到合法的私钥，请按如下格式添加:\n"
            "PRIVATE_KEY=0x...\n"
            "PRIVATE_KEY=0x..."
        )

    logger.info(f"已加载 {len(keys)} 个账号私钥")
    return keys
