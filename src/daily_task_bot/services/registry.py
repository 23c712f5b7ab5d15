"""账号注册表"""

import logging
from collections.abc import Callable, Iterator

from daily_task_bot.core.errors import ConfigurationError
from daily_task_bot.core.timezone import timestamp
from daily_task_bot.models.account import Account, AccountStats

logger = logging.getLogger(__name__)


class AccountRegistry:
    """
    持有所有账号及其运行统计

    每个账号对应且只对应一份统计，启动时创建，运行期间不销毁。
    统计只由当前处理中的账号修改，不需要加锁。
    """

    def __init__(self, private_keys: list[str], clock: Callable[[], float] = timestamp):
        if not private_keys:
            raise ConfigurationError("没有可用的账号私钥")

        started = clock()
        self._accounts = [Account(index=i, private_key=key) for i, key in enumerate(private_keys)]
        self._stats = {account.index: AccountStats(start_time=started) for account in self._accounts}

        logger.debug(f"账号注册表已初始化: {len(self._accounts)} 个账号")

    def __len__(self) -> int:
        return len(self._accounts)

    def __iter__(self) -> Iterator[Account]:
        return iter(self._accounts)

    def stats(self, account: Account | int) -> AccountStats:
        """获取账号统计"""
        index = account.index if isinstance(account, Account) else account
        return self._stats[index]

    def items(self) -> list[tuple[Account, AccountStats]]:
        """按账号顺序返回 (账号, 统计)"""
        return [(account, self._stats[account.index]) for account in self._accounts]

    @property
    def start_time(self) -> float:
        """第一个账号的开始时间"""
        return self._stats[0].start_time
