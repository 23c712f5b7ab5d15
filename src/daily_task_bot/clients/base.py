"""外部协作方接口定义"""

from abc import ABC, abstractmethod

from daily_task_bot.config.constants import TaskKind


class TaskApi(ABC):
    """任务平台 API 接口"""

    @abstractmethod
    async def get_nonce(self, address: str) -> str | None:
        """获取签名用的 nonce，缺少 data 时返回 None"""

    @abstractmethod
    async def login(self, address: str, signature: str, nonce: str) -> dict | None:
        """
        登录

        Returns:
            包含 token / token_expire_time 的字典，失败返回 None
        """

    @abstractmethod
    async def set_inviter(self, token: str) -> None:
        """绑定邀请人"""

    @abstractmethod
    async def verify_daily_task(self, token: str, address: str) -> dict | None:
        """查询每日任务状态"""

    @abstractmethod
    async def create_agent(self, token: str, name: str, description: str) -> dict | None:
        """创建智能体，返回包含 id 的字典"""

    @abstractmethod
    async def create_request(self, token: str, title: str, description: str) -> dict | None:
        """创建需求，返回包含 id 的字典"""

    @abstractmethod
    async def get_user_data(self, token: str) -> dict | None:
        """获取用户资料（uid / total_point / days）"""


class Signer(ABC):
    """私钥签名接口"""

    @abstractmethod
    def derive_address(self, private_key: str) -> str:
        """由私钥推导钱包地址"""

    @abstractmethod
    def sign_nonce(self, private_key: str, nonce: str) -> str:
        """对 nonce 签名，私钥格式错误时抛出异常"""


class ChainClient(ABC):
    """链上交易接口"""

    @abstractmethod
    async def contract_call(self, private_key: str, method: str, *args) -> str:
        """以 private_key 对应的钱包调用合约方法，返回交易哈希"""


class ContentGenerator(ABC):
    """AI 内容生成接口"""

    @abstractmethod
    async def generate(self, kind: TaskKind) -> dict:
        """生成任务内容（已校验必需字段）"""
