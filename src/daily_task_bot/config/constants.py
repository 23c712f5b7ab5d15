"""常量定义模块"""

from enum import Enum
from typing import Final


# ==================== HTTP 请求配置 ====================
DEFAULT_HTTP_HEADERS: Final[dict[str, str]] = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/125.0.0.0 Safari/537.36 Edg/125.0.0.0",
    "sec-ch-ua": '"Not A(Brand";v="99", "Microsoft Edge";v="121", "Chromium";v="121"',
    "sec-ch-ua-mobile": "?0",
    "sec-ch-ua-platform": '"Windows"',
    "accept-language": "en-US,en;q=0.9",
    "Content-Type": "application/json",
}


def get_auth_headers(token: str) -> dict[str, str]:
    """
    获取带会话令牌的 HTTP 头

    Args:
        token: 会话令牌

    Returns:
        HTTP 头字典
    """
    headers = DEFAULT_HTTP_HEADERS.copy()
    headers["Authorization"] = f"Bearer {token}"
    return headers


# ==================== 请求超时配置 ====================
DEFAULT_TIMEOUT: Final[int] = 15  # 默认超时 15 秒
LOGIN_TIMEOUT: Final[int] = 30  # 登录超时 30 秒
RPC_TIMEOUT: Final[int] = 30


# ==================== 平台 API 路径 ====================
class ApiPath:
    """任务平台 API 路径"""

    NONCE = "/auth/nonce"
    LOGIN = "/auth/login"
    INVITER = "/user/inviter"
    DAILY_TASK = "/task/daily"
    CREATE_AGENT = "/agent/create"
    CREATE_REQUEST = "/request/create"
    USER_INFO = "/user/info"


# ==================== 调度常量 ====================
DAILY_WINDOW_SECONDS: Final[int] = 24 * 60 * 60
RECEIPT_POLL_INTERVAL: Final[float] = 2.0


# ==================== 任务类型 ====================
class TaskKind(str, Enum):
    """每日任务类型枚举"""
    AGENT = "agent"
    REQUEST = "request"


# 每种任务生成内容必须包含的字段
TASK_CONTENT_FIELDS: Final[dict[TaskKind, tuple[str, str]]] = {
    TaskKind.AGENT: ("name_agent", "description"),
    TaskKind.REQUEST: ("title", "description"),
}

# 每种任务对应的合约方法签名
CONTRACT_METHODS: Final[dict[str, str]] = {
    "addNewAgent": "addNewAgent(uint256,string,string)",
    "addNewRequest": "addNewRequest(uint256,string)",
}


# ==================== 认证状态 ====================
class AuthState(str, Enum):
    """认证状态枚举"""
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"
    EXPIRED = "expired"
