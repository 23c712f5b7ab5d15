"""任务平台 API 客户端"""

import logging

from curl_cffi.requests import AsyncSession, errors

from daily_task_bot.clients.base import TaskApi
from daily_task_bot.config.constants import (
    DEFAULT_HTTP_HEADERS,
    DEFAULT_TIMEOUT,
    LOGIN_TIMEOUT,
    ApiPath,
    get_auth_headers,
)
from daily_task_bot.config.settings import get_settings
from daily_task_bot.core.errors import TransientRemoteFailure

logger = logging.getLogger(__name__)


class TaskApiClient(TaskApi):
    """基于 curl_cffi 的任务平台 API 客户端"""

    def __init__(self, base_url: str | None = None):
        self.settings = get_settings()
        self.base_url = (base_url or self.settings.api_base_url).rstrip("/")

    async def _request(
        self,
        method: str,
        path: str,
        headers: dict[str, str],
        timeout: int = DEFAULT_TIMEOUT,
        **kwargs,
    ) -> dict | None:
        """
        发送请求并取出响应中的 data 字段

        Args:
            method: HTTP 方法
            path: API 路径
            headers: HTTP 头
            timeout: 超时（秒）

        Returns:
            data 字段，缺失时返回 None

        Raises:
            TransientRemoteFailure: 网络错误、非 2xx 状态或响应非 JSON
        """
        url = f"{self.base_url}{path}"
        proxy_kwargs = self.settings.curl_proxy or {}

        # 使用 async with 确保会话正确关闭
        async with AsyncSession(impersonate=self.settings.impersonate_browser, **proxy_kwargs) as session:
            try:
                logger.debug(f"{method} {url}")
                response = await session.request(method, url, headers=headers, timeout=timeout, **kwargs)
            except errors.RequestsError as e:
                raise TransientRemoteFailure(f"{method} {path} 请求失败: {e}") from e

        logger.debug(f"{method} {path} 响应状态: {response.status_code}")

        if response.status_code >= 400:
            raise TransientRemoteFailure(f"{method} {path} 返回 HTTP {response.status_code}")

        try:
            payload = response.json()
        except ValueError as e:
            raise TransientRemoteFailure(f"{method} {path} 响应非 JSON 格式: {response.text[:100]}") from e

        if not isinstance(payload, dict):
            return None
        return payload.get("data")

    async def get_nonce(self, address: str) -> str | None:
        data = await self._request(
            "GET",
            ApiPath.NONCE,
            headers=DEFAULT_HTTP_HEADERS.copy(),
            params={"address": address},
        )
        if not data:
            return None
        return data.get("nonce")

    async def login(self, address: str, signature: str, nonce: str) -> dict | None:
        return await self._request(
            "POST",
            ApiPath.LOGIN,
            headers=DEFAULT_HTTP_HEADERS.copy(),
            timeout=LOGIN_TIMEOUT,
            json={"address": address, "signature": signature, "nonce": nonce},
        )

    async def set_inviter(self, token: str) -> None:
        await self._request(
            "POST",
            ApiPath.INVITER,
            headers=get_auth_headers(token),
            json={"invite_code": self.settings.invite_code},
        )

    async def verify_daily_task(self, token: str, address: str) -> dict | None:
        return await self._request(
            "GET",
            ApiPath.DAILY_TASK,
            headers=get_auth_headers(token),
            params={"address": address},
        )

    async def create_agent(self, token: str, name: str, description: str) -> dict | None:
        return await self._request(
            "POST",
            ApiPath.CREATE_AGENT,
            headers=get_auth_headers(token),
            json={"name": name, "description": description},
        )

    async def create_request(self, token: str, title: str, description: str) -> dict | None:
        return await self._request(
            "POST",
            ApiPath.CREATE_REQUEST,
            headers=get_auth_headers(token),
            json={"title": title, "description": description},
        )

    async def get_user_data(self, token: str) -> dict | None:
        return await self._request("GET", ApiPath.USER_INFO, headers=get_auth_headers(token))
