"""账号认证服务"""

import logging

from daily_task_bot.clients.base import Signer, TaskApi
from daily_task_bot.config.constants import AuthState
from daily_task_bot.core.errors import AuthenticationFailure
from daily_task_bot.models.account import Account, SessionToken

logger = logging.getLogger(__name__)


class AuthSession:
    """
    认证服务

    状态流转: UNAUTHENTICATED -> AUTHENTICATING -> AUTHENTICATED，
    令牌过期时 AUTHENTICATED -> EXPIRED -> AUTHENTICATING。
    认证流程不做重试，失败后由下一轮重新认证。
    """

    def __init__(self, api: TaskApi, signer: Signer):
        self.api = api
        self.signer = signer
        self._states: dict[int, AuthState] = {}

    def state(self, account: Account) -> AuthState:
        """获取账号当前认证状态"""
        return self._states.get(account.index, AuthState.UNAUTHENTICATED)

    @staticmethod
    def is_valid(session: SessionToken, now: float) -> bool:
        """令牌是否仍然有效（now >= expires_at 即过期）"""
        return not session.is_expired(now)

    def mark_expired(self, account: Account) -> None:
        """标记账号令牌已过期"""
        self._states[account.index] = AuthState.EXPIRED
        logger.warning(f"账号 {account.label} 令牌已过期，重新认证...")

    async def acquire(self, account: Account) -> SessionToken:
        """
        nonce -> 签名 -> 登录，获取会话令牌

        Args:
            account: 账号

        Returns:
            会话令牌

        Raises:
            AuthenticationFailure: 任一步骤没有得到可用数据
        """
        logger.info(f"========== 认证 - 账号 {account.label} ==========")
        self._states[account.index] = AuthState.AUTHENTICATING

        try:
            address = self.signer.derive_address(account.private_key)
            logger.info(f"钱包地址: {address}")

            nonce = await self.api.get_nonce(address)
            if not nonce:
                raise AuthenticationFailure("获取 nonce 失败")
            logger.info(f"已获取 nonce: {nonce}")

            signature = self.signer.sign_nonce(account.private_key, nonce)
            logger.debug("nonce 签名完成")

            login_data = await self.api.login(address, signature, nonce)
            token = login_data.get("token") if login_data else None
            if not token:
                raise AuthenticationFailure("登录失败: 未返回会话令牌")

            expires_at = float(login_data.get("token_expire_time") or 0)

        except AuthenticationFailure:
            self._states[account.index] = AuthState.UNAUTHENTICATED
            raise
        except Exception as e:
            self._states[account.index] = AuthState.UNAUTHENTICATED
            raise AuthenticationFailure(f"认证异常: {e}") from e

        logger.info(f"账号 {account.label} 登录成功")
        await self._register_inviter(account, token)

        self._states[account.index] = AuthState.AUTHENTICATED
        return SessionToken(token=token, expires_at=expires_at, address=address)

    async def _register_inviter(self, account: Account, token: str) -> None:
        """绑定邀请人（失败只记录日志）"""
        try:
            await self.api.set_inviter(token)
            logger.info("邀请人已配置")
        except Exception as e:
            logger.warning(f"账号 {account.label} 绑定邀请人失败: {e}")
