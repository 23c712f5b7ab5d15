"""配置管理模块"""

import logging
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, ConfigDict, field_validator
from eth_utils import is_address, to_checksum_address
from pydantic_settings import BaseSettings

DEFAULT_WAIT_HOURS = 12


class Settings(BaseSettings):
    """应用配置类"""

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==================== 账号配置 ====================
    credentials_file: str = Field(default=".env", description="PRIVATE_KEY 所在文件（每行一个）")

    # ==================== 调度配置 ====================
    wait_hours: int = Field(default=DEFAULT_WAIT_HOURS, description="两轮之间的冷却时间（小时），无效或为 0 时使用 12")
    account_delay: float = Field(default=3.0, ge=0, description="账号之间的间隔（秒）")
    recovery_delay: float = Field(default=300.0, ge=0, description="主循环异常后的恢复等待（秒）")
    progress_interval: float = Field(default=60.0, gt=0, description="倒计时刷新间隔（秒）")

    # ==================== 重试配置 ====================
    max_retries: int = Field(default=3, ge=1, description="最大尝试次数")
    retry_delay: float = Field(default=5.0, ge=0, description="首次重试等待（秒），之后翻倍")

    # ==================== 平台 API 配置 ====================
    api_base_url: str = Field(default="https://api.agentverse.ai/api", description="任务平台 API 地址")
    invite_code: str = Field(default="", description="邀请码")
    impersonate_browser: str = Field(default="chrome136", description="curl_cffi 模拟浏览器版本")

    # ==================== 链配置 ====================
    rpc_url: str = Field(default="https://rpc-testnet.agentverse.ai", description="JSON-RPC 地址")
    chain_id: int = Field(default=1, description="链 ID")
    contract_address: str = Field(..., description="任务登记合约地址")
    gas_limit: int | None = Field(default=None, description="固定 gas 上限，未配置时调用 eth_estimateGas")
    receipt_timeout: float = Field(default=120.0, gt=0, description="等待交易回执的超时（秒）")

    # ==================== AI 配置 ====================
    openai_api_key: str = Field(..., description="OpenAI 兼容接口密钥")
    openai_base_url: str | None = Field(default=None, description="OpenAI 兼容接口地址")
    openai_model: str = Field(default="gpt-4o-mini", description="生成内容使用的模型")

    # ==================== 运行时配置 ====================
    timezone: str = Field(default="Asia/Shanghai", description="时区配置")

    # ==================== SOCKS5 代理配置 ====================
    socks5_proxy: str = Field(default="", alias="SOCKS5_PROXY", description="SOCKS5 代理地址")

    # ==================== 日志配置 ====================
    log_level_str: str = Field(default="INFO", alias="LOG_LEVEL", description="日志级别: DEBUG, INFO, WARNING, ERROR")

    @field_validator("log_level_str")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """验证日志级别"""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}, got '{v}'")
        return v_upper

    @field_validator("contract_address")
    @classmethod
    def validate_contract_address(cls, v: str) -> str:
        """验证合约地址格式"""
        v = v.strip()
        if not v.startswith("0x") or not is_address(v):
            raise ValueError(f"contract_address must be a 0x-prefixed 20-byte address, got '{v}'")
        # eth-account 只接受校验和格式的 to 地址
        return to_checksum_address(v)

    @field_validator("wait_hours", mode="before")
    @classmethod
    def validate_wait_hours(cls, v) -> int:
        """无法解析或不大于 0 时回退到默认值"""
        try:
            hours = int(v)
        except (TypeError, ValueError):
            return DEFAULT_WAIT_HOURS
        return hours if hours > 0 else DEFAULT_WAIT_HOURS

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """验证时区名称"""
        try:
            ZoneInfo(v)
        except (ValueError, ZoneInfoNotFoundError):
            raise ValueError(f"timezone must be a valid IANA zone name, got '{v}'")
        return v

    @property
    def log_level(self) -> int:
        """获取日志级别常量"""
        return getattr(logging, self.log_level_str)

    @property
    def wait_seconds(self) -> float:
        """两轮之间的冷却时间（秒）"""
        return self.wait_hours * 3600

    @property
    def curl_proxy(self) -> dict | None:
        """
        获取用于 curl_cffi 的代理配置

        使用 socks5h:// 协议（对应 curl 的 --socks5-hostname），
        让代理服务器进行 DNS 解析。

        Returns:
            代理配置字典，未配置时返回 None
        """
        if not self.socks5_proxy:
            return None

        proxy_url = self.socks5_proxy
        if proxy_url.startswith("socks5://"):
            proxy_url = proxy_url.replace("socks5://", "socks5h://", 1)

        return {"proxies": {"http": proxy_url, "https": proxy_url}}


# 全局配置实例
_settings: Settings | None = None


def get_settings() -> Settings:
    """获取配置实例（单例模式）"""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
