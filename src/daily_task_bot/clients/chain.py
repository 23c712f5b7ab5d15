"""链上交易客户端"""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from curl_cffi.requests import AsyncSession, errors
from eth_abi import encode
from eth_account import Account as EthAccount
from eth_utils import function_signature_to_4byte_selector, to_checksum_address

from daily_task_bot.clients.base import ChainClient
from daily_task_bot.config.constants import CONTRACT_METHODS, RECEIPT_POLL_INTERVAL, RPC_TIMEOUT
from daily_task_bot.config.settings import get_settings
from daily_task_bot.core.errors import TransientRemoteFailure

logger = logging.getLogger(__name__)

# estimateGas 结果的放大系数
GAS_MULTIPLIER = 1.2


def parse_signature(signature: str) -> list[str]:
    """
    解析方法签名中的参数类型

    Args:
        signature: 如 "addNewRequest(uint256,string)"

    Returns:
        参数类型列表，如 ["uint256", "string"]
    """
    params = signature[signature.index("(") + 1:signature.rindex(")")]
    return [p.strip() for p in params.split(",") if p.strip()]


def encode_call(signature: str, args: tuple) -> str:
    """
    ABI 编码合约调用数据

    Args:
        signature: 方法签名
        args: 参数值

    Returns:
        0x 开头的 calldata
    """
    types = parse_signature(signature)
    if len(types) != len(args):
        raise ValueError(f"{signature} 需要 {len(types)} 个参数，实际 {len(args)} 个")

    values = [int(v) if t.startswith(("uint", "int")) else v for t, v in zip(types, args)]
    selector = function_signature_to_4byte_selector(signature)
    return "0x" + (selector + encode(types, values)).hex()


class JsonRpcChainClient(ChainClient):
    """通过 JSON-RPC 提交合约交易"""

    def __init__(
        self,
        rpc_url: str | None = None,
        contract_address: str | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.settings = get_settings()
        self.rpc_url = rpc_url or self.settings.rpc_url
        self.contract_address = to_checksum_address(contract_address or self.settings.contract_address)
        self._sleep = sleep
        self._request_id = 0

    async def _rpc(self, method: str, params: list):
        """发送 JSON-RPC 请求并返回 result"""
        self._request_id += 1
        payload = {"jsonrpc": "2.0", "id": self._request_id, "method": method, "params": params}
        proxy_kwargs = self.settings.curl_proxy or {}

        async with AsyncSession(**proxy_kwargs) as session:
            try:
                response = await session.post(
                    self.rpc_url,
                    json=payload,
                    headers={"Content-Type": "application/json"},
                    timeout=RPC_TIMEOUT,
                )
            except errors.RequestsError as e:
                raise TransientRemoteFailure(f"RPC {method} 请求失败: {e}") from e

        if response.status_code != 200:
            raise TransientRemoteFailure(f"RPC {method} 返回 HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise TransientRemoteFailure(f"RPC {method} 响应非 JSON 格式") from e

        if data.get("error"):
            raise TransientRemoteFailure(f"RPC {method} 错误: {data['error']}")
        return data.get("result")

    async def contract_call(self, private_key: str, method: str, *args) -> str:
        """
        调用合约方法并等待回执

        Args:
            private_key: 发送交易的钱包私钥
            method: 合约方法名（见 CONTRACT_METHODS）
            *args: 方法参数

        Returns:
            交易哈希

        Raises:
            TransientRemoteFailure: RPC 失败、交易回滚或等待回执超时
        """
        signature = CONTRACT_METHODS[method]
        sender = EthAccount.from_key(private_key).address
        data = encode_call(signature, args)

        nonce = int(await self._rpc("eth_getTransactionCount", [sender, "pending"]), 16)
        gas_price = int(await self._rpc("eth_gasPrice", []), 16)

        gas = self.settings.gas_limit
        if not gas:
            estimated = int(
                await self._rpc("eth_estimateGas", [{"from": sender, "to": self.contract_address, "data": data}]),
                16,
            )
            gas = int(estimated * GAS_MULTIPLIER)

        tx = {
            "to": self.contract_address,
            "value": 0,
            "data": data,
            "gas": gas,
            "gasPrice": gas_price,
            "nonce": nonce,
            "chainId": self.settings.chain_id,
        }
        signed = EthAccount.sign_transaction(tx, private_key)
        raw = "0x" + bytes(signed.raw_transaction).hex()

        tx_hash = await self._rpc("eth_sendRawTransaction", [raw])
        logger.debug(f"{method} 交易已提交: {tx_hash}")

        await self._wait_for_receipt(tx_hash)
        return tx_hash

    async def _wait_for_receipt(self, tx_hash: str) -> dict:
        """轮询交易回执直到上链或超时"""
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.settings.receipt_timeout

        while True:
            receipt = await self._rpc("eth_getTransactionReceipt", [tx_hash])
            if receipt:
                if receipt.get("status") == "0x0":
                    raise TransientRemoteFailure(f"交易回滚: {tx_hash}")
                return receipt

            if loop.time() >= deadline:
                raise TransientRemoteFailure(f"等待交易回执超时: {tx_hash}")
            await self._sleep(RECEIPT_POLL_INTERVAL)
