"""钱包签名"""

from eth_account import Account as EthAccount
from eth_account.messages import encode_defunct

from daily_task_bot.clients.base import Signer


class EthSigner(Signer):
    """基于 eth-account 的 EIP-191 签名"""

    def derive_address(self, private_key: str) -> str:
        return EthAccount.from_key(private_key).address

    def sign_nonce(self, private_key: str, nonce: str) -> str:
        signed = EthAccount.sign_message(encode_defunct(text=nonce), private_key=private_key)
        return "0x" + bytes(signed.signature).hex()
