"""Tests for contract call encoding and submission."""

import pytest
from eth_abi import decode
from eth_utils import to_checksum_address

from conftest import PRIVATE_KEY
from daily_task_bot.clients.chain import JsonRpcChainClient, encode_call, parse_signature
from daily_task_bot.core.errors import TransientRemoteFailure


def test_parse_signature():
    assert parse_signature("addNewAgent(uint256,string,string)") == ["uint256", "string", "string"]
    assert parse_signature("ping()") == []


def test_encode_call_uses_selector_and_abi_encoding():
    data = encode_call("transfer(address,uint256)", ("0x" + "00" * 19 + "01", 5))

    assert data.startswith("0xa9059cbb")
    assert len(data) == 2 + 8 + 128


def test_encode_call_converts_numeric_ids():
    data = encode_call("addNewRequest(uint256,string)", ("202", "Need a summary"))

    task_id, title = decode(["uint256", "string"], bytes.fromhex(data[10:]))
    assert (task_id, title) == (202, "Need a summary")


def test_encode_call_rejects_wrong_arity():
    with pytest.raises(ValueError):
        encode_call("addNewRequest(uint256,string)", ("1",))


class FakeRpc:
    def __init__(self, receipts):
        self.receipts = list(receipts)
        self.calls: list[tuple[str, list]] = []

    async def __call__(self, method, params):
        self.calls.append((method, params))
        if method == "eth_getTransactionCount":
            return "0x5"
        if method == "eth_gasPrice":
            return "0x3b9aca00"
        if method == "eth_estimateGas":
            return "0x5208"
        if method == "eth_sendRawTransaction":
            return "0xtxhash"
        if method == "eth_getTransactionReceipt":
            return self.receipts.pop(0)
        raise AssertionError(method)


@pytest.fixture()
def client(settings_env, sleep):
    return JsonRpcChainClient(sleep=sleep)


@pytest.mark.asyncio
async def test_contract_call_submits_and_waits_for_receipt(client, sleep, monkeypatch):
    rpc = FakeRpc([None, {"status": "0x1"}])
    monkeypatch.setattr(client, "_rpc", rpc)

    tx_hash = await client.contract_call(PRIVATE_KEY, "addNewAgent", "101", "Helper", "Helps.")

    assert tx_hash == "0xtxhash"
    methods = [m for m, _ in rpc.calls]
    assert methods == [
        "eth_getTransactionCount",
        "eth_gasPrice",
        "eth_estimateGas",
        "eth_sendRawTransaction",
        "eth_getTransactionReceipt",
        "eth_getTransactionReceipt",
    ]
    raw = rpc.calls[3][1][0]
    assert raw.startswith("0x")
    assert sleep.calls == [2.0]


@pytest.mark.asyncio
async def test_reverted_transaction_is_transient_failure(client, monkeypatch):
    monkeypatch.setattr(client, "_rpc", FakeRpc([{"status": "0x0"}]))

    with pytest.raises(TransientRemoteFailure):
        await client.contract_call(PRIVATE_KEY, "addNewRequest", "202", "Need a summary")


@pytest.mark.asyncio
async def test_fixed_gas_limit_skips_estimate(client, monkeypatch):
    rpc = FakeRpc([{"status": "0x1"}])
    monkeypatch.setattr(client, "_rpc", rpc)
    monkeypatch.setattr(client.settings, "gas_limit", 300_000)

    await client.contract_call(PRIVATE_KEY, "addNewRequest", "202", "Need a summary")

    assert "eth_estimateGas" not in [m for m, _ in rpc.calls]


@pytest.mark.asyncio
async def test_lowercase_contract_address_is_accepted(settings_env, sleep, monkeypatch):
    lowercase = "0x" + "cd" * 20
    client = JsonRpcChainClient(contract_address=lowercase, sleep=sleep)
    rpc = FakeRpc([{"status": "0x1"}])
    monkeypatch.setattr(client, "_rpc", rpc)

    assert client.contract_address == to_checksum_address(lowercase)
    assert await client.contract_call(PRIVATE_KEY, "addNewAgent", "101", "Helper", "Helps.") == "0xtxhash"
    assert rpc.calls[2][1][0]["to"] == client.contract_address
