"""Shared test fixtures."""

import pytest

from daily_task_bot.clients.base import ChainClient, ContentGenerator, Signer, TaskApi
from daily_task_bot.config import settings as settings_module
from daily_task_bot.config.constants import TaskKind
from daily_task_bot.core.errors import InvalidGeneratedContent, TransientRemoteFailure
from daily_task_bot.core.retry import RetryPolicy
from daily_task_bot.models.account import Account, SessionToken

PRIVATE_KEY = "0x" + "11" * 32
OTHER_KEY = "0x" + "22" * 32
ADDRESS = "0x19E7E376E7C213B7E7e7e46cc70A5dD086DAff2A"


class FakeApi(TaskApi):
    """In-memory task API recording every call."""

    def __init__(self):
        self.calls: list[str] = []
        self.nonce: str | None = "nonce-123"
        self.login_data: dict | None = {"token": "tok", "token_expire_time": 10_000}
        self.daily_task: dict | None = {
            "is_create_agent": False,
            "is_create_request": False,
            "finish_time": 1_000,
        }
        self.daily_task_failures = 0
        self.create_failures = 0
        self.user_data: dict | None = {"uid": "u-1", "total_point": 42, "days": 3}
        self.user_data_error: Exception | None = None
        self.inviter_error: Exception | None = None

    async def get_nonce(self, address):
        self.calls.append("get_nonce")
        return self.nonce

    async def login(self, address, signature, nonce):
        self.calls.append("login")
        return self.login_data

    async def set_inviter(self, token):
        self.calls.append("set_inviter")
        if self.inviter_error:
            raise self.inviter_error

    async def verify_daily_task(self, token, address):
        self.calls.append("verify_daily_task")
        if self.daily_task_failures:
            self.daily_task_failures -= 1
            raise TransientRemoteFailure("daily task unavailable")
        return self.daily_task

    async def create_agent(self, token, name, description):
        self.calls.append("create_agent")
        if self.create_failures:
            self.create_failures -= 1
            raise TransientRemoteFailure("create failed")
        return {"id": "101"}

    async def create_request(self, token, title, description):
        self.calls.append("create_request")
        return {"id": "202"}

    async def get_user_data(self, token):
        self.calls.append("get_user_data")
        if self.user_data_error:
            raise self.user_data_error
        return self.user_data

    def count(self, name: str) -> int:
        return self.calls.count(name)


class FakeSigner(Signer):
    def derive_address(self, private_key):
        if not private_key.startswith("0x"):
            raise ValueError("malformed key")
        return ADDRESS

    def sign_nonce(self, private_key, nonce):
        return f"sig:{nonce}"


class FakeChain(ChainClient):
    def __init__(self):
        self.calls: list[tuple] = []
        self.failures = 0

    async def contract_call(self, private_key, method, *args):
        self.calls.append((method, *args))
        if self.failures:
            self.failures -= 1
            raise TransientRemoteFailure("rpc down")
        return f"0xhash{len(self.calls)}"


class FakeContent(ContentGenerator):
    def __init__(self):
        self.invalid: set[TaskKind] = set()

    async def generate(self, kind):
        if kind in self.invalid:
            raise InvalidGeneratedContent(f"{kind.value} content missing fields")
        if kind == TaskKind.AGENT:
            return {"name_agent": "Helper Bot", "description": "Helps with things."}
        return {"title": "Need a summary", "description": "Summarize a paper."}


class RecordingSleep:
    def __init__(self):
        self.calls: list[float] = []

    async def __call__(self, seconds):
        self.calls.append(seconds)


@pytest.fixture()
def api():
    return FakeApi()


@pytest.fixture()
def signer():
    return FakeSigner()


@pytest.fixture()
def chain():
    return FakeChain()


@pytest.fixture()
def content():
    return FakeContent()


@pytest.fixture()
def sleep():
    return RecordingSleep()


@pytest.fixture()
def retry(sleep):
    return RetryPolicy(max_attempts=3, base_delay=5, sleep=sleep)


@pytest.fixture()
def account():
    return Account(index=0, private_key=PRIVATE_KEY)


@pytest.fixture()
def session():
    return SessionToken(token="tok", expires_at=10_000, address=ADDRESS)


@pytest.fixture()
def settings_env(monkeypatch, tmp_path):
    """Provide the required settings through the environment."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("CONTRACT_ADDRESS", "0x" + "ab" * 20)
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("CHAIN_ID", "1337")
    monkeypatch.setattr(settings_module, "_settings", None)
    yield settings_module.get_settings()
    monkeypatch.setattr(settings_module, "_settings", None)
