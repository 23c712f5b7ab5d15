"""Tests for account models and the account registry."""

import pytest

from daily_task_bot.core.errors import ConfigurationError, InvalidTaskResponse
from daily_task_bot.models import Account, DailyTaskStatus, SessionToken
from daily_task_bot.services.registry import AccountRegistry


def test_daily_task_status_from_payload():
    status = DailyTaskStatus.from_payload(
        {"is_create_agent": True, "is_create_request": False, "finish_time": 1700000000}
    )
    assert status.agent_done is True
    assert status.request_done is False
    assert status.finish_time == 1700000000
    assert not status.all_done


@pytest.mark.parametrize(
    "payload",
    [None, [], {}, {"is_create_agent": True}, {"is_create_request": False, "finish_time": 1}],
)
def test_daily_task_status_requires_both_flags(payload):
    with pytest.raises(InvalidTaskResponse):
        DailyTaskStatus.from_payload(payload)


def test_session_token_expires_at_boundary():
    token = SessionToken(token="t", expires_at=100, address="0x1")
    assert not token.is_expired(99.9)
    assert token.is_expired(100)
    assert "token=" not in repr(token)


def test_account_label_is_one_based():
    assert Account(index=0, private_key="0xsecret").label == "#1"
    assert "0xsecret" not in repr(Account(index=0, private_key="0xsecret"))


def test_registry_creates_one_stats_per_account():
    registry = AccountRegistry(["0xaaaaaaaaaaaa", "0xbbbbbbbbbbbb"], clock=lambda: 500.0)

    assert len(registry) == 2
    assert [a.index for a in registry] == [0, 1]
    assert registry.stats(0) is registry.stats(list(registry)[0])
    assert registry.stats(0) is not registry.stats(1)
    assert registry.start_time == 500.0
    stats = registry.stats(1)
    assert (stats.agents, stats.requests, stats.txs, stats.errors) == (0, 0, 0, 0)
    assert stats.uid is None and stats.last_run is None


def test_registry_requires_accounts():
    with pytest.raises(ConfigurationError):
        AccountRegistry([])
