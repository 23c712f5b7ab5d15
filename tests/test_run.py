"""Tests for the process entry point exit codes."""

import pytest

from conftest import PRIVATE_KEY
from daily_task_bot import run as run_module
from daily_task_bot.config import settings as settings_module
from daily_task_bot.core.errors import ConfigurationError
from daily_task_bot.services.stats import StatsAggregator


class FakeAsyncioRun:
    """Stands in for asyncio.run: closes the loop coroutine and raises."""

    def __init__(self, error: BaseException):
        self.error = error
        self.calls = 0

    def __call__(self, coro):
        self.calls += 1
        coro.close()
        raise self.error


@pytest.fixture()
def reports(monkeypatch):
    calls = []
    monkeypatch.setattr(StatsAggregator, "log_shutdown_report", lambda self, registry: calls.append(registry))
    return calls


@pytest.fixture()
def quiet_main(monkeypatch):
    monkeypatch.setattr(run_module, "setup_logging", lambda level: None)
    monkeypatch.setattr(run_module.signal, "signal", lambda signum, handler: None)
    monkeypatch.setattr(run_module, "load_private_keys", lambda path: [PRIVATE_KEY])


def test_invalid_settings_exit_with_error(monkeypatch, tmp_path, quiet_main, capsys):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("CONTRACT_ADDRESS", raising=False)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.setattr(settings_module, "_settings", None)

    with pytest.raises(SystemExit) as exc_info:
        run_module.main()

    assert exc_info.value.code == 1
    assert "配置错误" in capsys.readouterr().err


def test_missing_credentials_exit_before_loop(settings_env, monkeypatch, quiet_main):
    def no_keys(path):
        raise ConfigurationError("未找到有效的私钥")

    loop = FakeAsyncioRun(RuntimeError("should not start"))
    monkeypatch.setattr(run_module, "load_private_keys", no_keys)
    monkeypatch.setattr(run_module.asyncio, "run", loop)

    with pytest.raises(SystemExit) as exc_info:
        run_module.main()

    assert exc_info.value.code == 1
    assert loop.calls == 0


def test_interrupt_prints_final_report_and_exits_cleanly(settings_env, monkeypatch, quiet_main, reports):
    loop = FakeAsyncioRun(KeyboardInterrupt())
    monkeypatch.setattr(run_module.asyncio, "run", loop)

    with pytest.raises(SystemExit) as exc_info:
        run_module.main()

    assert exc_info.value.code == 0
    assert loop.calls == 1
    assert len(reports) == 1
    assert len(reports[0]) == 1


def test_unexpected_error_exits_with_error(settings_env, monkeypatch, quiet_main, reports):
    monkeypatch.setattr(run_module.asyncio, "run", FakeAsyncioRun(RuntimeError("boom")))

    with pytest.raises(SystemExit) as exc_info:
        run_module.main()

    assert exc_info.value.code == 1
    assert reports == []
