import asyncio
import json
import sys
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from chatmod import main
from chatmod.datatypes.channel_config import ChannelSettingsInput
from chatmod.protocol import irc_connection
from chatmod.util.logger import handle_exception


class FakeConnection:
    def __init__(self, lines=(), error=None, block=False) -> None:
        self._lines = list(lines)
        self._error = error
        self._block = block

    async def lines(self):
        for line in self._lines:
            yield line
        if self._error is not None:
            raise self._error
        if self._block:
            await asyncio.Event().wait()


def write_config(path: Path, payload: dict) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_merge_channel_settings_prefers_declared_commands():
    declared = {
        "#foo": ChannelSettingsInput(bot_admins={"helper"}, channel_text_commands={"!hi": "yaml"}),
        "#new": ChannelSettingsInput(known_users={"a"}),
    }
    persisted = {
        "#foo": ChannelSettingsInput(known_users={"bar"}, channel_text_commands={"!hi": "db", "!bye": "db"}),
        "#old": ChannelSettingsInput(known_users={"b"}),
    }

    merged = main.merge_channel_settings(declared, persisted)

    assert set(merged) == {"#foo", "#new", "#old"}
    assert merged["#foo"].known_users == {"bar"}
    assert merged["#foo"].bot_admins == {"helper"}
    assert merged["#foo"].channel_text_commands == {"!hi": "yaml", "!bye": "db"}
    assert merged["#new"] is declared["#new"]
    assert merged["#old"] is persisted["#old"]


@pytest.mark.asyncio
async def test_prepare_channels_loads_every_channel(store):
    await main.prepare_channels(store, {
        "#foo": ChannelSettingsInput(bot_admins={"helper"}),
        "#bar": ChannelSettingsInput(),
    })

    assert sorted(await store.list_channels()) == ["#bar", "#foo"]
    assert "helper" in (await store.snapshot("#foo")).bot_admins


@pytest.mark.asyncio
async def test_run_until_stopped_returns_zero_at_end_of_stream():
    listener = AsyncMock()
    listener.handle_line.return_value = ""
    connection = FakeConnection(lines=["PING :x", ":a!a@a PRIVMSG #foo :hi"])

    assert await main.run_until_stopped(connection, listener) == 0
    assert listener.handle_line.await_count == 2


@pytest.mark.asyncio
async def test_run_until_stopped_returns_one_on_connection_error():
    listener = AsyncMock()
    connection = FakeConnection(error=ConnectionResetError("reset"))

    assert await main.run_until_stopped(connection, listener) == 1


@pytest.mark.asyncio
async def test_run_until_stopped_returns_one_when_handler_fails():
    listener = AsyncMock()
    listener.handle_line.side_effect = ConnectionError("closed")
    connection = FakeConnection(lines=[":a!a@a PRIVMSG #foo :http://x.com"])

    assert await main.run_until_stopped(connection, listener) == 1


@pytest.mark.asyncio
async def test_run_until_stopped_stops_on_signal(monkeypatch):
    handlers = {}
    loop = asyncio.get_running_loop()
    monkeypatch.setattr(loop, "add_signal_handler", lambda sig, callback: handlers.setdefault(sig, callback))
    monkeypatch.setattr(loop, "remove_signal_handler", lambda sig: handlers.pop(sig, None))

    task = asyncio.create_task(main.run_until_stopped(FakeConnection(block=True), AsyncMock()))
    await asyncio.sleep(0.01)
    next(iter(handlers.values()))()

    assert await asyncio.wait_for(task, timeout=1) == 0
    assert handlers == {}


@pytest.mark.asyncio
async def test_async_main_rejects_invalid_config(tmp_path, monkeypatch):
    monkeypatch.setattr(main, "load_environment", lambda: None)
    config_path = write_config(tmp_path / "app_config.yml", {"twitch_config": {"nickname": "modbot"}})

    assert await main.async_main(config_path) == 1


@pytest.mark.asyncio
async def test_async_main_reports_unreachable_server(tmp_path, monkeypatch):
    monkeypatch.setattr(main, "load_environment", lambda: "oauth:token")

    async def refuse(*args, **kwargs):
        raise ConnectionRefusedError("refused")

    monkeypatch.setattr(irc_connection.asyncio, "open_connection", refuse)
    db_path = tmp_path / "state.db"
    config_path = write_config(tmp_path / "app_config.yml", {
        "twitch_config": {"nickname": "modbot", "server": "localhost", "port": 6667, "channels": ["#foo"]},
        "database_path": str(db_path),
    })

    assert await main.async_main(config_path) == 1
    assert db_path.exists()


def test_main_returns_async_main_exit_code(monkeypatch):
    monkeypatch.setattr(main, "async_main", AsyncMock(return_value=0))

    assert main.main() == 0


def test_main_reports_unexpected_errors(monkeypatch):
    monkeypatch.setattr(main, "async_main", AsyncMock(side_effect=RuntimeError("boom")))

    assert main.main() == 1


def test_main_installs_exception_hook(monkeypatch):
    monkeypatch.setattr(main.sys, "excepthook", sys.__excepthook__)
    monkeypatch.setattr(main, "async_main", AsyncMock(return_value=0))

    main.main()

    assert main.sys.excepthook is handle_exception
