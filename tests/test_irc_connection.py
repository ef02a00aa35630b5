"""Tests for the IRC stream connection."""

import asyncio

import pytest
import pytest_asyncio

from chatmod.configuration.bot_config import BotConfig
from chatmod.protocol import irc_connection
from chatmod.protocol.irc_connection import IrcConnection, sanitize


class FakeWriter:
    """Collects written bytes in place of an asyncio.StreamWriter."""

    def __init__(self):
        self.data = bytearray()
        self.closed = False

    def write(self, data: bytes) -> None:
        self.data.extend(data)

    async def drain(self) -> None:
        pass

    def close(self) -> None:
        self.closed = True

    async def wait_closed(self) -> None:
        pass

    def is_closing(self) -> bool:
        return self.closed

    @property
    def sent_lines(self):
        return self.data.decode("utf-8").split("\r\n")[:-1]


@pytest.fixture
def bot_config() -> BotConfig:
    return BotConfig(
        nickname="modbot",
        server="irc.example.net",
        port=6667,
        channels=["#foo", "#bar"],
        auth_token="oauth:secret",
    )


@pytest_asyncio.fixture
async def fake_server(monkeypatch):
    """Patch open_connection to hand out an in-memory reader and a FakeWriter."""
    reader = asyncio.StreamReader()
    writer = FakeWriter()
    calls = []

    async def fake_open_connection(host, port, ssl=None):
        calls.append((host, port, ssl))
        return reader, writer

    monkeypatch.setattr(irc_connection.asyncio, "open_connection", fake_open_connection)
    return reader, writer, calls


def test_sanitize_collapses_newlines():
    assert sanitize("one\r\ntwo\nthree") == "one two three"
    assert sanitize("plain") == "plain"


@pytest.mark.asyncio
async def test_connect_sends_handshake(bot_config, fake_server):
    _, writer, calls = fake_server
    connection = IrcConnection(bot_config)

    await connection.connect()

    assert connection.is_connected
    assert calls == [("irc.example.net", 6667, None)]
    assert writer.sent_lines == ["PASS oauth:secret", "NICK modbot", "JOIN #foo", "JOIN #bar"]


@pytest.mark.asyncio
async def test_connect_without_token_skips_pass(bot_config, fake_server):
    _, writer, _ = fake_server
    connection = IrcConnection(BotConfig("modbot", "irc.example.net", 6667, ["#foo"]))

    await connection.connect()

    assert writer.sent_lines == ["NICK modbot", "JOIN #foo"]


@pytest.mark.asyncio
async def test_connect_with_tls_passes_ssl_context(fake_server):
    _, _, calls = fake_server
    connection = IrcConnection(BotConfig("modbot", "irc.example.net", 6697, [], use_tls=True))

    await connection.connect()

    assert calls[0][2] is not None


@pytest.mark.asyncio
async def test_send_privmsg(bot_config, fake_server):
    _, writer, _ = fake_server
    connection = IrcConnection(bot_config)
    await connection.connect()
    writer.data.clear()

    await connection.send_privmsg("#foo", "/timeout spammer 10 ei linkkejä")

    assert writer.sent_lines == ["PRIVMSG #foo :/timeout spammer 10 ei linkkejä"]


@pytest.mark.asyncio
async def test_send_privmsg_cannot_inject_lines(bot_config, fake_server):
    _, writer, _ = fake_server
    connection = IrcConnection(bot_config)
    await connection.connect()
    writer.data.clear()

    await connection.send_privmsg("#foo", "hi\r\nQUIT :bye")

    assert writer.sent_lines == ["PRIVMSG #foo :hi QUIT :bye"]


@pytest.mark.asyncio
async def test_send_before_connect_raises(bot_config):
    connection = IrcConnection(bot_config)

    with pytest.raises(ConnectionError):
        await connection.send_privmsg("#foo", "hi")


@pytest.mark.asyncio
async def test_lines_answers_ping_and_stops_at_eof(bot_config, fake_server):
    reader, writer, _ = fake_server
    connection = IrcConnection(bot_config)
    await connection.connect()
    writer.data.clear()

    reader.feed_data(b"PING :tmi.twitch.tv\r\n")
    reader.feed_data(b":bar!bar@bar.tmi.twitch.tv PRIVMSG #foo :hello\r\n")
    reader.feed_data(b"\xff broken bytes\r\n")
    reader.feed_eof()

    received = [line async for line in connection.lines()]

    assert received == [
        "PING :tmi.twitch.tv",
        ":bar!bar@bar.tmi.twitch.tv PRIVMSG #foo :hello",
        "� broken bytes",
    ]
    assert writer.sent_lines == ["PONG :tmi.twitch.tv"]


@pytest.mark.asyncio
async def test_close_is_idempotent(bot_config, fake_server):
    _, writer, _ = fake_server
    connection = IrcConnection(bot_config)

    await connection.close()
    await connection.connect()
    await connection.close()
    await connection.close()

    assert writer.closed
    assert not connection.is_connected
    with pytest.raises(ConnectionError):
        await connection.send_raw("NICK again")
