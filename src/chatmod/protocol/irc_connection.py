"""
asyncio stream connection to an IRC-style chat server.

Handles the registration handshake (``PASS``/``NICK``/``JOIN``), keep-alive
``PING``/``PONG`` and line framing. Reconnecting, retrying and rate limiting
are left to the caller.
"""

from __future__ import annotations

import asyncio
import ssl
from typing import AsyncIterator, Optional

from chatmod.configuration.bot_config import BotConfig
from chatmod.util.logger import get_logger

logger = get_logger("irc_connection")

LINE_ENDING = "\r\n"
ENCODING = "utf-8"


def sanitize(text: str) -> str:
    """Collapse CR/LF so one logical message can never become two protocol lines."""
    return " ".join(text.splitlines())


class IrcConnection:
    """A single client connection.

    Parameters
    ----------
    bot_config:
        Server address, identity and channels to join.
    """

    def __init__(self, bot_config: BotConfig) -> None:
        self.bot_config = bot_config
        self._reader: Optional[asyncio.StreamReader] = None
        self._writer: Optional[asyncio.StreamWriter] = None
        self._send_lock = asyncio.Lock()

    @property
    def is_connected(self) -> bool:
        return self._writer is not None and not self._writer.is_closing()

    async def connect(self) -> None:
        """Open the stream and register with the server.

        Raises
        ------
        OSError
            If the server cannot be reached.
        """
        config = self.bot_config
        ssl_context = ssl.create_default_context() if config.use_tls else None

        logger.info("[IRC] Connecting to %s:%d (tls=%s)", config.server, config.port, config.use_tls)
        self._reader, self._writer = await asyncio.open_connection(config.server, config.port, ssl=ssl_context)

        if config.auth_token:
            await self.send_raw(f"PASS {config.auth_token}")
        await self.send_raw(f"NICK {config.nickname}")
        for channel in config.channels:
            await self.send_raw(f"JOIN {channel}")

        logger.info("[IRC] Registered as %s, joined %d channel(s)", config.nickname, len(config.channels))

    async def send_raw(self, line: str) -> None:
        """Write one protocol line.

        Raises
        ------
        ConnectionError
            If the connection is not open.
        """
        if self._writer is None or self._writer.is_closing():
            raise ConnectionError("IRC connection is not open")

        async with self._send_lock:
            self._writer.write((sanitize(line) + LINE_ENDING).encode(ENCODING))
            await self._writer.drain()

    async def send_privmsg(self, channel: str, text: str) -> None:
        """Send ``text`` to ``channel``. Matches the ``send(channel, text)`` capability."""
        await self.send_raw(f"PRIVMSG {channel} :{text}")

    async def lines(self) -> AsyncIterator[str]:
        """Yield decoded inbound lines until the server closes the stream.

        ``PING`` is answered with ``PONG`` and also yielded.
        """
        if self._reader is None:
            raise ConnectionError("IRC connection is not open")

        while True:
            data = await self._reader.readline()
            if not data:
                logger.info("[IRC] Server closed the connection")
                return

            line = data.decode(ENCODING, errors="replace").rstrip("\r\n")
            if line.startswith("PING"):
                await self.send_raw("PONG" + line[4:])
            yield line

    async def close(self) -> None:
        """Close the stream. Safe to call when not connected."""
        writer, self._writer, self._reader = self._writer, None, None
        if writer is None:
            return

        writer.close()
        try:
            await writer.wait_closed()
        except (ConnectionError, OSError) as exc:
            logger.debug("[IRC] Error while closing connection: %s", exc)
        logger.info("[IRC] Connection closed")
