"""
Raw chat line parsing.

A raw line looks like::

    @badge-info=;color=#FF0000 :nick!nick@nick.tmi.twitch.tv PRIVMSG #channel :hello there

The optional IRCv3 tag block is skipped, the sender is the nickname part of
the prefix, and the recognized command keyword is located in the line to
split out the channel and the message body. Malformed lines never raise.
"""

from __future__ import annotations

from typing import Optional, Tuple

from chatmod.datatypes.chat_datatypes import UNKNOWN, ParsedMessage
from chatmod.util.logger import get_logger

logger = get_logger("message_parser")

# Command keywords this bot reacts to
RECOGNIZED_COMMANDS: Tuple[str, ...] = ("PRIVMSG",)

# (command, channel, body) used when a recognized line cannot be split
MALFORMED_TRIPLE: Tuple[str, str, str] = (UNKNOWN, UNKNOWN, "")


def source_nickname(raw: str) -> Optional[str]:
    """Return the nickname from the line's prefix, or None for servers and missing prefixes."""
    rest = raw
    if rest.startswith("@"):
        _, _, rest = rest.partition(" ")
        rest = rest.lstrip(" ")

    if not rest.startswith(":"):
        return None

    prefix = rest[1:].split(" ", 1)[0]
    if not prefix:
        return None

    nick, bang, _ = prefix.partition("!")
    if not bang and "@" not in prefix and "." in prefix:
        # bare host name such as tmi.twitch.tv
        return None
    nick = nick.partition("@")[0]
    return nick or None


def split_command(command: str, raw: str) -> Tuple[str, str, str]:
    """Split ``raw`` from ``command`` onward into (command, channel, body).

    The body keeps everything after the channel, minus one leading colon.
    Lines with fewer than three fields fall back to :data:`MALFORMED_TRIPLE`.
    """
    start = raw.find(command)
    if start < 0:
        return MALFORMED_TRIPLE

    fields = raw[start:].split(maxsplit=2)
    if len(fields) < 3:
        logger.warning("[PARSER] Couldn't split %r to command, channel and message", raw)
        return MALFORMED_TRIPLE

    cmd, channel, body = fields
    if body.startswith(":"):
        body = body[1:]
    return cmd, channel, body


def parse(raw_line: str) -> Optional[ParsedMessage]:
    """Parse one raw protocol line.

    Returns:
        A :class:`ParsedMessage` for recognized command kinds (possibly the
        malformed sentinel), or None for every other line.
    """
    raw = raw_line.strip()

    for command in RECOGNIZED_COMMANDS:
        if command in raw:
            cmd, channel, body = split_command(command, raw)
            return ParsedMessage(
                sender=source_nickname(raw) or UNKNOWN,
                channel=channel,
                command_kind=cmd,
                body=body,
            )

    return None
