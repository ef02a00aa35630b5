"""
Chat message and sender role types.

This module defines the immutable :class:`ParsedMessage` produced by the
message parser and the :class:`Role` enum derived from channel state for
every message.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

# Leading character of channel names (``#channel``)
CHANNEL_MARKER = "#"

# Leading character of bot text-command triggers (``!trigger``)
COMMAND_MARKER = "!"

# Placeholder used for every field the parser could not recover
UNKNOWN = "unknown"


class Role(Enum):
    """Privilege level of a sender within one channel."""

    OWNER = "owner"
    MOD = "mod"
    PEASANT = "peasant"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class ParsedMessage:
    """A single chat line reduced to the fields the bot acts on.

    Attributes:
        sender: Nickname of the author, or ``"unknown"``
        channel: Channel the line was sent to, including its ``#`` marker
        command_kind: Protocol command keyword, e.g. ``"PRIVMSG"``
        body: Message text with the protocol's leading colon removed
    """
    sender: str
    channel: str
    command_kind: str
    body: str

    @property
    def is_malformed(self) -> bool:
        """True for the sentinel produced when a recognized line could not be split."""
        return self.command_kind == UNKNOWN and self.channel == UNKNOWN

    @property
    def is_command(self) -> bool:
        return self.body.startswith(COMMAND_MARKER)
