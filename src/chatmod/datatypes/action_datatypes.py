"""
Sanction types and data structures for moderation actions.

This module defines the SanctionKind enum and SanctionAction dataclass emitted
by the moderation pipeline when a rule fires.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

# Timeout applied to first-time senders that break a rule
SHORT_TIMEOUT_SECONDS = 10


class SanctionKind(Enum):
    """Which moderation rule produced a sanction."""

    LINKS = "links"
    ZALGO = "zalgo"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class SanctionAction:
    """A timeout issued against one sender in one channel.

    Attributes:
        channel: Channel the timeout is sent to
        sender: Nickname being timed out
        kind: Rule that fired
        reason: Human readable reason shown in chat
        duration_seconds: Length of the timeout
    """
    channel: str
    sender: str
    kind: SanctionKind
    reason: str
    duration_seconds: int = SHORT_TIMEOUT_SECONDS

    def to_command(self) -> str:
        """Render the chat directive, e.g. ``/timeout spammer 10 ei linkkejä``."""
        command = f"/timeout {self.sender} {self.duration_seconds}"
        return f"{command} {self.reason}" if self.reason else command
