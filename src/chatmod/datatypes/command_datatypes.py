"""
Outcomes of bot text-command handling.

The dispatcher never answers a rejected command in chat; the outcome is only
returned to the caller for logging and tests.
"""

from __future__ import annotations

from enum import Enum


class CommandOutcome(Enum):
    """Result of offering one message to the command dispatcher."""

    NOT_A_COMMAND = "not_a_command"
    BLACKLISTED = "blacklisted"
    REPLIED = "replied"
    UNKNOWN_COMMAND = "unknown_command"
    DEFINED = "defined"
    DENIED = "denied"
    MALFORMED = "malformed"

    def __str__(self) -> str:
        return self.value

    @property
    def handled(self) -> bool:
        """True when the command changed state or produced a reply."""
        return self in (CommandOutcome.REPLIED, CommandOutcome.DEFINED)
