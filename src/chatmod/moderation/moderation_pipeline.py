"""
First-message moderation rules.

A sender's first message in a channel is checked against an ordered list of
rules; the first rule that fires times the sender out and stops evaluation.
Known users are never checked. Whether the message was moderated decides if
the caller may promote the sender to a known user.

Rules:
- links: any URL with a scheme (``http://``, ``https://``, ``ftp://`` ...)
- zalgo: any combining diacritical mark (U+0300 to U+036F)
"""

from __future__ import annotations

import re
from typing import Awaitable, Callable, Optional, Tuple

from chatmod.configuration.moderation_settings import ModerationSettings
from chatmod.datatypes.action_datatypes import SanctionAction, SanctionKind
from chatmod.datatypes.chat_datatypes import ParsedMessage
from chatmod.util.logger import get_logger

logger = get_logger("moderation_pipeline")

SendFunc = Callable[[str, str], Awaitable[None]]

URL_PATTERN = re.compile(
    r"\b[a-z][a-z0-9+.\-]*://[^\s/?#<>\"']+[^\s<>\"']*",
    re.IGNORECASE,
)

COMBINING_DIACRITICS_START = 0x0300
COMBINING_DIACRITICS_END = 0x036F


def contains_link(text: str) -> bool:
    """Return True if ``text`` contains a URL."""
    return URL_PATTERN.search(text) is not None


def contains_zalgo(text: str) -> bool:
    """Return True if ``text`` contains a combining diacritical mark."""
    return any(COMBINING_DIACRITICS_START <= ord(char) <= COMBINING_DIACRITICS_END for char in text)


RULES: Tuple[Tuple[SanctionKind, Callable[[str], bool]], ...] = (
    (SanctionKind.LINKS, contains_link),
    (SanctionKind.ZALGO, contains_zalgo),
)


class ModerationPipeline:
    """
    Evaluates the first-message rules and sends the resulting timeout.

    Attributes:
        send: Coroutine function ``send(channel, text)`` used for sanctions.
        settings: Timeout length and reason strings.
    """

    def __init__(self, send: SendFunc, settings: Optional[ModerationSettings] = None) -> None:
        self.send = send
        self.settings = settings or ModerationSettings()

    def evaluate(self, message: ParsedMessage) -> Optional[SanctionAction]:
        """Return the sanction the first matching rule calls for, without sending it."""
        for kind, rule in RULES:
            if rule(message.body):
                return SanctionAction(
                    channel=message.channel,
                    sender=message.sender,
                    kind=kind,
                    reason=self.settings.reason_for(kind),
                    duration_seconds=self.settings.timeout_seconds,
                )
        return None

    async def moderate(self, message: ParsedMessage, known: bool) -> bool:
        """
        Run the rules for one message and apply at most one sanction.

        Args:
            message: The parsed chat message.
            known: Whether the sender already passed moderation in this channel.

        Returns:
            bool: True if the sender was sanctioned.

        Raises:
            Exception: Whatever ``send`` raises; sanctions are not retried.
        """
        if known:
            return False

        action = self.evaluate(message)
        if action is None:
            return False

        logger.info("[MODERATION] Purge %s in %s for %s", action.sender, action.channel, action.kind)
        await self.send(action.channel, action.to_command())
        return True
