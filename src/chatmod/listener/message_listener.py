"""Per-line message handling.

:class:`MessageListener` ties the parser, channel state, moderation pipeline
and command dispatcher together for one inbound raw line.
"""

from __future__ import annotations

from typing import Awaitable, Callable, Optional

from chatmod.commands.command_dispatcher import CommandDispatcher
from chatmod.configuration.moderation_settings import ModerationSettings
from chatmod.moderation.moderation_pipeline import ModerationPipeline
from chatmod.protocol import message_parser
from chatmod.state.channel_state import ChannelStateStore
from chatmod.util.logger import get_logger

logger = get_logger("message_listener")

SendFunc = Callable[[str, str], Awaitable[None]]


class MessageListener:
    """Handles raw chat lines one at a time.

    Every step that sends to chat (sanctions and command replies) lets
    transport errors propagate to the caller of :meth:`handle_line`.
    """

    def __init__(
        self,
        store: ChannelStateStore,
        send: SendFunc,
        moderation_settings: Optional[ModerationSettings] = None,
    ) -> None:
        """
        Parameters
        ----------
        store:
            Channel state shared by every handler of the process.
        send:
            Coroutine function ``send(channel, text)`` writing one chat line.
        moderation_settings:
            Timeout length and reasons; defaults apply when omitted.
        """
        self.store = store
        self.moderation = ModerationPipeline(send, moderation_settings)
        self.commands = CommandDispatcher(store, send)

    async def handle_line(self, raw_line: str) -> str:
        """
        Process one raw protocol line.

        Steps: parse, make sure the channel is loaded, resolve role and
        known status, moderate, promote a clean first-time sender, then run
        the command dispatcher regardless of the moderation result.

        Returns
        -------
        str
            The message body, or an empty string when the line was not processed.
        """
        message = message_parser.parse(raw_line)
        if message is None:
            logger.debug("[LISTENER] Unparsed: %s", raw_line.strip())
            return ""
        if message.is_malformed:
            logger.warning("[LISTENER] Malformed line skipped: %s", raw_line.strip())
            return ""

        await self.store.ensure_loaded(message.channel)

        role = await self.store.get_role(message.channel, message.sender)
        known = await self.store.is_known(message.channel, message.sender)

        moderated = await self.moderation.moderate(message, known)
        if not moderated and not known:
            await self.store.mark_known(message.channel, message.sender)

        outcome = await self.commands.dispatch(message, role)

        logger.debug("[LISTENER] Msg from %s %s in %s (command: %s)", role, message.sender, message.channel, outcome)
        return message.body
