"""
Bot text commands.

Messages starting with ``!`` are commands. ``!trigger`` replies with the text
stored for the trigger; ``!trigger some reply text`` stores ``some reply text``
under the trigger, which only the channel owner and bot admins may do.
Blacklisted triggers are ignored entirely.
"""

from __future__ import annotations

from typing import Awaitable, Callable

from chatmod.datatypes.chat_datatypes import ParsedMessage, Role
from chatmod.datatypes.command_datatypes import CommandOutcome
from chatmod.state.channel_state import ChannelStateStore
from chatmod.util.logger import get_logger

logger = get_logger("command_dispatcher")

SendFunc = Callable[[str, str], Awaitable[None]]


class CommandDispatcher:
    """Looks up and defines per-channel text commands."""

    def __init__(self, store: ChannelStateStore, send: SendFunc) -> None:
        self.store = store
        self.send = send

    async def dispatch(self, message: ParsedMessage, role: Role) -> CommandOutcome:
        """
        Handle ``message`` as a text command on behalf of a sender with ``role``.

        The channel must already be loaded in the store.

        Returns:
            CommandOutcome: What happened; only REPLIED sends anything to chat.

        Raises:
            Exception: Whatever ``send`` raises while replying.
        """
        if not message.is_command:
            return CommandOutcome.NOT_A_COMMAND

        parts = message.body.split(maxsplit=1)
        if not parts:
            return CommandOutcome.MALFORMED
        trigger = parts[0]
        logger.debug("[COMMANDS] Command %s with %d parts from %s", trigger, len(parts), message.sender)

        if await self.store.is_blacklisted(message.channel, trigger):
            logger.info("[COMMANDS] Blacklisted command %s ignored in %s", trigger, message.channel)
            return CommandOutcome.BLACKLISTED

        match parts:
            case [_]:
                return await self._reply(message.channel, trigger)
            case [_, argument]:
                return await self._define(message, role, trigger, argument)
            case _:
                return CommandOutcome.MALFORMED

    async def _reply(self, channel: str, trigger: str) -> CommandOutcome:
        reply = await self.store.get_command(channel, trigger)
        if reply is None:
            return CommandOutcome.UNKNOWN_COMMAND

        await self.send(channel, reply)
        return CommandOutcome.REPLIED

    async def _define(self, message: ParsedMessage, role: Role, trigger: str, reply: str) -> CommandOutcome:
        if role is Role.PEASANT:
            logger.debug("[COMMANDS] %s may not define %s in %s", message.sender, trigger, message.channel)
            return CommandOutcome.DENIED

        await self.store.set_command(message.channel, trigger, reply)
        return CommandOutcome.DEFINED
