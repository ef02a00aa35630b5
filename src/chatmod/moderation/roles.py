"""Sender role resolution."""

from chatmod.datatypes.channel_config import ChannelConfig
from chatmod.datatypes.chat_datatypes import CHANNEL_MARKER, Role


def channel_owner(channel: str) -> str:
    """Return the nickname that owns ``channel`` (``#foo`` is owned by ``foo``)."""
    return channel.lstrip(CHANNEL_MARKER)


def resolve_role(config: ChannelConfig, sender: str, channel: str) -> Role:
    """Derive the privilege level of ``sender`` in ``channel``.

    The channel owner outranks everyone; listed bot admins are moderators;
    everybody else is a peasant. Reads ``config`` only.
    """
    if sender == channel_owner(channel):
        return Role.OWNER
    if sender in config.bot_admins:
        return Role.MOD
    return Role.PEASANT
