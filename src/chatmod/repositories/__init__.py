"""Repository layer for channel state database access."""
from chatmod.repositories.channel_state_repo import ChannelStateRepository

__all__ = ["ChannelStateRepository"]
