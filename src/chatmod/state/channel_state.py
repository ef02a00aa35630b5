"""
Concurrency-safe registry of per-channel configuration and trust state.

Responsibilities:
- Own every :class:`ChannelConfig`; other components only see copies or
  scalar answers returned by the accessors below
- Create each channel's record exactly once, either from declared settings
  (:meth:`ChannelStateStore.prepare`) or lazily with defaults
  (:meth:`ChannelStateStore.ensure_loaded`)
- Keep every channel's command blacklist a superset of the reserved commands
- Optionally schedule best-effort persistence of mutated channels, with at
  most one queued persist per channel

Locking:
- Reads share an :class:`AsyncReadWriteLock`; mutations take its write side
- Insert-if-absent is a single write-locked step, never a read followed by
  an upgrade
"""

from __future__ import annotations

import asyncio
from typing import Callable, Dict, Iterable, List, Optional, Protocol, Set

from chatmod.datatypes.channel_config import RESERVED_COMMANDS, ChannelConfig, ChannelSettingsInput
from chatmod.datatypes.chat_datatypes import COMMAND_MARKER, Role
from chatmod.moderation.roles import resolve_role
from chatmod.state.rw_lock import AsyncReadWriteLock
from chatmod.util.logger import get_logger

logger = get_logger("channel_state")


class ChannelStatePersister(Protocol):
    """Anything able to store a channel snapshot, e.g. ChannelStateRepository."""

    async def save(self, channel: str, config: ChannelConfig) -> None: ...


class ChannelStateStore:
    """
    Registry of channel configurations guarded by a reader/writer lock.

    Every per-channel accessor requires the channel to have been loaded
    first; using one on an unknown channel raises ``RuntimeError``.
    """

    def __init__(
        self,
        reserved_commands: Iterable[str] = RESERVED_COMMANDS,
        persister: Optional[ChannelStatePersister] = None,
    ) -> None:
        """Create an empty store.

        Args:
            reserved_commands: Triggers blacklisted in every channel. Frozen here.
            persister: Optional sink that receives a snapshot after each mutation.
        """
        self.reserved_commands: frozenset[str] = frozenset(reserved_commands)
        self._channels: Dict[str, ChannelConfig] = {}
        self._lock = AsyncReadWriteLock()

        self._persister = persister
        self._active_persists: Set[asyncio.Task] = set()
        self._pending_channels: Set[str] = set()

        logger.debug("[CHANNEL STATE] Store created with %d reserved commands", len(self.reserved_commands))

    # -------- Creation --------
    async def _insert_if_absent(self, channel: str, factory: Callable[[], ChannelConfig]) -> bool:
        """Insert ``factory()`` for ``channel`` unless present. True if inserted."""
        async with self._lock.write():
            if channel in self._channels:
                return False
            self._channels[channel] = factory()
        self._trigger_persist(channel)
        return True

    async def prepare(self, channel: str, settings: ChannelSettingsInput) -> bool:
        """
        Install declared settings for a channel that has no record yet.

        Returns False (and keeps the existing record untouched) when the
        channel is already configured.
        """
        inserted = await self._insert_if_absent(
            channel, lambda: ChannelConfig.from_input(settings, self.reserved_commands)
        )
        if inserted:
            logger.info("[CHANNEL STATE] Prepared channel %s", channel)
        else:
            logger.warning("[CHANNEL STATE] Cannot configure channel %s, already configured", channel)
        return inserted

    async def ensure_loaded(self, channel: str) -> bool:
        """Create a default record for ``channel`` if needed. True if one was created."""
        async with self._lock.read():
            if channel in self._channels:
                return False

        inserted = await self._insert_if_absent(channel, lambda: ChannelConfig.default(self.reserved_commands))
        if inserted:
            logger.info("[CHANNEL STATE] Channel %s was not configured, loaded defaults", channel)
        return inserted

    # -------- Reads --------
    def _require(self, channel: str) -> ChannelConfig:
        """Return the record for ``channel``; caller must hold the lock."""
        config = self._channels.get(channel)
        if config is None:
            raise RuntimeError(f"Channel {channel!r} accessed before it was loaded")
        return config

    async def is_loaded(self, channel: str) -> bool:
        async with self._lock.read():
            return channel in self._channels

    async def list_channels(self) -> List[str]:
        """Return a snapshot list of loaded channel names."""
        async with self._lock.read():
            return list(self._channels.keys())

    async def snapshot(self, channel: str) -> ChannelConfig:
        """Return a deep copy of the channel's current record."""
        async with self._lock.read():
            return self._require(channel).copy()

    async def get_role(self, channel: str, sender: str) -> Role:
        async with self._lock.read():
            return resolve_role(self._require(channel), sender, channel)

    async def is_known(self, channel: str, sender: str) -> bool:
        async with self._lock.read():
            return sender in self._require(channel).known_users

    async def get_command(self, channel: str, trigger: str) -> Optional[str]:
        async with self._lock.read():
            return self._require(channel).text_commands.get(trigger)

    async def is_blacklisted(self, channel: str, trigger: str) -> bool:
        """True if ``trigger`` or ``trigger`` without its ``!`` is blacklisted."""
        async with self._lock.read():
            blacklist = self._require(channel).command_blacklist
            return trigger in blacklist or trigger.lstrip(COMMAND_MARKER) in blacklist

    # -------- Writes --------
    async def mark_known(self, channel: str, sender: str) -> bool:
        """Add ``sender`` to the channel's known users. True if newly added."""
        async with self._lock.write():
            known_users = self._require(channel).known_users
            if sender in known_users:
                return False
            known_users.add(sender)
        logger.debug("[CHANNEL STATE] %s is now a known user in %s", sender, channel)
        self._trigger_persist(channel)
        return True

    async def set_command(self, channel: str, trigger: str, reply: str) -> None:
        """Define or overwrite a text command."""
        async with self._lock.write():
            self._require(channel).text_commands[trigger] = reply
        logger.info("[CHANNEL STATE] Set command %s in %s (len=%d)", trigger, channel, len(reply))
        self._trigger_persist(channel)

    async def blacklist_command(self, channel: str, trigger: str) -> bool:
        """
        Add a trigger to the channel's blacklist. True if newly added.

        Blacklists only grow. A command already defined under the trigger is
        kept in storage but can no longer be looked up or redefined.
        """
        async with self._lock.write():
            blacklist = self._require(channel).command_blacklist
            if trigger in blacklist:
                return False
            blacklist.add(trigger)
        logger.info("[CHANNEL STATE] Blacklisted command %s in %s", trigger, channel)
        self._trigger_persist(channel)
        return True

    # -------- Persistence helpers --------
    def _trigger_persist(self, channel: str) -> None:
        """Schedule a best-effort persist of a single channel."""
        if self._persister is None:
            return

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("[CHANNEL STATE] Cannot persist channel %s: no running event loop", channel)
            return

        if channel in self._pending_channels:
            # the queued persist snapshots the channel when it runs
            return
        self._pending_channels.add(channel)

        task = loop.create_task(self._persist_channel_async(channel))
        self._active_persists.add(task)
        task.add_done_callback(self._active_persists.discard)

    async def _persist_channel_async(self, channel: str) -> bool:
        self._pending_channels.discard(channel)
        if self._persister is None:
            return False
        try:
            snapshot = await self.snapshot(channel)
            await self._persister.save(channel, snapshot)
            logger.debug("[CHANNEL STATE] Persisted channel %s", channel)
            return True
        except Exception:
            logger.exception("[CHANNEL STATE] Failed to persist channel %s", channel)
            return False

    async def shutdown(self) -> None:
        """Await any pending persistence tasks."""
        pending = list(self._active_persists)
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        self._active_persists.clear()

        logger.info("[CHANNEL STATE] Channel state store shutdown complete")
