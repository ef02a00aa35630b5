"""
Repository for the channel state tables.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Tuple

from chatmod.database.db_connection import ConnectionManager
from chatmod.datatypes.channel_config import ChannelConfig, ChannelSettingsInput
from chatmod.util.logger import get_logger

logger = get_logger("channel_state_repo")

_SET_TABLES: Tuple[Tuple[str, str, str], ...] = (
    # (table, value column, ChannelSettingsInput field)
    ("channel_known_users", "user_name", "known_users"),
    ("channel_bot_admins", "user_name", "bot_admins"),
    ("channel_command_blacklist", "command_trigger", "command_blacklist"),
)


class ChannelStateRepository:
    """Load and replace persisted channel state."""

    def __init__(self, manager: ConnectionManager) -> None:
        self.manager = manager

    async def save(self, channel: str, config: ChannelConfig) -> None:
        """Replace every stored row of ``channel`` with ``config`` atomically."""
        values: Dict[str, Iterable[str]] = {
            "known_users": config.known_users,
            "bot_admins": config.bot_admins,
            "command_blacklist": config.command_blacklist,
        }

        async with self.manager.transaction() as conn:
            for table, column, field_name in _SET_TABLES:
                await conn.execute(f"DELETE FROM {table} WHERE channel = ?", (channel,))
                rows = [(channel, value) for value in sorted(values[field_name])]
                if rows:
                    await conn.executemany(
                        f"INSERT INTO {table} (channel, {column}) VALUES (?, ?)",
                        rows,
                    )

            await conn.execute("DELETE FROM channel_text_commands WHERE channel = ?", (channel,))
            if config.text_commands:
                await conn.executemany(
                    "INSERT INTO channel_text_commands (channel, command_trigger, reply) VALUES (?, ?, ?)",
                    [(channel, trigger, reply) for trigger, reply in config.text_commands.items()],
                )

    async def load_all(self) -> Dict[str, ChannelSettingsInput]:
        """Return the persisted settings of every channel that has any rows."""
        result: Dict[str, ChannelSettingsInput] = {}

        def entry(channel: str) -> ChannelSettingsInput:
            return result.setdefault(channel, ChannelSettingsInput())

        async with self.manager.read() as conn:
            for table, column, field_name in _SET_TABLES:
                rows: List = list(await conn.execute_fetchall(f"SELECT channel, {column} FROM {table}"))
                for channel, value in rows:
                    settings = entry(channel)
                    current = getattr(settings, field_name)
                    if current is None:
                        current = set()
                        setattr(settings, field_name, current)
                    current.add(value)

            rows = list(await conn.execute_fetchall(
                "SELECT channel, command_trigger, reply FROM channel_text_commands"
            ))
            for channel, trigger, reply in rows:
                settings = entry(channel)
                if settings.channel_text_commands is None:
                    settings.channel_text_commands = {}
                settings.channel_text_commands[trigger] = reply

        if result:
            logger.info("[CHANNEL STATE REPO] Loaded persisted state for %d channel(s)", len(result))
        return result
