"""
Database schema initialization.

One table per mutable channel collection, all keyed by channel name.
"""

import aiosqlite
from chatmod.util.logger import get_logger

logger = get_logger("database_schema")

SCHEMA_VERSION = 1


class SchemaManager:
    """Creates the channel state tables and records the schema version."""

    @staticmethod
    async def initialize_schema(db: aiosqlite.Connection) -> None:
        """
        Create all database tables if they do not exist yet.

        Args:
            db: Open database connection
        """
        await SchemaManager._create_tables(db)
        await SchemaManager._update_schema_version(db)
        await db.commit()
        logger.info("[SCHEMA] Database schema initialized")

    @staticmethod
    async def _create_tables(db: aiosqlite.Connection) -> None:
        await db.execute("""
            CREATE TABLE IF NOT EXISTS channel_known_users (
                channel TEXT NOT NULL,
                user_name TEXT NOT NULL,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                PRIMARY KEY (channel, user_name)
            )
        """)

        await db.execute("""
            CREATE TABLE IF NOT EXISTS channel_bot_admins (
                channel TEXT NOT NULL,
                user_name TEXT NOT NULL,
                PRIMARY KEY (channel, user_name)
            )
        """)

        await db.execute("""
            CREATE TABLE IF NOT EXISTS channel_text_commands (
                channel TEXT NOT NULL,
                command_trigger TEXT NOT NULL,
                reply TEXT NOT NULL,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                PRIMARY KEY (channel, command_trigger)
            )
        """)

        await db.execute("""
            CREATE TABLE IF NOT EXISTS channel_command_blacklist (
                channel TEXT NOT NULL,
                command_trigger TEXT NOT NULL,
                PRIMARY KEY (channel, command_trigger)
            )
        """)

        await db.execute("""
            CREATE TABLE IF NOT EXISTS schema_version (
                version INTEGER PRIMARY KEY,
                applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

    @staticmethod
    async def _update_schema_version(db: aiosqlite.Connection) -> None:
        await db.execute(
            "INSERT OR IGNORE INTO schema_version (version) VALUES (?)",
            (SCHEMA_VERSION,),
        )
