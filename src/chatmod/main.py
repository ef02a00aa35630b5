"""
Chat Moderation Bot
===================

Connects to an IRC-style chat server (Twitch by default), joins the
configured channels, times out first-time senders that post links or zalgo
text, and answers text commands defined by channel owners and bot admins.
"""

import os
import sys
from pathlib import Path


def resolve_base_dir() -> Path:
    """Determine the base directory of the project.

    Resolution order:
    1. CHATMOD_HOME environment variable, if set.
    2. If running in a frozen/compiled context, use the executable's directory.
    3. Otherwise, assume running from source and use the grandparent of this file's directory.
    """
    if env_home := os.getenv("CHATMOD_HOME"):
        return Path(env_home).resolve()

    if getattr(sys, "frozen", False) or getattr(sys, "compiled", False):
        return Path(sys.argv[0]).resolve().parent

    return Path(__file__).resolve().parents[2]


BASE_DIR = resolve_base_dir()

import asyncio
import signal
from typing import Dict, Optional

from dotenv import load_dotenv

from chatmod.configuration.app_configuration import AppConfig
from chatmod.configuration.bot_config import BotConfig
from chatmod.database.db_connection import ConnectionManager
from chatmod.datatypes.channel_config import ChannelSettingsInput
from chatmod.listener.message_listener import MessageListener
from chatmod.protocol.irc_connection import IrcConnection
from chatmod.repositories.channel_state_repo import ChannelStateRepository
from chatmod.state.channel_state import ChannelStateStore
from chatmod.util.logger import get_logger, handle_exception


logger = get_logger("main")


def load_environment(base_dir: Path = BASE_DIR) -> Optional[str]:
    """Load ``.env`` and return the auth token override, if any."""
    load_dotenv(dotenv_path=base_dir / ".env")
    return os.getenv("CHATMOD_AUTH_TOKEN") or None


def merge_channel_settings(
    declared: Dict[str, ChannelSettingsInput],
    persisted: Dict[str, ChannelSettingsInput],
) -> Dict[str, ChannelSettingsInput]:
    """Combine YAML and database channel settings; YAML wins on command conflicts."""
    merged: Dict[str, ChannelSettingsInput] = dict(persisted)
    for channel, settings in declared.items():
        previous = merged.get(channel)
        merged[channel] = settings.merged_with(previous) if previous is not None else settings
    return merged


async def prepare_channels(store: ChannelStateStore, settings: Dict[str, ChannelSettingsInput]) -> None:
    for channel, channel_settings in settings.items():
        await store.prepare(channel, channel_settings)


async def receive_loop(connection: IrcConnection, listener: MessageListener) -> None:
    """Feed every inbound line to the listener until end-of-stream."""
    async for line in connection.lines():
        text = await listener.handle_line(line)
        if text:
            logger.info("[MAIN] %s", text)


async def run_until_stopped(connection: IrcConnection, listener: MessageListener) -> int:
    """Run the receive loop until it ends or SIGINT/SIGTERM arrives; return an exit code."""
    loop = asyncio.get_running_loop()
    stop = asyncio.Event()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop.set)
        except (NotImplementedError, RuntimeError):
            logger.debug("[MAIN] Signal %s handler not supported on this platform", sig)

    receiver = asyncio.create_task(receive_loop(connection, listener))
    stopper = asyncio.create_task(stop.wait())
    try:
        await asyncio.wait({receiver, stopper}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.remove_signal_handler(sig)
            except (NotImplementedError, RuntimeError):
                pass

    if stop.is_set():
        logger.info("[MAIN] Got interrupt, stopping")
    stopper.cancel()

    if not receiver.done():
        receiver.cancel()
        try:
            await receiver
        except asyncio.CancelledError:
            pass
        return 0

    exc = receiver.exception()
    if exc is not None:
        logger.critical("[MAIN] Connection error: %s", exc, exc_info=exc)
        return 1
    return 0


async def async_main(config_path: Optional[Path] = None) -> int:
    """Bootstrap configuration, state, and the connection; return an exit code."""
    token = load_environment()

    config = AppConfig(config_path or BASE_DIR / "config" / "app_config.yml")
    try:
        bot_config: BotConfig = config.bot_config.with_auth_token(token)
    except ValueError as exc:
        logger.critical("[MAIN] Invalid configuration: %s", exc)
        return 1

    db = ConnectionManager()
    try:
        await db.open(BASE_DIR / config.database_path)
    except Exception as exc:
        logger.critical("[MAIN] Failed to open database: %s", exc)
        return 1

    repository = ChannelStateRepository(db)
    store = ChannelStateStore(persister=repository)
    connection = IrcConnection(bot_config)
    exit_code = 1

    try:
        persisted = await repository.load_all()
        await prepare_channels(store, merge_channel_settings(config.channel_configs, persisted))

        listener = MessageListener(store, connection.send_privmsg, config.moderation)
        await connection.connect()
        exit_code = await run_until_stopped(connection, listener)
    except OSError as exc:
        logger.critical("[MAIN] Cannot connect to %s:%d: %s", bot_config.server, bot_config.port, exc)
    finally:
        await connection.close()
        await store.shutdown()
        await db.close()

    return exit_code


def main() -> int:
    """Entrypoint that runs the async runtime and returns the process exit code."""
    sys.excepthook = handle_exception
    logger.info("Starting chat moderation bot…")
    try:
        return asyncio.run(async_main())
    except KeyboardInterrupt:
        logger.info("Shutdown requested by user.")
        return 0
    except Exception as exc:
        logger.critical("An unexpected error occurred while running the bot: %s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
