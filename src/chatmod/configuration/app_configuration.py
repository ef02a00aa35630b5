from __future__ import annotations
from pathlib import Path
import fcntl
from typing import Any, Dict
import yaml

from chatmod.configuration.bot_config import BotConfig
from chatmod.configuration.moderation_settings import ModerationSettings
from chatmod.datatypes.channel_config import ChannelSettingsInput
from chatmod.util.logger import get_logger

logger = get_logger("app_configuration")


DEFAULT_DATABASE_PATH = Path("./data/chatmod.db")


class AppConfig:
    """File-lock based accessor around the YAML-based application configuration.

    The class caches the contents of ``./config/app_config.yml`` and exposes
    typed views of its sections: the server connection (:class:`BotConfig`),
    declared channel settings, and moderation tuning.
    """

    def __init__(self, config_path: Path) -> None:
        self.config_path = config_path
        self._data: Dict[str, Any] = {}
        self.reload()

    # --------------------------
    # Private helpers
    # --------------------------
    def load_from_disk(self) -> Dict[str, Any]:
        try:
            with self.config_path.open("r", encoding="utf-8") as f:
                fcntl.flock(f.fileno(), fcntl.LOCK_SH)
                try:
                    data = yaml.safe_load(f)
                finally:
                    fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        except FileNotFoundError:
            logger.error("[APP CONFIGURATION] Config file %s not found.", self.config_path)
            return {}
        except Exception as exc:
            logger.error("[APP CONFIGURATION] Failed to load config %s: %s", self.config_path, exc)
            return {}

        if data is None:
            return {}
        if not isinstance(data, dict):
            logger.error("[APP CONFIGURATION] Config %s must contain a mapping at top level.", self.config_path)
            return {}
        return data

    # --------------------------
    # Public API
    # --------------------------
    def reload(self) -> Dict[str, Any]:
        """Reload configuration from disk and return the loaded mapping.

        Returns the raw mapping that was loaded (an empty dict on error).
        """
        self._data = self.load_from_disk()
        return self._data

    @property
    def data(self) -> Dict[str, Any]:
        """Return the current cached configuration mapping.

        The returned dict is the internal cache (shallow reference). Callers
        should not mutate it.
        """
        return self._data

    def get(self, key: str, default: Any = None) -> Any:
        """Safe lookup for top-level configuration keys."""
        return self._data.get(key, default)

    # --------------------------
    # High-level shortcuts
    # --------------------------
    @property
    def bot_config(self) -> BotConfig:
        """Return the validated ``twitch_config`` section.

        Raises:
            ValueError: If the section is missing or invalid.
        """
        return BotConfig.from_mapping(self._data.get("twitch_config"))

    @property
    def channel_configs(self) -> Dict[str, ChannelSettingsInput]:
        """Return declared settings per channel name.

        Channels whose section cannot be interpreted are skipped with an error.
        """
        section = self._data.get("channel_configs") or {}
        if not isinstance(section, dict):
            logger.error("[APP CONFIGURATION] channel_configs must be a mapping, ignoring it")
            return {}

        configs: Dict[str, ChannelSettingsInput] = {}
        for channel, settings in section.items():
            try:
                configs[str(channel)] = ChannelSettingsInput.from_mapping(settings)
            except ValueError as exc:
                logger.error("[APP CONFIGURATION] Ignoring settings of channel %s: %s", channel, exc)
        return configs

    @property
    def moderation(self) -> ModerationSettings:
        """Return the moderation settings wrapped in a ModerationSettings helper."""
        settings = self._data.get("moderation", {})
        if not isinstance(settings, dict):
            settings = {}
        return ModerationSettings(settings)

    @property
    def database_path(self) -> Path:
        """Return the SQLite file used to remember channel state between runs."""
        value = self._data.get("database_path")
        return Path(value) if value else DEFAULT_DATABASE_PATH
