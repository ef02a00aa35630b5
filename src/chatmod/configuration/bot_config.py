"""
Connection settings for the chat server.

Loaded from the ``twitch_config`` section of ``config/app_config.yml``::

    twitch_config:
      nickname: mybot
      server: irc.chat.twitch.tv
      port: 6697
      channels: ["#mychannel"]
      use_tls: true
      auth_token: oauth:...   # or CHATMOD_AUTH_TOKEN in .env
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, List, Mapping, Optional


@dataclass(frozen=True, slots=True)
class BotConfig:
    """Network identity and target server of the bot."""

    nickname: str
    server: str
    port: int
    channels: List[str] = field(default_factory=list)
    use_tls: bool = False
    auth_token: Optional[str] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "BotConfig":
        """Validate and build a BotConfig from parsed YAML.

        Raises:
            ValueError: If a required field is missing or has an unusable value.
        """
        if not isinstance(data, Mapping):
            raise ValueError("twitch_config section is missing or not a mapping")

        missing = [key for key in ("nickname", "server", "port") if not data.get(key)]
        if missing:
            raise ValueError(f"twitch_config is missing required field(s): {', '.join(missing)}")

        try:
            port = int(data["port"])
        except (TypeError, ValueError):
            raise ValueError(f"twitch_config.port must be an integer, got {data['port']!r}") from None
        if not 0 < port < 65536:
            raise ValueError(f"twitch_config.port out of range: {port}")

        channels = data.get("channels") or []
        if isinstance(channels, str):
            channels = [channels]
        if not isinstance(channels, list):
            raise ValueError("twitch_config.channels must be a list of channel names")

        token = data.get("auth_token")
        return cls(
            nickname=str(data["nickname"]),
            server=str(data["server"]),
            port=port,
            channels=[str(channel) for channel in channels],
            use_tls=bool(data.get("use_tls", False)),
            auth_token=str(token) if token else None,
        )

    def with_auth_token(self, token: Optional[str]) -> "BotConfig":
        """Return a copy using ``token`` when it is set, else ``self``."""
        return replace(self, auth_token=token) if token else self
