"""
Per-channel configuration values.

:class:`ChannelSettingsInput` is the declarative form read from YAML or the
database, where every field is optional. :class:`ChannelConfig` is the live
record owned by :class:`~chatmod.state.channel_state.ChannelStateStore`; its
command blacklist always contains the reserved command set.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Mapping, Set

# Triggers no channel may ever define or look up
RESERVED_COMMANDS: frozenset[str] = frozenset({
    "reload-conf",
    "update",
    "edit",
    "add",
    "newmod",
})


def _as_str_set(value: Any) -> Set[str] | None:
    if value is None:
        return None
    if isinstance(value, str):
        return {value}
    if isinstance(value, Iterable):
        return {str(item) for item in value}
    raise ValueError(f"Expected a list of strings, got {type(value).__name__}: {value!r}")


def _as_str_dict(value: Any) -> Dict[str, str] | None:
    if value is None:
        return None
    if not isinstance(value, Mapping):
        raise ValueError(f"Expected a mapping of strings, got {type(value).__name__}: {value!r}")
    return {str(key): str(reply) for key, reply in value.items()}


@dataclass(slots=True)
class ChannelSettingsInput:
    """Channel settings as declared externally; ``None`` means "not given"."""

    known_users: Set[str] | None = None
    bot_admins: Set[str] | None = None
    channel_text_commands: Dict[str, str] | None = None
    command_blacklist: Set[str] | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "ChannelSettingsInput":
        """Build settings from a loosely typed mapping such as parsed YAML.

        Missing keys and ``None`` values stay unset. Lists become sets.

        Raises:
            ValueError: If a field has an unusable type.
        """
        data = data or {}
        if not isinstance(data, Mapping):
            raise ValueError(f"Channel settings must be a mapping, got {type(data).__name__}")
        return cls(
            known_users=_as_str_set(data.get("known_users")),
            bot_admins=_as_str_set(data.get("bot_admins")),
            channel_text_commands=_as_str_dict(data.get("channel_text_commands")),
            command_blacklist=_as_str_set(data.get("command_blacklist")),
        )

    def merged_with(self, other: "ChannelSettingsInput") -> "ChannelSettingsInput":
        """Combine two declarations; sets are unioned and ``self`` wins on command conflicts."""

        def union(a: Set[str] | None, b: Set[str] | None) -> Set[str] | None:
            if a is None and b is None:
                return None
            return set(a or ()) | set(b or ())

        commands: Dict[str, str] | None = None
        if self.channel_text_commands is not None or other.channel_text_commands is not None:
            commands = dict(other.channel_text_commands or {})
            commands.update(self.channel_text_commands or {})

        return ChannelSettingsInput(
            known_users=union(self.known_users, other.known_users),
            bot_admins=union(self.bot_admins, other.bot_admins),
            channel_text_commands=commands,
            command_blacklist=union(self.command_blacklist, other.command_blacklist),
        )


@dataclass(slots=True)
class ChannelConfig:
    """Live configuration and trust state of one channel."""

    known_users: Set[str] = field(default_factory=set)
    bot_admins: Set[str] = field(default_factory=set)
    text_commands: Dict[str, str] = field(default_factory=dict)
    command_blacklist: Set[str] = field(default_factory=lambda: set(RESERVED_COMMANDS))

    @classmethod
    def default(cls, reserved: Iterable[str] = RESERVED_COMMANDS) -> "ChannelConfig":
        """Return the empty configuration used for channels nobody configured."""
        return cls(command_blacklist=set(reserved))

    @classmethod
    def from_input(
        cls,
        settings: ChannelSettingsInput,
        reserved: Iterable[str] = RESERVED_COMMANDS,
    ) -> "ChannelConfig":
        """Materialize declared settings; the blacklist is ``reserved`` plus any extras."""
        return cls(
            known_users=set(settings.known_users or ()),
            bot_admins=set(settings.bot_admins or ()),
            text_commands=dict(settings.channel_text_commands or {}),
            command_blacklist=set(reserved) | set(settings.command_blacklist or ()),
        )

    def copy(self) -> "ChannelConfig":
        return ChannelConfig(
            known_users=set(self.known_users),
            bot_admins=set(self.bot_admins),
            text_commands=dict(self.text_commands),
            command_blacklist=set(self.command_blacklist),
        )
