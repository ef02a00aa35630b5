from typing import Any, Dict

from chatmod.datatypes.action_datatypes import SHORT_TIMEOUT_SECONDS, SanctionKind

DEFAULT_REASONS: Dict[SanctionKind, str] = {
    SanctionKind.LINKS: "ei linkkejä",
    SanctionKind.ZALGO: "ei zalgoa",
}


class ModerationSettings:
    """Typed accessors for the ``moderation`` section of the app config.

    Unknown keys are kept and reachable through :meth:`get`. Malformed values
    fall back to the defaults instead of raising.
    """

    def __init__(self, data: Dict[str, Any] | None = None) -> None:
        self.data: Dict[str, Any] = data or {}

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value for `key` or `default` if missing."""
        return self.data.get(key, default)

    def as_dict(self) -> Dict[str, Any]:
        return self.data

    @property
    def timeout_seconds(self) -> int:
        try:
            value = int(self.data.get("timeout_seconds", SHORT_TIMEOUT_SECONDS))
        except (TypeError, ValueError):
            return SHORT_TIMEOUT_SECONDS
        return value if value > 0 else SHORT_TIMEOUT_SECONDS

    @property
    def link_reason(self) -> str:
        return str(self.data.get("link_reason") or DEFAULT_REASONS[SanctionKind.LINKS])

    @property
    def zalgo_reason(self) -> str:
        return str(self.data.get("zalgo_reason") or DEFAULT_REASONS[SanctionKind.ZALGO])

    def reason_for(self, kind: SanctionKind) -> str:
        """Return the chat reason configured for a sanction kind."""
        if kind is SanctionKind.LINKS:
            return self.link_reason
        return self.zalgo_reason
