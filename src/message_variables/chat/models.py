"""Data models for chat conversations."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# Message fields with first-class attributes; anything else lands in ``extra``.
_KNOWN_FIELDS = ("name", "is_user", "is_system", "mes", "swipe_id", "swipes", "variables")
_HEADER_FIELDS = ("name", "is_user", "is_system", "mes")


@dataclass(eq=False)
class Message:
    """A single chat message with per-swipe variable tables.

    Messages compare by identity.
    """

    name: str = ""
    mes: str | None = ""
    is_user: bool = False
    is_system: bool = False
    swipe_id: int | None = None
    swipes: list[str] | None = None
    variables: list[dict[str, Any] | None] | None = None
    extra: dict[str, Any] = field(default_factory=dict)
    # Header fields present in the source row; None writes them all.
    present: frozenset[str] | None = field(default=None, repr=False)

    @property
    def active_swipe(self) -> int:
        """Index of the active swipe; an unset or negative id reads as 0."""
        return max(self.swipe_id or 0, 0)

    def active_variables(self) -> dict[str, Any] | None:
        """Return the active swipe's table, or None if no write created it."""
        if not self.variables:
            return None
        swipe = self.active_swipe
        if swipe >= len(self.variables):
            return None
        return self.variables[swipe]

    def ensure_active_variables(self) -> dict[str, Any]:
        """Create the swipe list and active table if needed and return it."""
        if self.variables is None:
            self.variables = []
        swipe = self.active_swipe
        while len(self.variables) <= swipe:
            self.variables.append(None)
        if self.variables[swipe] is None:
            self.variables[swipe] = {}
        return self.variables[swipe]

    def to_bindings(self) -> dict[str, Any]:
        """Message fields as name/value pairs for predicate scopes."""
        bindings = dict(self.extra)
        bindings.update(
            {
                "name": self.name,
                "mes": self.mes,
                "is_user": self.is_user,
                "is_system": self.is_system,
                "swipe_id": self.swipe_id,
                "swipes": self.swipes,
                "variables": self.variables,
            }
        )
        return bindings

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Message":
        return cls(
            name=data.get("name", ""),
            mes=data.get("mes", ""),
            is_user=data.get("is_user", False),
            is_system=data.get("is_system", False),
            swipe_id=data.get("swipe_id"),
            swipes=data.get("swipes"),
            variables=data.get("variables"),
            extra={k: v for k, v in data.items() if k not in _KNOWN_FIELDS},
            present=frozenset(k for k in _HEADER_FIELDS if k in data),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            k: getattr(self, k)
            for k in _HEADER_FIELDS
            if self.present is None or k in self.present
        }
        data.update(self.extra)
        if self.swipe_id is not None:
            data["swipe_id"] = self.swipe_id
        if self.swipes is not None:
            data["swipes"] = self.swipes
        if self.variables is not None:
            data["variables"] = self.variables
        return data


@dataclass
class Conversation:
    """Ordered messages plus chat-wide metadata."""

    messages: list[Message] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    header: dict[str, Any] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.messages)

    @property
    def mirror(self) -> dict[str, Any]:
        """Chat-level ``variables`` mapping, created on first access."""
        variables = self.metadata.get("variables")
        if not isinstance(variables, dict):
            variables = {}
            self.metadata["variables"] = variables
        return variables

    def append(self, message: Message) -> None:
        self.messages.append(message)
