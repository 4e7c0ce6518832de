"""Core exceptions for message variable operations."""

from __future__ import annotations


class MessageVariableError(Exception):
    """Base exception for message variable operations."""


class MessageNotFoundError(MessageVariableError):
    """Message reference did not resolve to a message."""

    def __init__(self, ref: int | None) -> None:
        self.ref = ref
        if ref is None:
            super().__init__("no non-system message exists")
        else:
            super().__init__(f"message {ref} does not exist")


class ValueCodecError(MessageVariableError):
    """Stored value cannot be indexed into for a write."""

    def __init__(self, key: str, index: str | int, reason: str) -> None:
        self.key = key
        self.index = index
        super().__init__(f"Cannot write '{key}' at index {index!r}: {reason}")


class ChatFileError(MessageVariableError):
    """Chat file could not be read or written."""
