"""Per-message, per-swipe variable tables."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from message_variables.variables.codec import Index, encode_for_indexed_write

if TYPE_CHECKING:
    from message_variables.chat import Message
    from message_variables.persistence import PersistenceScheduler
    from message_variables.variables.mirror import MirrorSynchronizer

LOGGER = logging.getLogger(__name__)


class VariableStore:
    """Read and write variables on resolved messages.

    Every mutation schedules a chat save and hands the key to the mirror,
    which decides whether the message is the one it publishes.
    """

    def __init__(
        self,
        scheduler: PersistenceScheduler,
        mirror: MirrorSynchronizer | None = None,
    ) -> None:
        self._scheduler = scheduler
        self._mirror = mirror

    def get(self, message: Message, key: str) -> Any:
        """Raw stored value, or None."""
        table = message.active_variables()
        if table is None:
            return None
        return table.get(key)

    def get_all(self, message: Message) -> dict[str, Any]:
        """Active swipe's table; empty when nothing was ever written."""
        table = message.active_variables()
        return table if table is not None else {}

    def set(
        self,
        message: Message,
        key: str,
        value: Any,
        index: Index | None = None,
    ) -> Any:
        """
        Store ``value`` under ``key`` on the message's active swipe.

        Args:
            message: Target message.
            key: Variable name.
            value: Value to store, or to place at ``index``.
            index: Optional list position or object key inside the stored value.

        Returns: The value now stored under ``key``.

        Raises:
            ValueCodecError: The existing value cannot be indexed into.
        """
        existing = self.get(message, key)
        # Encode before creating the table so a codec failure leaves no trace.
        stored = encode_for_indexed_write(key, existing, index, value)

        table = message.ensure_active_variables()
        table[key] = stored
        LOGGER.info(
            "Set %s on swipe %d%s",
            key,
            message.active_swipe,
            "" if index is None else f" at index {index!r}",
        )

        if self._mirror is not None:
            self._mirror.propagate(message, key)
        self._scheduler.request_chat_save()
        return stored

    def delete(self, message: Message, key: str) -> bool:
        """
        Remove ``key`` from the message's active swipe.

        Returns: True if the key existed.
        """
        table = message.active_variables()
        if table is None:
            LOGGER.debug("Delete %s: no variables on swipe %d", key, message.active_swipe)
            return False

        existed = key in table
        table.pop(key, None)
        LOGGER.info("Deleted %s from swipe %d", key, message.active_swipe)

        if self._mirror is not None:
            self._mirror.propagate(message, key)
        self._scheduler.request_chat_save()
        return existed
