"""Message variable command implementations."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from message_variables.commands.exceptions import MissingArgumentError
from message_variables.variables.codec import (
    coerce_scalar,
    decode_for_indexed_read,
    dumps,
)

if TYPE_CHECKING:
    from message_variables.predicates import Predicate
    from message_variables.variables import MessageResolver, VariableStore
    from message_variables.variables.codec import Index

LOGGER = logging.getLogger(__name__)


def _require_key(command: str, key: str | None) -> str:
    if key is None or key == "":
        raise MissingArgumentError(command, "key")
    return key


class MessageCommands:
    """Set, get, get-all and delete, each resolving its message first."""

    def __init__(self, resolver: MessageResolver, store: VariableStore) -> None:
        self._resolver = resolver
        self._store = store

    async def set_variable(
        self,
        key: str | None,
        value: Any,
        *,
        index: Index | None = None,
        mes: int | None = None,
        filter: Predicate | None = None,
    ) -> Any:
        """Set ``key`` on the addressed message and return ``value``."""
        key = _require_key("set-message-variable", key)
        if value is None:
            raise MissingArgumentError("set-message-variable", "value")
        message = await self._resolver.resolve(mes, filter)
        self._store.set(message, key, value, index)
        return value

    async def get_variable(
        self,
        key: str | None,
        *,
        index: Index | None = None,
        mes: int | None = None,
        filter: Predicate | None = None,
    ) -> Any:
        """Return the coerced value of ``key`` on the addressed message."""
        key = _require_key("get-message-variable", key)
        message = await self._resolver.resolve(mes, filter)
        raw = self._store.get(message, key)
        return coerce_scalar(decode_for_indexed_read(raw, index))

    async def get_all_variables(
        self,
        *,
        mes: int | None = None,
        filter: Predicate | None = None,
    ) -> str:
        """Return the addressed message's variables as a JSON object string."""
        message = await self._resolver.resolve(mes, filter)
        return dumps(self._store.get_all(message))

    async def delete_variable(
        self,
        key: str | None,
        *,
        mes: int | None = None,
        filter: Predicate | None = None,
    ) -> str:
        """Remove ``key`` from the addressed message."""
        key = _require_key("delete-message-variable", key)
        message = await self._resolver.resolve(mes, filter)
        self._store.delete(message, key)
        return ""
