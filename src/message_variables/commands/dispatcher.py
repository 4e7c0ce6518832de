"""Command dispatcher for routing command calls to implementations."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Awaitable, Callable

from message_variables.commands.exceptions import ArgumentTypeError, UnknownCommandError
from message_variables.commands.message_commands import MessageCommands
from message_variables.commands.result import CommandResult
from message_variables.commands.schemas import get_all_command_schemas, get_command_schema
from message_variables.exceptions import MessageVariableError

LOGGER = logging.getLogger(__name__)

if TYPE_CHECKING:
    from message_variables.variables import MessageResolver, VariableStore


def _message_ref(value: Any) -> int | None:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ArgumentTypeError("mes", f"expected a message id, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ArgumentTypeError("mes", f"expected a message id, got {value!r}") from None


def _index(value: Any) -> str | int | float | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise ArgumentTypeError("index", f"expected a number or string, got {value!r}")
    return value


def _predicate(value: Any) -> Any:
    if value is None:
        return None
    if not callable(getattr(value, "execute", None)) or not callable(getattr(value, "bind", None)):
        raise ArgumentTypeError("filter", f"expected a predicate, got {type(value).__name__}")
    return value


class CommandDispatcher:
    """Route command calls to implementations."""

    def __init__(self, resolver: MessageResolver, store: VariableStore) -> None:
        """
        Initialize dispatcher with the resolver and store.

        Args:
            resolver: MessageResolver for message references.
            store: VariableStore for reads and writes.
        """
        self._commands = MessageCommands(resolver, store)

        # Canonical command name -> handler
        self._handlers: dict[str, Callable[[dict, Any], Awaitable[Any]]] = {
            "set-message-variable": self._handle_set,
            "get-message-variable": self._handle_get,
            "get-all-message-variables": self._handle_get_all,
            "delete-message-variable": self._handle_delete,
        }

    async def execute(self, name: str, args: dict | None = None, value: Any = None) -> Any:
        """
        Run a command and return its pipe value.

        Args:
            name: Command name or alias.
            args: Named arguments.
            value: Unnamed argument.

        Raises:
            MessageVariableError: Any command failure, unchanged.
        """
        schema = get_command_schema(name)
        if schema is None:
            raise UnknownCommandError(name)
        handler = self._handlers[schema["name"]]
        LOGGER.debug("Command: %s", schema["name"])
        return await handler(dict(args or {}), value)

    async def dispatch(self, name: str, args: dict | None = None, value: Any = None) -> CommandResult:
        """
        Run a command, reporting failure in the result instead of raising.

        Returns: CommandResult with success status and pipe value.
        """
        try:
            result = await self.execute(name, args, value)
        except MessageVariableError as e:
            LOGGER.warning("Command error: %s: %s", name, e)
            return CommandResult(command=name, success=False, result="", error=str(e))

        LOGGER.debug("Command success: %s", name)
        return CommandResult(command=name, success=True, result=result)

    def get_command_definitions(self) -> list[dict]:
        """Return command declarations."""
        return get_all_command_schemas()

    # Handler methods

    async def _handle_set(self, args: dict, value: Any) -> Any:
        return await self._commands.set_variable(
            args.get("key"),
            value,
            index=_index(args.get("index")),
            mes=_message_ref(args.get("mes")),
            filter=_predicate(args.get("filter")),
        )

    async def _handle_get(self, args: dict, value: Any) -> Any:
        key = args.get("key")
        return await self._commands.get_variable(
            key if key is not None else value,
            index=_index(args.get("index")),
            mes=_message_ref(args.get("mes")),
            filter=_predicate(args.get("filter")),
        )

    async def _handle_get_all(self, args: dict, value: Any) -> str:
        mes = args.get("mes")
        return await self._commands.get_all_variables(
            mes=_message_ref(mes if mes is not None else value),
            filter=_predicate(args.get("filter")),
        )

    async def _handle_delete(self, args: dict, value: Any) -> str:
        key = args.get("key")
        return await self._commands.delete_variable(
            key if key is not None else value,
            mes=_message_ref(args.get("mes")),
            filter=_predicate(args.get("filter")),
        )
