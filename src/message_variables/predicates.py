"""Message filter predicates.

A predicate runs against a scope: a mapping of name bindings. The resolver
gives every message its own deep copy of the predicate's base scope with
the message fields bound on top, so nothing one evaluation writes into its
scope is visible to the next.
"""

from __future__ import annotations

import copy
import inspect
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable

from message_variables.commands.exceptions import ArgumentTypeError

if TYPE_CHECKING:
    from message_variables.chat import Message


@dataclass
class PredicateResult:
    """Outcome of a predicate execution; ``pipe`` carries the value."""

    pipe: Any

    @property
    def passed(self) -> bool:
        return bool(self.pipe)


class Predicate(ABC):
    """Base class for message filters."""

    def __init__(self, scope: dict[str, Any] | None = None) -> None:
        self.scope: dict[str, Any] = dict(scope or {})

    def bind(self, message: Message) -> dict[str, Any]:
        """Return a fresh scope for one message."""
        scope = copy.deepcopy(self.scope)
        scope.update(copy.deepcopy(message.to_bindings()))
        return scope

    @abstractmethod
    async def execute(self, scope: dict[str, Any]) -> PredicateResult:
        """Evaluate against a bound scope."""
        ...


class CallablePredicate(Predicate):
    """Wrap a plain or async callable taking the bound scope."""

    def __init__(
        self,
        func: Callable[[dict[str, Any]], Any],
        scope: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(scope)
        self._func = func

    async def execute(self, scope: dict[str, Any]) -> PredicateResult:
        result = self._func(scope)
        if inspect.isawaitable(result):
            result = await result
        if isinstance(result, PredicateResult):
            return result
        return PredicateResult(pipe=result)


_TRUE = {"true", "yes", "on", "1"}
_FALSE = {"false", "no", "off", "0"}


def _matches(actual: Any, expected: str) -> bool:
    if isinstance(actual, bool):
        lowered = expected.strip().lower()
        if lowered in _TRUE:
            return actual
        if lowered in _FALSE:
            return not actual
        return False
    if actual is None:
        return expected == ""
    return str(actual) == expected


class FieldMatchPredicate(Predicate):
    """All ``field=value`` conditions must hold for a message to pass.

    Boolean fields accept true/false/yes/no/1/0. Other fields compare by
    their string form.
    """

    def __init__(
        self,
        conditions: dict[str, str],
        scope: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(scope)
        self.conditions = dict(conditions)

    @classmethod
    def parse(cls, expressions: list[str]) -> "FieldMatchPredicate":
        """Build from ``["is_user=true", "name=Alice"]`` style strings."""
        conditions: dict[str, str] = {}
        for expression in expressions:
            field_name, sep, value = expression.partition("=")
            field_name = field_name.strip()
            if not sep or not field_name:
                raise ArgumentTypeError(
                    "filter", f"expected FIELD=VALUE, got {expression!r}"
                )
            conditions[field_name] = value
        return cls(conditions)

    async def execute(self, scope: dict[str, Any]) -> PredicateResult:
        passed = all(
            _matches(scope.get(name), expected)
            for name, expected in self.conditions.items()
        )
        return PredicateResult(pipe=passed)
