"""Command-layer exceptions."""

from __future__ import annotations

from message_variables.exceptions import MessageVariableError


class CommandError(MessageVariableError):
    """Base exception for command invocations."""


class UnknownCommandError(CommandError):
    """Command name not recognized."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown command: {name}")


class MissingArgumentError(CommandError):
    """Required command argument was not supplied."""

    def __init__(self, command: str, argument: str) -> None:
        self.command = command
        self.argument = argument
        super().__init__(f"{command} requires {argument}")


class ArgumentTypeError(CommandError):
    """Command argument has the wrong shape."""

    def __init__(self, argument: str, reason: str) -> None:
        self.argument = argument
        super().__init__(f"Invalid argument '{argument}': {reason}")
