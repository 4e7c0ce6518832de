"""Command layer for message variable operations.

This module provides:
- CommandDispatcher: Routes command calls to implementations
- CommandResult: Result dataclass for command execution
- Command exceptions for error handling
- Command declarations
"""

from __future__ import annotations

from message_variables.commands.dispatcher import CommandDispatcher
from message_variables.commands.exceptions import (
    ArgumentTypeError,
    CommandError,
    MissingArgumentError,
    UnknownCommandError,
)
from message_variables.commands.message_commands import MessageCommands
from message_variables.commands.result import CommandResult
from message_variables.commands.schemas import (
    format_help,
    get_all_command_schemas,
    get_command_schema,
)

__all__ = [
    "CommandDispatcher",
    "CommandResult",
    "MessageCommands",
    "CommandError",
    "UnknownCommandError",
    "MissingArgumentError",
    "ArgumentTypeError",
    "format_help",
    "get_all_command_schemas",
    "get_command_schema",
]
