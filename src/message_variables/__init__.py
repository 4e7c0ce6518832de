"""Key/value variables bound to individual chat messages."""

from message_variables.chat import ChatFile, Conversation, Message
from message_variables.commands import CommandDispatcher, CommandResult
from message_variables.config import Settings, SettingsStore
from message_variables.exceptions import (
    ChatFileError,
    MessageNotFoundError,
    MessageVariableError,
    ValueCodecError,
)
from message_variables.predicates import (
    CallablePredicate,
    FieldMatchPredicate,
    Predicate,
    PredicateResult,
)
from message_variables.session import ChatSession, SessionConfig
from message_variables.variables import MessageResolver, MirrorSynchronizer, VariableStore

__version__ = "0.1.0"

__all__ = [
    "CallablePredicate",
    "ChatFile",
    "ChatFileError",
    "ChatSession",
    "CommandDispatcher",
    "CommandResult",
    "Conversation",
    "FieldMatchPredicate",
    "Message",
    "MessageNotFoundError",
    "MessageResolver",
    "MessageVariableError",
    "MirrorSynchronizer",
    "Predicate",
    "PredicateResult",
    "SessionConfig",
    "Settings",
    "SettingsStore",
    "ValueCodecError",
    "VariableStore",
]
