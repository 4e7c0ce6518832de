"""Chat conversation access layer."""

from message_variables.chat.chat_file import ChatFile
from message_variables.chat.models import Conversation, Message

__all__ = [
    "ChatFile",
    "Conversation",
    "Message",
]
