"""Shared pytest fixtures for message-variables tests."""

from __future__ import annotations

import pytest

from message_variables.chat import Conversation, Message
from message_variables.config import Settings
from message_variables.session import ChatSession


class RecordingScheduler:
    """Persistence scheduler that counts save requests."""

    def __init__(self) -> None:
        self.chat_saves = 0
        self.metadata_saves = 0

    def request_chat_save(self) -> None:
        self.chat_saves += 1

    def request_metadata_save(self) -> None:
        self.metadata_saves += 1


def make_conversation() -> Conversation:
    """Five messages: system greeting, user, assistant, user, trailing system note."""
    return Conversation(
        messages=[
            Message(name="System", mes="Welcome", is_system=True),
            Message(name="Alice", mes="Hi", is_user=True),
            Message(name="Bot", mes="Hello!", variables=[{"score": "1"}]),
            Message(name="Alice", mes="How are you?", is_user=True),
            Message(name="System", mes="note", is_system=True),
        ],
        metadata={"variables": {}},
    )


@pytest.fixture
def scheduler() -> RecordingScheduler:
    return RecordingScheduler()


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def conversation() -> Conversation:
    return make_conversation()


@pytest.fixture
def session(
    conversation: Conversation,
    settings: Settings,
    scheduler: RecordingScheduler,
) -> ChatSession:
    """Session over the synthetic conversation with recorded saves."""
    return ChatSession(conversation, settings, scheduler)
