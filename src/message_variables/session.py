"""High-level wiring of a chat with its variable commands."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .chat import ChatFile, Conversation
from .commands import CommandDispatcher, CommandResult
from .config import Settings, SettingsStore
from .persistence import ChatPersistence, PersistenceScheduler
from .variables import MessageResolver, MirrorSynchronizer, VariableStore

LOGGER = logging.getLogger("message_variables.session")


@dataclass
class SessionConfig:
    chat_path: Path
    settings_path: Path = Path("data/settings.yaml")


class ChatSession:
    """One loaded conversation with its resolver, store, mirror and commands.

    Use as an async context manager to run the mirror loop for the duration
    of the block and flush pending saves on exit.
    """

    def __init__(
        self,
        conversation: Conversation,
        settings: Settings,
        scheduler: PersistenceScheduler,
    ) -> None:
        self.conversation = conversation
        self.settings = settings
        self.scheduler = scheduler
        self.resolver = MessageResolver(conversation)
        self.mirror = MirrorSynchronizer(conversation, self.resolver, settings, scheduler)
        self.store = VariableStore(scheduler, self.mirror)
        self.dispatcher = CommandDispatcher(self.resolver, self.store)

    @classmethod
    def open(cls, config: SessionConfig) -> "ChatSession":
        """Load the chat file and settings named in ``config``."""
        settings = SettingsStore(config.settings_path).load()
        chat_file = ChatFile(config.chat_path)
        conversation = chat_file.load()
        scheduler = ChatPersistence(chat_file, conversation, delay=settings.save_delay)
        LOGGER.info(
            "Opened %s (%d messages, mirror=%s)",
            config.chat_path,
            len(conversation),
            settings.mirror_latest_to_metadata,
        )
        return cls(conversation, settings, scheduler)

    async def run_command(self, name: str, args: dict | None = None, value: Any = None) -> CommandResult:
        return await self.dispatcher.dispatch(name, args, value)

    def flush(self) -> None:
        """Write any pending saves now."""
        flush = getattr(self.scheduler, "flush", None)
        if flush is not None:
            flush()

    async def __aenter__(self) -> "ChatSession":
        self.mirror.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.mirror.stop()
        self.flush()
