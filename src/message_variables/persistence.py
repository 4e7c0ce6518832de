"""Debounced, fire-and-forget persistence requests."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Callable, Protocol

if TYPE_CHECKING:
    from message_variables.chat import ChatFile, Conversation

LOGGER = logging.getLogger(__name__)


class PersistenceScheduler(Protocol):
    """Save requests issued by the variable store and mirror."""

    def request_chat_save(self) -> None: ...

    def request_metadata_save(self) -> None: ...


class DebouncedSaver:
    """Coalesce repeated save requests into one call.

    Inside a running event loop each request re-arms a timer; the save runs
    ``delay`` seconds after the last request. Without a running loop the
    save runs immediately.
    """

    def __init__(self, save: Callable[[], None], delay: float = 1.0) -> None:
        self._save = save
        self.delay = delay
        self._handle: asyncio.TimerHandle | None = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def request(self) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._run()
            return
        if self._handle is not None:
            self._handle.cancel()
        self._handle = loop.call_later(self.delay, self._run)

    def flush(self) -> None:
        """Run a pending save now."""
        if self._handle is not None:
            self._handle.cancel()
            self._run()

    def _run(self) -> None:
        self._handle = None
        try:
            self._save()
        except Exception as e:
            # Requesters never observe save failures.
            LOGGER.error("Debounced save failed: %s", e)


class ChatPersistence:
    """Scheduler that writes the whole chat file for either request."""

    def __init__(
        self,
        chat_file: ChatFile,
        conversation: Conversation,
        delay: float = 1.0,
    ) -> None:
        self._chat_file = chat_file
        self._conversation = conversation
        self._chat = DebouncedSaver(self._save_chat, delay)
        self._metadata = DebouncedSaver(self._save_metadata, delay)

    def request_chat_save(self) -> None:
        self._chat.request()

    def request_metadata_save(self) -> None:
        self._metadata.request()

    def flush(self) -> None:
        self._chat.flush()
        self._metadata.flush()

    def _save_chat(self) -> None:
        self._chat_file.save(self._conversation)

    def _save_metadata(self) -> None:
        # Metadata lives in the chat file header.
        if self._chat.pending:
            return
        self._chat_file.save(self._conversation)
