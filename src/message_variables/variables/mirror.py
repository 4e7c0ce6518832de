"""Keep chat metadata ``variables`` aligned with the newest message."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from message_variables.chat import Conversation, Message
    from message_variables.config import Settings
    from message_variables.persistence import PersistenceScheduler
    from message_variables.variables.resolver import MessageResolver

LOGGER = logging.getLogger(__name__)

_MISSING = object()


class MirrorSynchronizer:
    """Publish the newest non-system message's variables to chat metadata.

    Writes go through :meth:`propagate` immediately. :meth:`run` polls on a
    fixed interval to catch changes no write reported, such as a new
    message arriving or the active swipe changing.
    """

    def __init__(
        self,
        conversation: Conversation,
        resolver: MessageResolver,
        settings: Settings,
        scheduler: PersistenceScheduler,
    ) -> None:
        self._conversation = conversation
        self._resolver = resolver
        self._settings = settings
        self._scheduler = scheduler
        self._last_seen: str | None = None
        self._task: asyncio.Task | None = None
        self._stop: asyncio.Event | None = None

    @property
    def enabled(self) -> bool:
        return self._settings.mirror_latest_to_metadata

    def propagate(self, message: Message, key: str) -> bool:
        """Copy one key of ``message`` into the mirror if it is the newest message.

        Returns: True if the mirror was touched.
        """
        if not self.enabled or not self._resolver.is_latest(message):
            return False

        table = message.active_variables() or {}
        value = table.get(key, _MISSING)
        mirror = self._conversation.mirror
        if value is _MISSING:
            mirror.pop(key, None)
            LOGGER.debug("Mirror: removed %s", key)
        else:
            mirror[key] = value
            LOGGER.debug("Mirror: %s updated", key)
        self._scheduler.request_metadata_save()
        return True

    def reconcile(self) -> bool:
        """Run one poll.

        Returns: True if the mirror was republished.
        """
        if not self.enabled:
            return False
        message = self._resolver.latest_message()
        if message is None or message.variables is None:
            return False
        table = message.active_variables()
        if table is None:
            return False

        current = json.dumps(table, sort_keys=True, default=str)
        if current == self._last_seen:
            return False
        self._last_seen = current

        self._conversation.mirror.update(table)
        self._scheduler.request_metadata_save()
        LOGGER.info("Mirror republished %d variables", len(table))
        return True

    async def run(self, stop: asyncio.Event | None = None) -> None:
        """Poll until ``stop`` is set."""
        stop = stop or asyncio.Event()
        interval = self._settings.poll_interval
        LOGGER.debug("Mirror loop started (interval=%ss)", interval)
        while not stop.is_set():
            try:
                await asyncio.wait_for(stop.wait(), timeout=interval)
            except asyncio.TimeoutError:
                pass
            if stop.is_set():
                break
            self.reconcile()
        LOGGER.debug("Mirror loop stopped")

    def start(self) -> asyncio.Task:
        """Schedule :meth:`run` on the running loop."""
        if self._task is not None and not self._task.done():
            return self._task
        self._stop = asyncio.Event()
        self._task = asyncio.get_running_loop().create_task(self.run(self._stop))
        return self._task

    async def stop(self) -> None:
        if self._task is None or self._stop is None:
            return
        self._stop.set()
        await self._task
        self._task = None
        self._stop = None
