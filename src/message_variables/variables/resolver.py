"""Locate the message a command addresses."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from message_variables.exceptions import MessageNotFoundError

if TYPE_CHECKING:
    from message_variables.chat import Conversation, Message
    from message_variables.predicates import Predicate

LOGGER = logging.getLogger(__name__)


class MessageResolver:
    """Resolve message references against a conversation."""

    def __init__(self, conversation: Conversation) -> None:
        self._conversation = conversation

    def last_non_system_index(self) -> int | None:
        """Position of the newest non-system message in the full conversation."""
        messages = self._conversation.messages
        for position in range(len(messages) - 1, -1, -1):
            if not messages[position].is_system:
                return position
        return None

    def latest_message(self) -> Message | None:
        """Newest non-system message, if any."""
        position = self.last_non_system_index()
        if position is None:
            return None
        return self._conversation.messages[position]

    def is_latest(self, message: Message) -> bool:
        return message is self.latest_message()

    async def candidates(self, predicate: Predicate | None = None) -> list[Message]:
        """Messages eligible for selection, in conversation order."""
        messages = list(self._conversation.messages)
        if predicate is None:
            return messages

        kept: list[Message] = []
        for message in messages:
            result = await predicate.execute(predicate.bind(message))
            if result.passed:
                kept.append(message)
        LOGGER.debug("Filter kept %d of %d messages", len(kept), len(messages))
        return kept

    async def resolve(
        self,
        ref: int | None = None,
        predicate: Predicate | None = None,
    ) -> Message:
        """
        Select one message.

        Args:
            ref: Position in the candidate list. Negative values count from
                the end. None means the newest non-system message's position
                in the full conversation.
            predicate: Optional filter applied before selection.

        Returns: The selected message.

        Raises:
            MessageNotFoundError: Nothing exists at ``ref``.
        """
        if ref is None:
            ref = self.last_non_system_index()
            if ref is None:
                raise MessageNotFoundError(None)

        candidates = await self.candidates(predicate)
        # Slice semantics: an oversized negative ref clamps to the first message.
        selected = candidates[ref:][:1]
        if not selected:
            raise MessageNotFoundError(ref)
        return selected[0]
