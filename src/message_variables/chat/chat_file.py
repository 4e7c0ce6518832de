"""JSONL chat file persistence."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from message_variables.chat.models import Conversation, Message
from message_variables.exceptions import ChatFileError

LOGGER = logging.getLogger(__name__)


class ChatFile:
    """Read and write a chat stored as JSONL.

    Layout:
        line 1      header object, chat-wide metadata under ``chat_metadata``
        line 2..n   one message object per line
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> Conversation:
        """Parse the chat file into a Conversation."""
        if not self.path.exists():
            raise ChatFileError(f"Chat file not found: {self.path}")

        try:
            lines = self.path.read_text(encoding="utf-8").splitlines()
        except OSError as e:
            raise ChatFileError(f"Failed to read {self.path}: {e}") from e

        rows = []
        for lineno, line in enumerate(lines, start=1):
            if not line.strip():
                continue
            try:
                row = json.loads(line)
            except json.JSONDecodeError as e:
                raise ChatFileError(f"{self.path}:{lineno}: invalid JSON: {e}") from e
            if not isinstance(row, dict):
                raise ChatFileError(f"{self.path}:{lineno}: expected an object")
            rows.append(row)

        if not rows:
            return Conversation()

        header = rows[0]
        metadata = header.pop("chat_metadata", None) or {}
        messages = [Message.from_dict(row) for row in rows[1:]]
        LOGGER.debug("Loaded %d messages from %s", len(messages), self.path)
        return Conversation(messages=messages, metadata=metadata, header=header)

    def save(self, conversation: Conversation) -> None:
        """Write the conversation atomically."""
        header = dict(conversation.header)
        header["chat_metadata"] = conversation.metadata
        lines = [json.dumps(header, ensure_ascii=False)]
        lines.extend(
            json.dumps(message.to_dict(), ensure_ascii=False)
            for message in conversation.messages
        )
        text = "\n".join(lines) + "\n"

        self.path.parent.mkdir(parents=True, exist_ok=True)
        try:
            with tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", delete=False, dir=str(self.path.parent)
            ) as tmp:
                tmp.write(text)
                tmp.flush()
                os.fsync(tmp.fileno())
                tmp_name = tmp.name
            os.replace(tmp_name, self.path)
        except OSError as e:
            raise ChatFileError(f"Failed to write {self.path}: {e}") from e
        LOGGER.debug("Saved %d messages to %s", len(conversation.messages), self.path)
