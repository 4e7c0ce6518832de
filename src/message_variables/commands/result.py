"""Command result dataclass."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class CommandResult:
    """Result from a command execution."""

    command: str
    success: bool
    result: Any  # pipe value
    error: str | None = None
