"""Settings for message variable mirroring."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path

import yaml

from message_variables.exceptions import MessageVariableError

LOGGER = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 0.5
DEFAULT_SAVE_DELAY = 1.0


@dataclass
class Settings:
    """Shared, mutable settings handle.

    Loaded once at startup and read on every operation, so toggling
    ``mirror_latest_to_metadata`` takes effect on the next write or poll.
    """

    mirror_latest_to_metadata: bool = True
    poll_interval: float = DEFAULT_POLL_INTERVAL
    save_delay: float = DEFAULT_SAVE_DELAY

    @classmethod
    def from_dict(cls, data: dict) -> "Settings":
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    def to_dict(self) -> dict:
        return asdict(self)


class SettingsStore:
    """YAML-backed persistence for Settings."""

    def __init__(self, path: Path = Path("data/settings.yaml")) -> None:
        self.path = Path(path)

    def load(self) -> Settings:
        if not self.path.exists():
            LOGGER.debug("No settings at %s, using defaults", self.path)
            return Settings()
        with open(self.path, encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise MessageVariableError(f"Failed to parse settings {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise MessageVariableError(f"Invalid settings format in {self.path}, expected mapping")
        return Settings.from_dict(data)

    def save(self, settings: Settings) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            yaml.safe_dump(settings.to_dict(), f, sort_keys=False)
        LOGGER.info("Saved settings to %s", self.path)
