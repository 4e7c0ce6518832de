"""JSON codec for indexed access into stored variable values."""

from __future__ import annotations

import copy
import json
import logging
import math
from typing import Any

from message_variables.exceptions import ValueCodecError

LOGGER = logging.getLogger(__name__)

Index = str | int | float


def dumps(value: Any) -> str:
    """Compact JSON, non-ASCII kept as-is."""
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def numeric_index(index: Index) -> int | None:
    """Return the list position an index addresses, or None for an object key.

    ``"3"`` and ``3`` address position 3. Anything that does not parse as a
    non-negative whole number is an object key.
    """
    if isinstance(index, bool):
        return None
    if isinstance(index, int):
        return index if index >= 0 else None
    if isinstance(index, float):
        return int(index) if index.is_integer() and index >= 0 else None
    text = str(index).strip()
    if not text or "_" in text:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    if not math.isfinite(number) or not number.is_integer() or number < 0:
        return None
    return int(number)


def _parse_existing(key: str, raw: Any, index: Index) -> Any:
    if raw is None:
        return None
    if isinstance(raw, (dict, list)):
        return copy.deepcopy(raw)
    if not isinstance(raw, str):
        raise ValueCodecError(key, index, f"stored value {raw!r} is not a container")
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValueCodecError(key, index, f"stored value is not JSON ({e})") from e


def encode_for_indexed_write(
    key: str,
    existing_raw: Any,
    index: Index | None,
    new_value: Any,
) -> Any:
    """Return the value to store for ``key`` after writing ``new_value`` at ``index``.

    Composite values are always stored as compact JSON text.
    """
    if index is None:
        if isinstance(new_value, (dict, list)):
            return dumps(new_value)
        return new_value

    container = _parse_existing(key, existing_raw, index)
    position = numeric_index(index)

    if container is None:
        container = [] if position is not None else {}

    if isinstance(container, dict):
        container[str(index) if position is None else str(position)] = new_value
    elif isinstance(container, list):
        if position is None:
            raise ValueCodecError(key, index, "list values need a numeric index")
        if position >= len(container):
            container.extend([None] * (position + 1 - len(container)))
        container[position] = new_value
    else:
        raise ValueCodecError(key, index, f"stored value {container!r} is not a container")

    return dumps(container)


def decode_for_indexed_read(raw: Any, index: Index | None) -> Any:
    """Project ``raw[index]``; composites come back as JSON strings.

    A stored value that is not valid JSON is returned undecoded.
    """
    if index is None:
        return raw

    if isinstance(raw, (dict, list)):
        parsed = raw
    else:
        try:
            parsed = json.loads(raw)
        except (TypeError, json.JSONDecodeError):
            LOGGER.debug("Stored value is not JSON, returning it undecoded")
            return raw

    position = numeric_index(index)
    if isinstance(parsed, list):
        if position is None or position >= len(parsed):
            return None
        value = parsed[position]
    elif isinstance(parsed, dict):
        value = parsed.get(str(index) if position is None else str(position))
    else:
        return None

    if isinstance(value, (dict, list)):
        return dumps(value)
    return value


def coerce_scalar(value: Any) -> Any:
    """Read-boundary conversion used by get-message-variable.

    Numeric strings become numbers, missing values and ``""`` become ``""``,
    composites become JSON strings. Everything else is returned as-is.
    """
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        return dumps(value)
    if isinstance(value, (bool, int, float)):
        return value
    text = str(value)
    if not text.strip() or "_" in text:
        return text
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return text
    if math.isnan(number):
        return text
    if number.is_integer() and math.isfinite(number):
        return int(number)
    return number
