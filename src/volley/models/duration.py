"""Duration parsing for suite timeouts and retry intervals.

Accepts plain numbers (seconds) and Go-style duration strings such as
``"500ms"``, ``"2s"`` or ``"1m30s"``.
"""

from __future__ import annotations

import re
from typing import Any

_UNIT_SECONDS: dict[str, float] = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}

_COMPONENT = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")


def parse_duration(value: Any) -> float:
    """Convert a duration value to seconds.

    Raises:
        ValueError: If the value is negative or not a recognized duration.
    """
    if value is None:
        return 0.0
    if isinstance(value, bool):
        raise ValueError(f"invalid duration: {value!r}")
    if isinstance(value, (int, float)):
        seconds = float(value)
    elif isinstance(value, str):
        seconds = _parse_duration_string(value.strip())
    else:
        raise ValueError(f"invalid duration: {value!r}")

    if seconds < 0:
        raise ValueError(f"duration must not be negative: {value!r}")
    return seconds


def _parse_duration_string(text: str) -> float:
    if not text:
        return 0.0
    try:
        return float(text)
    except ValueError:
        pass

    pos = 0
    total = 0.0
    for match in _COMPONENT.finditer(text):
        if match.start() != pos:
            break
        total += float(match.group(1)) * _UNIT_SECONDS[match.group(2)]
        pos = match.end()

    if pos != len(text) or pos == 0:
        raise ValueError(f"invalid duration: {text!r}")
    return total
