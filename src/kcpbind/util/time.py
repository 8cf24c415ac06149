from __future__ import annotations

import re

_UNIT_SECONDS: dict[str, float] = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}

_PART_RE = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")


def parse_duration(value: str) -> float:
    """
    Parse a Go-style duration string into seconds.

    Accepts strings like:
      - 30s
      - 1m30s
      - 500ms
      - 1.5h
      - 0
    """
    if not isinstance(value, str) or not value.strip():
        raise ValueError("duration must be a non-empty string")

    s = value.strip()
    sign = 1.0
    if s[0] in "+-":
        sign = -1.0 if s[0] == "-" else 1.0
        s = s[1:]

    if s == "0":
        return 0.0

    total = 0.0
    pos = 0
    while pos < len(s):
        m = _PART_RE.match(s, pos)
        if m is None:
            raise ValueError(f"invalid duration: {value!r}")
        total += float(m.group(1)) * _UNIT_SECONDS[m.group(2)]
        pos = m.end()

    if pos == 0:
        raise ValueError(f"invalid duration: {value!r}")
    return sign * total


def format_duration(seconds: float) -> str:
    """Format seconds compactly, e.g. 90.0 -> '1m30s'."""
    if seconds < 1:
        return f"{round(seconds * 1000)}ms"
    minutes, secs = divmod(seconds, 60)
    if minutes < 1:
        return f"{secs:g}s"
    hours, minutes = divmod(int(minutes), 60)
    out = f"{hours}h" if hours else ""
    return f"{out}{minutes}m{secs:g}s"
