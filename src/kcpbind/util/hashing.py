"""Deterministic resource names derived from semantic content."""

from __future__ import annotations

import hashlib
from typing import Sequence

from .workspace import WorkspacePath

_BASE36_ALPHABET = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"

HASH_LENGTH: int = 8

# DNS-1123 subdomain limit for object names.
MAX_NAME_LENGTH: int = 253

MAX_BINDING_NAME_PREFIX_LENGTH: int = MAX_NAME_LENGTH - 1 - HASH_LENGTH


def base36_encode(data: bytes) -> str:
    """
    Encode bytes as an upper-case base36 string.

    The input is read as one big-endian integer; every leading zero byte adds
    a leading "0" digit.
    """
    value = int.from_bytes(data, "big")
    digits: list[str] = []
    while value > 0:
        value, rem = divmod(value, 36)
        digits.append(_BASE36_ALPHABET[rem])

    for byte in data:
        if byte != 0:
            break
        digits.append(_BASE36_ALPHABET[0])

    return "".join(reversed(digits))


def hash_name(seed: bytes | str) -> str:
    """Return the 8-character lower-case base36 SHA-224 digest of seed."""
    if isinstance(seed, str):
        seed = seed.encode("utf-8")
    digest = hashlib.sha224(seed).digest()
    return base36_encode(digest).lower()[:HASH_LENGTH]


def placement_name(
    namespace_selector: str,
    location_selectors: Sequence[str],
    location_workspace: WorkspacePath | str,
) -> str:
    """
    Name a placement after the raw selector strings and location workspace.

    Identical inputs always produce the identical name, so re-running the
    command finds the placement it created earlier.
    """
    seed = namespace_selector + ",".join(location_selectors) + str(location_workspace)
    return f"placement-{hash_name(seed)}"


def api_binding_name(workspace: WorkspacePath, export_name: str) -> str:
    """
    Name a binding after its export, suffixed by a hash of the source workspace.

    The export name is truncated so the result never exceeds MAX_NAME_LENGTH.
    """
    prefix = export_name[:MAX_BINDING_NAME_PREFIX_LENGTH]
    return f"{prefix}-{hash_name(workspace.path())}"
