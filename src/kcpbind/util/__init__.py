from .hashing import (
    MAX_BINDING_NAME_PREFIX_LENGTH,
    MAX_NAME_LENGTH,
    api_binding_name,
    base36_encode,
    hash_name,
    placement_name,
)
from .time import format_duration, parse_duration
from .workspace import WorkspacePath, is_valid_workspace, split_export

__all__ = [
    "MAX_NAME_LENGTH",
    "MAX_BINDING_NAME_PREFIX_LENGTH",
    "base36_encode",
    "hash_name",
    "placement_name",
    "api_binding_name",
    "WorkspacePath",
    "is_valid_workspace",
    "split_export",
    "parse_duration",
    "format_duration",
]
