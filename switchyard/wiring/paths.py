"""Dotted-path access, emptiness, and hashing helpers for tenant records."""

import hashlib
import json
from typing import Any, Final

from switchyard.wiring.exceptions import PathConflictError


class _Missing:
    """Sentinel for a path that does not exist in a record."""

    _instance: "_Missing | None" = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Final = _Missing()

PREVIEW_MAX_CHARS = 30


def get_path(record: Any, path: str) -> Any:
    """Walk a dotted path through nested dicts and lists.

    Numeric segments index into lists. Returns MISSING when any segment
    is absent; an explicit ``None`` stored at the path is returned as-is.
    """
    if not path:
        return MISSING
    current = record
    for part in path.split("."):
        if isinstance(current, dict):
            if part not in current:
                return MISSING
            current = current[part]
        elif isinstance(current, list) and part.isdigit():
            index = int(part)
            if index >= len(current):
                return MISSING
            current = current[index]
        else:
            return MISSING
    return current


def conflicting_ancestor(record: dict[str, Any], path: str) -> str | None:
    """First ancestor of a path that is present but not a dict, if any.

    Writing the path would have to replace that ancestor, so callers that
    only add data must skip it.
    """
    parts = path.split(".")
    current: Any = record
    for i, part in enumerate(parts[:-1]):
        if part not in current:
            return None
        current = current[part]
        if not isinstance(current, dict):
            return ".".join(parts[: i + 1])
    return None


def set_path(record: dict[str, Any], path: str, value: Any) -> None:
    """Set a dotted path, creating missing intermediate dicts.

    Raises:
        PathConflictError: If an intermediate is present and not a dict
    """
    ancestor = conflicting_ancestor(record, path)
    if ancestor is not None:
        raise PathConflictError(path, ancestor)
    parts = path.split(".")
    current = record
    for part in parts[:-1]:
        current = current.setdefault(part, {})
    current[parts[-1]] = value


def is_empty(value: Any) -> bool:
    """Whether a value counts as "not set".

    None, MISSING, blank strings, and zero-length collections are empty.
    ``False`` and ``0`` are legitimate values and are not empty.
    """
    if value is None or value is MISSING:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set, frozenset, dict)):
        return len(value) == 0
    return False


def canonical_json(value: Any) -> str:
    """Deterministic JSON used for every hash."""
    return json.dumps(value, sort_keys=True, separators=(",", ":"), default=str)


def content_hash(value: Any, length: int = 16) -> str:
    """Short SHA-256 hex digest of a value's canonical JSON."""
    return hashlib.sha256(canonical_json(value).encode()).hexdigest()[:length]


def hash_value(value: Any) -> str:
    """Hash of a read value for trace events; full values are never logged."""
    if value is None or value is MISSING:
        return "null"
    text = value if isinstance(value, str) else canonical_json(value)
    return "sha256:" + hashlib.sha256(text.encode()).hexdigest()[:12]


def value_preview(value: Any) -> str:
    """Short, log-safe rendering of a value."""
    if value is MISSING:
        return "undefined"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        if len(value) > PREVIEW_MAX_CHARS:
            return f'"{value[:PREVIEW_MAX_CHARS]}..."'
        return f'"{value}"'
    if isinstance(value, (list, tuple)):
        return f"[{len(value)} items]"
    if isinstance(value, dict):
        return f"{{{len(value)} keys}}"
    return str(value)[:PREVIEW_MAX_CHARS]


def config_hash(record: dict[str, Any] | None) -> str:
    """Hash of a tenant's agent settings, used to correlate a call's events."""
    settings = (record or {}).get("aiAgentSettings") or {}
    if not isinstance(settings, dict):
        settings = {}
    return "sha256:" + content_hash(settings, length=16)
