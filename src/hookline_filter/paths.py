"""
Field references into nested event data.

Two spellings are accepted and mean the same thing:

  [nested][items][0][name]
  nested.items[0].name

A bare name (``message``) is a single-part path. Numeric parts index into
sequences when the container at that position is a list, and are plain
mapping keys otherwise.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, List, Mapping, Tuple

from hookline_common.errors import FieldPathError

_BRACKETED = re.compile(r"^(?:\[[^\[\]]+\])+$")
_BRACKET_PART = re.compile(r"\[([^\[\]]+)\]")
_DOTTED_SEGMENT = re.compile(r"^([^\[\]]*)((?:\[-?\d+\])*)$")
_INDEX = re.compile(r"^-?\d+$")

_MISSING = object()


def _as_index(part: str, size: int) -> int | None:
    if not _INDEX.match(part):
        return None
    idx = int(part)
    if idx < 0:
        idx += size
    return idx


@dataclass(frozen=True)
class FieldPath:
    """A parsed, immutable reference to a location inside an event."""

    text: str
    parts: Tuple[str, ...]

    def __str__(self) -> str:
        return self.text

    def lookup(self, data: Any) -> Any:
        """Return the value at this path, or the internal missing sentinel."""
        current = data
        for part in self.parts:
            if isinstance(current, Mapping):
                if part not in current:
                    return _MISSING
                current = current[part]
            elif isinstance(current, list):
                idx = _as_index(part, len(current))
                if idx is None or not 0 <= idx < len(current):
                    return _MISSING
                current = current[idx]
            else:
                return _MISSING
        return current

    def get(self, data: Any, default: Any = None) -> Any:
        value = self.lookup(data)
        return default if value is _MISSING else value

    def exists(self, data: Any) -> bool:
        return self.lookup(data) is not _MISSING

    def set(self, data: Dict[str, Any], value: Any) -> None:
        """
        Write value at this path, creating intermediate mappings as needed.

        Raises FieldPathError without touching data when an existing value on
        the way is a scalar or a list index is out of range.
        """
        current: Any = data
        for i, part in enumerate(self.parts):
            last = i == len(self.parts) - 1
            if isinstance(current, list):
                idx = _as_index(part, len(current))
                if idx is None or not 0 <= idx <= len(current):
                    raise FieldPathError(
                        f"cannot write {self.text!r}: index {part!r} is not valid "
                        f"for a list of length {len(current)}"
                    )
                if last:
                    if idx == len(current):
                        current.append(value)
                    else:
                        current[idx] = value
                    return
                if idx == len(current):
                    current.append({})
                nxt = current[idx]
            elif isinstance(current, dict):
                if last:
                    current[part] = value
                    return
                nxt = current.get(part, _MISSING)
                if nxt is _MISSING or nxt is None:
                    nxt = {}
                    current[part] = nxt
            else:
                raise FieldPathError(
                    f"cannot write {self.text!r}: "
                    f"{'/'.join(self.parts[:i]) or '<root>'} holds a {type(current).__name__}"
                )
            current = nxt

    def writable(self, data: Any) -> bool:
        """True when set() would succeed on data as it is now."""
        current = data
        for i, part in enumerate(self.parts):
            last = i == len(self.parts) - 1
            if isinstance(current, list):
                idx = _as_index(part, len(current))
                if idx is None or not 0 <= idx <= len(current):
                    return False
                if last or idx == len(current):
                    return True
                current = current[idx]
            elif isinstance(current, dict):
                if last:
                    return True
                current = current.get(part)
                if current is None:
                    return True
            else:
                return False
        return True

    def overlaps(self, other: "FieldPath") -> bool:
        """True when one path is the other or lies inside it."""
        n = min(len(self.parts), len(other.parts))
        return self.parts[:n] == other.parts[:n]

    def delete(self, data: Any) -> Any:
        """Remove and return the value at this path; None when absent."""
        parent = FieldPath(self.text, self.parts[:-1]).lookup(data)
        key = self.parts[-1]
        if isinstance(parent, dict):
            return parent.pop(key, None)
        if isinstance(parent, list):
            idx = _as_index(key, len(parent))
            if idx is not None and 0 <= idx < len(parent):
                return parent.pop(idx)
        return None


def _split(text: str) -> List[str]:
    if text.startswith("["):
        if not _BRACKETED.match(text):
            raise FieldPathError(f"malformed field reference: {text!r}")
        return [p.strip() for p in _BRACKET_PART.findall(text)]

    parts: List[str] = []
    for segment in text.split("."):
        m = _DOTTED_SEGMENT.match(segment)
        if not m or not (m.group(1) or m.group(2)):
            raise FieldPathError(f"malformed field reference: {text!r}")
        if m.group(1):
            parts.append(m.group(1))
        parts.extend(_BRACKET_PART.findall(m.group(2)))
    return parts


@lru_cache(maxsize=4096)
def parse(text: str) -> FieldPath:
    """Parse a field reference. Results are cached and shared read-only."""
    if not isinstance(text, str) or not text.strip():
        raise FieldPathError("field reference must be a non-empty string")
    cleaned = text.strip()
    parts = _split(cleaned)
    if not parts or any(not p for p in parts):
        raise FieldPathError(f"malformed field reference: {text!r}")
    return FieldPath(cleaned, tuple(parts))
