from __future__ import annotations

import json
from typing import Any, Dict, List, Union

from pydantic import BaseModel, Field

from hookline_filter.paths import FieldPath, parse

PathLike = Union[str, FieldPath]


def _path(path: PathLike) -> FieldPath:
    return path if isinstance(path, FieldPath) else parse(path)


class Event(BaseModel):
    """Event is the mutable record a filter reads from and writes into."""

    data: Dict[str, Any] = Field(default_factory=dict)
    meta: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_json_line(cls, line: str) -> "Event":
        obj = json.loads(line)
        if not isinstance(obj, dict):
            obj = {"message": obj}
        return cls(data=obj)

    def get(self, path: PathLike, default: Any = None) -> Any:
        return _path(path).get(self.data, default)

    def set(self, path: PathLike, value: Any) -> None:
        _path(path).set(self.data, value)

    def includes(self, path: PathLike) -> bool:
        return _path(path).exists(self.data)

    def remove(self, path: PathLike) -> Any:
        return _path(path).delete(self.data)

    @property
    def tags(self) -> List[str]:
        tags = self.data.get("tags")
        if tags is None:
            return []
        if isinstance(tags, list):
            return list(tags)
        return [tags]

    def tag(self, name: str) -> None:
        """Append a tag to the tags field unless it is already present."""
        tags = self.data.get("tags")
        if tags is None:
            self.data["tags"] = [name]
        elif isinstance(tags, list):
            if name not in tags:
                tags.append(name)
        elif tags != name:
            self.data["tags"] = [tags, name]

    def as_json_dict(self) -> Dict[str, Any]:
        """Return a JSON-serializable dictionary of the event fields."""
        return self.model_dump(mode="json")["data"]
