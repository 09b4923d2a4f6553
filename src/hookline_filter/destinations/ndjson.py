from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import List, Optional, TextIO

from hookline_filter.destinations.base import Destination
from hookline_filter.events import Event


class NdjsonDestination(Destination):
    """Writes events as JSON lines to a file (appending), or stdout when path is "-"."""

    def __init__(self, path: str = "-", stream: Optional[TextIO] = None) -> None:
        self._stream = stream
        self._path: Optional[Path] = None
        if stream is None and path != "-":
            self._path = Path(path)
            self._path.parent.mkdir(parents=True, exist_ok=True)

    def send(self, events: List[Event]) -> None:
        lines = "".join(
            json.dumps(e.as_json_dict(), ensure_ascii=False) + "\n" for e in events
        )
        if self._path is not None:
            with self._path.open("a", encoding="utf-8") as f:
                f.write(lines)
            return
        out = self._stream or sys.stdout
        out.write(lines)
        out.flush()
