from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import List, Optional, TextIO

from hookline_filter.events import Event
from hookline_filter.sources.base import Source

JSON_PARSE_FAILURE_TAG = "_jsonparsefailure"


class NdjsonSource(Source):
    """
    Reads one JSON object per line from a file, or stdin when path is "-".

    Lines that are not valid JSON become {"message": <line>} tagged
    _jsonparsefailure. Non-object JSON values land under "message".
    """

    def __init__(self, path: str = "-", stream: Optional[TextIO] = None) -> None:
        self._path = path
        self._fh: Optional[TextIO] = stream
        self._owns_fh = False

    def _open_if_needed(self) -> TextIO:
        if self._fh is not None:
            return self._fh
        if self._path == "-":
            self._fh = sys.stdin
        else:
            p = Path(self._path)
            if not p.exists():
                raise FileNotFoundError(f"ndjson source path not found: {p}")
            self._fh = p.open("r", encoding="utf-8")
            self._owns_fh = True
        return self._fh

    def poll(self, max_events: int) -> List[Event]:
        fh = self._open_if_needed()
        out: List[Event] = []
        while len(out) < max_events:
            line = fh.readline()
            if not line:
                break
            line = line.rstrip("\r\n")
            if not line.strip():
                continue
            out.append(_parse_line(line))
        return out

    def close(self) -> None:
        if self._fh is not None and self._owns_fh:
            try:
                self._fh.close()
            finally:
                self._fh = None


def _parse_line(line: str) -> Event:
    try:
        return Event.from_json_line(line)
    except json.JSONDecodeError:
        return Event(data={"message": line, "tags": [JSON_PARSE_FAILURE_TAG]})
