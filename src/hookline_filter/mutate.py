from __future__ import annotations

import copy
from typing import Any, Dict, Mapping, Optional, Sequence

from hookline_common.errors import FieldPathError
from hookline_common.logging import setup_logging
from hookline_filter.events import Event
from hookline_filter.options import FilterConfig
from hookline_filter.paths import FieldPath
from hookline_filter.response import DecodeResult

log = setup_logging("hookline.filter")


class EventMutator:
    """Writes a decoded response, the fallback, or failure tags into an event."""

    def __init__(
        self,
        target: FieldPath,
        fallback: Optional[Mapping[str, Any]] = None,
        failure_tags: Sequence[str] = (),
        headers_target: Optional[FieldPath] = None,
    ) -> None:
        self.target = target
        self.fallback = fallback
        self.failure_tags = tuple(failure_tags)
        self.headers_target = headers_target

    @classmethod
    def from_config(cls, config: FilterConfig) -> "EventMutator":
        return cls(
            target=config.target,
            fallback=config.fallback,
            failure_tags=config.tag_on_request_failure,
            headers_target=config.headers_target,
        )

    def apply(
        self,
        event: Event,
        result: DecodeResult,
        response_headers: Optional[Mapping[str, Any]] = None,
    ) -> Event:
        try:
            if not result.failed:
                if not self._writable(event, response_headers):
                    raise FieldPathError(f"cannot write response into {self.target}")
                event.set(self.target, result.value)
                if self.headers_target is not None and response_headers is not None:
                    event.set(self.headers_target, _headers_dict(response_headers))
                return event

            if self.fallback is not None:
                event.set(self.target, copy.deepcopy(dict(self.fallback)))
                return event
        except FieldPathError as e:
            log.warning("target_write_failed target=%s reason=%s", self.target, e)

        for name in self.failure_tags:
            event.tag(name)
        return event

    def _writable(
        self, event: Event, response_headers: Optional[Mapping[str, Any]]
    ) -> bool:
        if not self.target.writable(event.data):
            return False
        if self.headers_target is not None and response_headers is not None:
            return self.headers_target.writable(event.data)
        return True


def _headers_dict(headers: Mapping[str, Any]) -> Dict[str, Any]:
    return {str(k): v for k, v in headers.items()}
