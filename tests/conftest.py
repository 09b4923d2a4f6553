"""
Shared pytest fixtures.

HTTP is never performed for real: filters get a StubTransport that records
each call and answers with a canned (status, headers, body) tuple.
"""

from typing import Any, Dict, List, Optional, Tuple

import pytest

from hookline_filter.events import Event
from hookline_filter.filter import HttpFilter


class StubTransport:
    def __init__(
        self,
        response: Tuple[int, Dict[str, str], str] = (200, {}, "Bom dia"),
        error: Optional[Exception] = None,
    ) -> None:
        self.response = response
        self.error = error
        self.calls: List[Tuple[str, str, Dict[str, Any]]] = []

    def __call__(self, method: str, url: str, options: Dict[str, Any]):
        self.calls.append((method, url, options))
        if self.error is not None:
            raise self.error
        return self.response

    @property
    def last(self) -> Tuple[str, str, Dict[str, Any]]:
        return self.calls[-1]


@pytest.fixture
def transport() -> StubTransport:
    return StubTransport()


@pytest.fixture
def make_filter(transport):
    def _make(**options: Any) -> HttpFilter:
        return HttpFilter(options, transport=transport)

    return _make


@pytest.fixture
def event() -> Event:
    return Event(data={"message": "test"})
