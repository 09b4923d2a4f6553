from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List

from hookline_filter.events import Event


class Destination(ABC):
    """A destination delivers filtered events."""

    @abstractmethod
    def send(self, events: List[Event]) -> None:
        """Send a batch of events."""
        raise NotImplementedError

    def close(self) -> None:
        return None
