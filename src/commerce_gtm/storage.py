"""Event sinks for finalized data layer payloads.

The tracker only depends on :meth:`EventStorage.add_event`.  Delivering the
queued events to the browser is left to the host.
"""

from __future__ import annotations

import abc
import logging
from typing import Any, Dict, List

from commerce_gtm.events import GTMEventPayload

logger = logging.getLogger(__name__)


class EventStorage(abc.ABC):
    """Append-only queue of data layer events."""

    @abc.abstractmethod
    def add_event(self, payload: GTMEventPayload) -> None:
        """Queue one finalized payload.  No acknowledgement, no retry."""


class InMemoryEventStorage(EventStorage):
    """Bounded in-process buffer of serialized data layer events."""

    def __init__(self, max_buffer_size: int = 1000):
        if max_buffer_size < 1:
            raise ValueError("max_buffer_size must be at least 1")
        self.max_buffer_size = max_buffer_size
        self._buffer: List[Dict[str, Any]] = []

    def add_event(self, payload: GTMEventPayload) -> None:
        if len(self._buffer) >= self.max_buffer_size:
            dropped = self._buffer.pop(0)
            logger.warning(
                "Buffer full (%d); dropping oldest event %s",
                self.max_buffer_size,
                dropped.get("event", "?"),
            )
        self._buffer.append(payload.to_data_layer())
        logger.debug("Queued %s event", payload.event)

    def get_events(self) -> List[Dict[str, Any]]:
        return list(self._buffer)

    def flush(self) -> List[Dict[str, Any]]:
        """Return the queued events and clear the buffer."""
        events, self._buffer = self._buffer, []
        return events

    def __len__(self) -> int:
        return len(self._buffer)
