"""Append-only event log recording each workflow step."""

from __future__ import annotations

import json
import logging
from typing import Callable, Iterator, List, Tuple

from .contracts import LogEvent

logger = logging.getLogger(__name__)

EventListener = Callable[[int, LogEvent], None]


class EventLog:
    """Ordered sequence of :class:`LogEvent` records.

    Events are appended in ``pending`` state when a step's call is issued and
    replaced at the same index once the call completes. Nothing is ever
    removed or reordered, so the log always reflects call order even when
    completions arrive out of order.
    """

    def __init__(self) -> None:
        self._events: List[LogEvent] = []
        self._listeners: List[EventListener] = []

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[LogEvent]:
        return iter(tuple(self._events))

    def __getitem__(self, index: int) -> LogEvent:
        return self._events[index]

    # ------------------------------------------------------------------
    def add_listener(self, listener: EventListener) -> None:
        """Register a callable invoked after every append or update."""
        self._listeners.append(listener)

    def append(self, event: LogEvent) -> int:
        """Append ``event`` and return its index."""
        self._events.append(event)
        index = len(self._events) - 1
        logger.debug(f"Logged {event.method.value} at index {index}")
        self._notify(index, event)
        return index

    def update(self, index: int, event: LogEvent) -> None:
        """Replace the event stored at ``index`` with its finalized form."""
        if not 0 <= index < len(self._events):
            raise IndexError(f"No event at index {index}")
        current = self._events[index]
        if current.method != event.method:
            raise ValueError(
                f"Cannot replace {current.method.value} event with {event.method.value}"
            )
        self._events[index] = event
        logger.debug(f"Updated {event.method.value} at index {index} to {event.result.value}")
        self._notify(index, event)

    def snapshot(self) -> Tuple[LogEvent, ...]:
        """Immutable view of the events in call order."""
        return tuple(self._events)

    def pending(self) -> List[LogEvent]:
        return [event for event in self._events if not event.is_finished]

    def to_json(self) -> str:
        """Serialize the log to a JSON array."""
        return json.dumps([event.model_dump(mode="json") for event in self._events])

    def _notify(self, index: int, event: LogEvent) -> None:
        for listener in self._listeners:
            try:
                listener(index, event)
            except Exception:
                logger.exception(f"Event log listener {listener!r} failed")
