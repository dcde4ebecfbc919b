"""Event outbox for the ordering context.

Aggregates only record events. After a handler has persisted the aggregate,
it calls ``collect()`` so the events are queued; a dispatcher picks them up
with ``drain()`` once the write is known to have happened. Events are never
dispatched from inside a state transition.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable

import structlog

logger = structlog.get_logger(__name__)


class EventOutbox(ABC):
    @abstractmethod
    def collect(self, aggregate) -> list:
        """Drain the aggregate's recorded events into the outbox."""
        ...

    @abstractmethod
    def drain(self) -> list:
        """Hand every queued event to the dispatcher and empty the queue."""
        ...


class InMemoryOutbox(EventOutbox):
    """Queues events in memory and optionally forwards them on drain.

    Args:
        dispatcher: Called once per event during ``drain()``. When omitted,
            drained events are only returned to the caller.
    """

    def __init__(self, dispatcher: Callable | None = None) -> None:
        self.dispatcher = dispatcher
        self.pending: list = []

    def collect(self, aggregate) -> list:
        events = aggregate.drain_events()
        self.pending.extend(events)
        if events:
            logger.debug(
                "Events collected",
                aggregate_id=str(aggregate.id),
                events=[event.__class__.__name__ for event in events],
            )
        return events

    def drain(self) -> list:
        events, self.pending = self.pending, []
        if self.dispatcher is not None:
            for event in events:
                self.dispatcher(event)
        return events
