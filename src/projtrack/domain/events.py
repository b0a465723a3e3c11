"""Lifecycle events and the outbox relay.

Services record an event through record_event() inside the same
transaction as the change that raised it, so an event exists only if the
change was persisted. EventRelay delivers recorded events to subscribers
afterwards; a failing subscriber never affects the original write.
"""

import dataclasses
import logging
from datetime import date, datetime, UTC
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Optional

from projtrack.database.base import Database
from projtrack.domain.entities import EventKind, OutboxEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[OutboxEvent], None]


def _json_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def entity_payload(entity: Any) -> dict[str, Any]:
    """Flatten a domain dataclass into a JSON-safe dict."""
    return {
        f.name: _json_value(getattr(entity, f.name)) for f in dataclasses.fields(entity)
    }


def record_event(
    db: Database, kind: EventKind, entity: Any, actor_id: Optional[int]
) -> int:
    """Write an event for a domain entity to the outbox.

    Args:
        db: Database instance
        kind: Event kind
        entity: Domain entity (Project, Task, Comment) the event is about
        actor_id: ID of the user who performed the action

    Returns:
        Outbox event ID
    """
    event_id = db.enqueue_event(
        kind=kind,
        entity_type=type(entity).__name__.lower(),
        entity_id=entity.id,
        actor_id=actor_id,
        payload=entity_payload(entity),
    )
    logger.debug("Recorded %s for %s %s", kind.value, type(entity).__name__, entity.id)
    return event_id


class EventRelay:
    """Delivers pending outbox events to subscribed handlers."""

    def __init__(
        self,
        db: Database,
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
    ):
        self.db = db
        self.clock = clock
        self._handlers: list[EventHandler] = []

    def subscribe(self, handler: EventHandler) -> None:
        self._handlers.append(handler)

    def pending(self, limit: Optional[int] = None) -> list[OutboxEvent]:
        return self.db.list_events(pending_only=True, limit=limit)

    def relay(self, limit: int = 100) -> int:
        """Deliver up to limit pending events in the order they were recorded.

        An event is marked delivered only once every handler accepted it. A
        handler exception is logged and counted on the event, which stays
        pending for the next relay run.

        Returns:
            Number of events delivered
        """
        delivered = 0
        for outbox_event in self.pending(limit=limit):
            try:
                for handler in self._handlers:
                    handler(outbox_event)
            except Exception as exc:
                logger.exception(
                    "Delivery of event %s (%s) failed", outbox_event.id, outbox_event.kind.value
                )
                self.db.record_event_failure(outbox_event.id, f"{type(exc).__name__}: {exc}")
                continue
            self.db.mark_event_delivered(outbox_event.id, self.clock())
            delivered += 1
        if delivered:
            logger.info("Relayed %d event(s)", delivered)
        return delivered
