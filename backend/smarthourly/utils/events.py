"""
In-process event bus (Observer Pattern).

Entry lifecycle transitions are published here; the default LoggingHandler
writes them to the application log so every status change leaves a trace.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, List, Optional, Type


logger = logging.getLogger("smarthourly.audit")


@dataclass
class DomainEvent:
    entity_type: str
    entity_id: Optional[int]
    user_id: Optional[int] = None
    occurred_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class EntryRecordedEvent(DomainEvent):
    operator_status: str = ""
    time_slot: str = ""
    line: str = ""


@dataclass
class EntryStatusChangedEvent(DomainEvent):
    old_status: str = ""
    new_status: str = ""
    note: Optional[str] = None


@dataclass
class EntryEditedEvent(DomainEvent):
    changed_fields: List[str] = field(default_factory=list)


@dataclass
class RoleChangedEvent(DomainEvent):
    old_role: Optional[str] = None
    new_role: str = ""


Handler = Callable[[DomainEvent], None]


class EventBus:
    def __init__(self) -> None:
        self._handlers: Dict[Type[DomainEvent], List[Handler]] = {}

    def subscribe(self, event_type: Type[DomainEvent], handler: Handler) -> None:
        self._handlers.setdefault(event_type, []).append(handler)

    def clear(self) -> None:
        self._handlers.clear()

    def publish(self, event: DomainEvent) -> None:
        for event_type, handlers in self._handlers.items():
            if not isinstance(event, event_type):
                continue
            for handler in handlers:
                try:
                    handler(event)
                except Exception:
                    # a failing observer must not undo a committed transition
                    logger.exception("event_handler_failed event=%s", type(event).__name__)


class LoggingHandler:
    def __call__(self, event: DomainEvent) -> None:
        payload = {k: v for k, v in vars(event).items() if k != "occurred_at"}
        logger.info("%s %s", type(event).__name__, " ".join(f"{k}={v}" for k, v in payload.items()))


_bus = EventBus()


def get_event_bus() -> EventBus:
    return _bus


def configure_event_bus() -> EventBus:
    _bus.clear()
    _bus.subscribe(DomainEvent, LoggingHandler())
    return _bus
