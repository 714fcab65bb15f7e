from smarthourly.utils.events import (
    DomainEvent,
    EntryRecordedEvent,
    EntryStatusChangedEvent,
    EventBus,
)


def test_handlers_receive_subclass_events():
    bus = EventBus()
    all_events, status_events = [], []
    bus.subscribe(DomainEvent, all_events.append)
    bus.subscribe(EntryStatusChangedEvent, status_events.append)

    bus.publish(EntryRecordedEvent(entity_type="production_entry", entity_id=1))
    bus.publish(EntryStatusChangedEvent(entity_type="production_entry", entity_id=1, new_status="approved"))

    assert len(all_events) == 2
    assert len(status_events) == 1


def test_failing_handler_does_not_block_others():
    bus = EventBus()
    seen = []

    def broken(event):
        raise RuntimeError("boom")

    bus.subscribe(DomainEvent, broken)
    bus.subscribe(DomainEvent, seen.append)
    bus.publish(EntryRecordedEvent(entity_type="production_entry", entity_id=2))
    assert len(seen) == 1
