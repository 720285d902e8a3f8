"""
Tests for the watchdog event adapter.
"""

from watchdog.events import (
    DirCreatedEvent,
    FileCreatedEvent,
    FileDeletedEvent,
    FileModifiedEvent,
    FileMovedEvent,
)

from fidruawatch.watchdog.events import EventType
from fidruawatch.watchdog.handlers import UploadEventHandler, convert_event


def test_convert_created():
    event = convert_event(FileCreatedEvent("/uploads/a.mp4"))
    assert event.event_type is EventType.CREATED
    assert event.paths == ["/uploads/a.mp4"]
    assert event.is_directory is False


def test_convert_directory():
    event = convert_event(DirCreatedEvent("/uploads/new"))
    assert event.event_type is EventType.CREATED
    assert event.is_directory is True


def test_convert_modified_and_deleted():
    assert convert_event(FileModifiedEvent("/u/a.mp4")).event_type is EventType.MODIFIED
    assert convert_event(FileDeletedEvent("/u/a.mp4")).event_type is EventType.DELETED


def test_convert_moved_keeps_both_paths():
    event = convert_event(FileMovedEvent("/u/a.part", "/u/a.mp4"))
    assert event.event_type is EventType.MOVED
    assert event.paths == ["/u/a.part", "/u/a.mp4"]


def test_convert_bytes_path():
    event = convert_event(FileCreatedEvent(b"/uploads/a.mp4"))
    assert event.paths == ["/uploads/a.mp4"]


def test_handler_forwards_events():
    received = []
    handler = UploadEventHandler(received.append)
    handler.on_any_event(FileCreatedEvent("/uploads/a.mp4"))

    assert [e.paths for e in received] == [["/uploads/a.mp4"]]
    assert handler.get_stats()["events_received"] == 1


def test_handler_survives_callback_errors():
    def broken(event):
        raise RuntimeError("boom")

    handler = UploadEventHandler(broken)
    handler.on_any_event(FileCreatedEvent("/uploads/a.mp4"))
    handler.on_any_event(FileCreatedEvent("/uploads/b.mp4"))

    stats = handler.get_stats()
    assert stats["events_received"] == 2
    assert stats["errors"] == 2
