from __future__ import annotations

import pytest

from fake_cloudwatch_logs.app.errors import NotFoundError, ValidationError
from fake_cloudwatch_logs.app.models import LogGroup, LogStream, OutputLogEvent
from fake_cloudwatch_logs.app.store import Store


def _store_with_stream(group_name: str = "g", stream_name: str = "s") -> Store:
    store = Store()
    store.add_groups([LogGroup(log_group_name=group_name)])
    store.add_streams(group_name, [LogStream(log_stream_name=stream_name)])
    return store


def test_add_groups_keeps_insertion_order_without_dedup() -> None:
    store = Store()
    store.add_groups([LogGroup(log_group_name="b"), LogGroup(log_group_name="a")])
    store.add_groups([LogGroup(log_group_name="b")])

    assert [group.log_group_name for group in store.groups()] == ["b", "a", "b"]


def test_add_streams_creates_group_sequence_on_first_use() -> None:
    store = Store()
    assert store.streams("g") is None

    store.add_streams("g", [LogStream(log_stream_name="one")])
    store.add_streams("g", [LogStream(log_stream_name="two")])

    assert [stream.log_stream_name for stream in store.streams("g") or []] == ["one", "two"]


def test_append_events_sorts_and_derives_stream_timestamps() -> None:
    store = _store_with_stream()

    store.append_events(
        "g",
        "s",
        [OutputLogEvent(timestamp=ts, message=str(ts)) for ts in (50, 10, 30)],
    )

    assert [event.timestamp for event in store.events("g", "s") or []] == [10, 30, 50]
    stream = store.find_stream("g", "s")
    assert stream.first_event_timestamp == 10
    assert stream.last_event_timestamp == 50
    # Ingestion time tracks the newest event timestamp rather than wall-clock time.
    assert stream.last_ingestion_time == 50


def test_append_events_resorts_across_batches() -> None:
    store = _store_with_stream()
    store.append_events("g", "s", [OutputLogEvent(timestamp=40)])
    store.append_events("g", "s", [OutputLogEvent(timestamp=5), OutputLogEvent(timestamp=60)])

    assert [event.timestamp for event in store.events("g", "s") or []] == [5, 40, 60]
    stream = store.find_stream("g", "s")
    assert (stream.first_event_timestamp, stream.last_event_timestamp) == (5, 60)


def test_events_without_timestamp_sort_last_and_keep_relative_order() -> None:
    store = _store_with_stream()
    store.append_events(
        "g",
        "s",
        [
            OutputLogEvent(message="no-ts-1"),
            OutputLogEvent(timestamp=20, message="20"),
            OutputLogEvent(message="no-ts-2"),
            OutputLogEvent(timestamp=10, message="10"),
        ],
    )

    messages = [event.message for event in store.events("g", "s") or []]
    assert messages == ["10", "20", "no-ts-1", "no-ts-2"]
    assert store.find_stream("g", "s").first_event_timestamp == 10


def test_append_empty_events_fails_without_changing_stream() -> None:
    store = _store_with_stream()
    store.append_events("g", "s", [OutputLogEvent(timestamp=7)])

    with pytest.raises(ValidationError):
        store.append_events("g", "s", [])

    stream = store.find_stream("g", "s")
    assert (stream.first_event_timestamp, stream.last_event_timestamp) == (7, 7)
    assert stream.last_ingestion_time == 7
    assert len(store.events("g", "s") or []) == 1


def test_append_to_unregistered_stream_fails_atomically() -> None:
    store = _store_with_stream()

    with pytest.raises(NotFoundError, match="could not find stream: missing"):
        store.append_events("g", "missing", [OutputLogEvent(timestamp=1)])
    with pytest.raises(NotFoundError, match="could not find streams for: other"):
        store.append_events("other", "s", [OutputLogEvent(timestamp=1)])

    assert store.events("g", "missing") is None
    assert store.stream_keys() == []


def test_duplicate_stream_names_resolve_to_first_registration() -> None:
    store = Store()
    store.add_streams("g", [LogStream(log_stream_name="s", arn="first")])
    store.add_streams("g", [LogStream(log_stream_name="s", arn="second")])

    store.append_events("g", "s", [OutputLogEvent(timestamp=3)])

    first, second = store.streams("g") or []
    assert first.arn == "first"
    assert first.last_event_timestamp == 3
    assert second.last_event_timestamp is None


def test_counts_cover_all_collections() -> None:
    store = _store_with_stream()
    store.append_events("g", "s", [OutputLogEvent(timestamp=1), OutputLogEvent(timestamp=2)])

    assert store.counts() == {"groups": 1, "streams": 1, "events": 2}
    assert store.stream_keys() == [("g", "s")]
    assert store.group_names_with_streams() == ["g"]


def test_stream_snapshots_do_not_change_after_later_appends() -> None:
    store = _store_with_stream()
    store.append_events("g", "s", [OutputLogEvent(timestamp=10)])
    listed = (store.streams("g") or [])[0]
    found = store.find_stream("g", "s")

    returned = store.append_events("g", "s", [OutputLogEvent(timestamp=99)])
    returned.last_event_timestamp = -1

    assert listed.last_event_timestamp == 10
    assert found.last_event_timestamp == 10
    assert store.find_stream("g", "s").last_event_timestamp == 99
