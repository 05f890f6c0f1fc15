"""In-memory store of log groups, streams and events."""

from __future__ import annotations

import threading
from collections.abc import Iterable

from fake_cloudwatch_logs.app.errors import NotFoundError, ValidationError
from fake_cloudwatch_logs.app.models import LogGroup, LogStream, OutputLogEvent


def _event_sort_key(event: OutputLogEvent) -> tuple[bool, int]:
    # Events without a timestamp sort after every timestamped event.
    if not event.timestamp:
        return (True, 0)
    return (False, event.timestamp)


class Store:
    """Thread-safe owner of all group/stream/event state for one fake server.

    Groups keep insertion order. Streams are kept per group name and events per
    (group name, stream name). Readers get list copies so a page never observes
    a half-applied append.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._groups: list[LogGroup] = []
        self._streams: dict[str, list[LogStream]] = {}
        self._events: dict[tuple[str, str], list[OutputLogEvent]] = {}

    def add_groups(self, groups: Iterable[LogGroup]) -> None:
        with self._lock:
            self._groups.extend(groups)

    def add_streams(self, group_name: str, streams: Iterable[LogStream]) -> None:
        with self._lock:
            self._streams.setdefault(group_name, []).extend(streams)

    def append_events(
        self,
        group_name: str,
        stream_name: str,
        events: Iterable[OutputLogEvent],
    ) -> LogStream:
        """Append events to a stream and refresh its derived timestamps.

        Returns the updated stream. Fails before touching any state when the
        batch is empty or the stream was never registered.
        """
        batch = list(events)
        if not batch:
            raise ValidationError("cannot add empty events array")

        with self._lock:
            streams, index = self._locate_stream_locked(group_name, stream_name)
            stored = self._events.setdefault((group_name, stream_name), [])
            stored.extend(batch)
            stored.sort(key=_event_sort_key)

            timestamps = [event.timestamp for event in stored if event.timestamp]
            if timestamps:
                newest = max(timestamps)
                # Published streams are never mutated; readers keep the copy they got.
                # lastIngestionTime mirrors the newest event timestamp, not wall time.
                streams[index] = streams[index].model_copy(
                    update={
                        "last_ingestion_time": newest,
                        "last_event_timestamp": newest,
                        "first_event_timestamp": min(timestamps),
                    }
                )
            return streams[index].model_copy()

    def groups(self) -> list[LogGroup]:
        with self._lock:
            return list(self._groups)

    def streams(self, group_name: str) -> list[LogStream] | None:
        """Streams of a group, or ``None`` when no stream was ever added to it."""
        with self._lock:
            streams = self._streams.get(group_name)
            return None if streams is None else [stream.model_copy() for stream in streams]

    def events(self, group_name: str, stream_name: str) -> list[OutputLogEvent] | None:
        """Events of a stream in timestamp order, or ``None`` when none were appended."""
        with self._lock:
            events = self._events.get((group_name, stream_name))
            return None if events is None else list(events)

    def find_stream(self, group_name: str, stream_name: str) -> LogStream:
        with self._lock:
            streams, index = self._locate_stream_locked(group_name, stream_name)
            return streams[index].model_copy()

    def group_names_with_streams(self) -> list[str]:
        with self._lock:
            return list(self._streams)

    def stream_keys(self) -> list[tuple[str, str]]:
        """(group, stream) pairs that hold at least one event."""
        with self._lock:
            return list(self._events)

    def counts(self) -> dict[str, int]:
        with self._lock:
            return {
                "groups": len(self._groups),
                "streams": sum(len(streams) for streams in self._streams.values()),
                "events": sum(len(events) for events in self._events.values()),
            }

    def _locate_stream_locked(
        self, group_name: str, stream_name: str
    ) -> tuple[list[LogStream], int]:
        streams = self._streams.get(group_name)
        if streams is None:
            raise NotFoundError(f"could not find streams for: {group_name}")
        # Duplicate stream names are allowed; the first registration wins lookups.
        for index, stream in enumerate(streams):
            if stream.log_stream_name == stream_name:
                return streams, index
        raise NotFoundError(f"could not find stream: {stream_name}")
