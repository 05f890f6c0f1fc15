"""On-disk JSON cache of store contents.

Layout under a cache root::

    groups.json                                   cached-log-group
    groups/<quoted group>/streams.json            cached-log-stream
    streams/<quoted group:stream>/events.json     cached-log-event
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import TypeVar
from urllib.parse import quote

from pydantic import ValidationError as PydanticValidationError

from fake_cloudwatch_logs.app.errors import ValidationError
from fake_cloudwatch_logs.app.models import (
    AwsModel,
    CachedLogEvents,
    CachedLogGroups,
    CachedLogStreams,
    LogGroup,
    LogStream,
    OutputLogEvent,
)
from fake_cloudwatch_logs.app.service import LogsService
from fake_cloudwatch_logs.app.store import Store

logger = logging.getLogger(__name__)

GROUPS_FILE = "groups.json"
STREAMS_FILE = "streams.json"
EVENTS_FILE = "events.json"

DocT = TypeVar("DocT", bound=AwsModel)


def groups_path(cache_dir: Path) -> Path:
    return cache_dir / GROUPS_FILE


def streams_path(cache_dir: Path, group_name: str) -> Path:
    return cache_dir / "groups" / quote(group_name, safe="") / STREAMS_FILE


def events_path(cache_dir: Path, group_name: str, stream_name: str) -> Path:
    key = quote(f"{group_name}:{stream_name}", safe="")
    return cache_dir / "streams" / key / EVENTS_FILE


def write_groups(cache_dir: Path, groups: Iterable[LogGroup]) -> Path:
    document = CachedLogGroups(groups=list(groups))
    return _write_document(groups_path(cache_dir), document)


def write_streams(cache_dir: Path, group_name: str, streams: Iterable[LogStream]) -> Path:
    document = CachedLogStreams(group_name=group_name, streams=list(streams))
    return _write_document(streams_path(cache_dir, group_name), document)


def write_events(
    cache_dir: Path,
    group_name: str,
    stream_name: str,
    events: Iterable[OutputLogEvent],
) -> Path:
    document = CachedLogEvents(
        group_name=group_name,
        stream_name=stream_name,
        events=list(events),
    )
    return _write_document(events_path(cache_dir, group_name, stream_name), document)


def write_store(cache_dir: Path, store: Store) -> list[Path]:
    """Write every group, stream list and event list currently held by ``store``."""
    written = [write_groups(cache_dir, store.groups())]
    for group_name in store.group_names_with_streams():
        written.append(write_streams(cache_dir, group_name, store.streams(group_name) or []))
    for group_name, stream_name in store.stream_keys():
        events = store.events(group_name, stream_name) or []
        written.append(write_events(cache_dir, group_name, stream_name, events))
    return written


def load_into(cache_dir: Path, service: LogsService) -> None:
    """Populate ``service`` from a cache root.

    Groups load first, then stream lists, then events, since appending events
    requires their stream to be registered. Missing parts of the tree are
    skipped.
    """
    path = groups_path(cache_dir)
    if path.is_file():
        groups_doc = _read_document(path, CachedLogGroups)
        service.populate_groups(groups_doc.groups)

    for path in _documents(cache_dir / "groups", STREAMS_FILE):
        streams_doc = _read_document(path, CachedLogStreams)
        service.populate_streams(streams_doc.group_name, streams_doc.streams)

    for path in _documents(cache_dir / "streams", EVENTS_FILE):
        events_doc = _read_document(path, CachedLogEvents)
        if not events_doc.events:
            # Streams that never received events are cached as empty lists.
            logger.debug("logs_cache event=skip_empty path=%s", path)
            continue
        service.populate_events(
            events_doc.group_name,
            events_doc.stream_name,
            events_doc.events,
        )

    logger.info("logs_cache event=loaded cache_dir=%s counts=%s", cache_dir, service.store.counts())


def _documents(parent: Path, filename: str) -> list[Path]:
    if not parent.is_dir():
        return []
    return [entry / filename for entry in sorted(parent.iterdir()) if entry.is_dir()]


def _write_document(path: Path, document: AwsModel) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(document.model_dump_json(by_alias=True, exclude_none=True), encoding="utf-8")
    logger.debug("logs_cache event=written path=%s", path)
    return path


def _read_document(path: Path, model: type[DocT]) -> DocT:
    raw = path.read_text(encoding="utf-8")
    try:
        return model.model_validate_json(raw)
    except PydanticValidationError as exc:
        raise ValidationError(f"invalid cache document {path}: {exc}") from exc
