"""Query entry points over one store/token-registry pair."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from fake_cloudwatch_logs.app.models import LogGroup, LogStream, OutputLogEvent
from fake_cloudwatch_logs.app.pagination import (
    DEFAULT_EVENTS_LIMIT,
    DEFAULT_LIST_LIMIT,
    EventPage,
    EventWindower,
    Page,
    Paginator,
)
from fake_cloudwatch_logs.app.store import Store
from fake_cloudwatch_logs.app.tokens import TokenRegistry

logger = logging.getLogger(__name__)


class LogsService:
    """ListGroups / ListStreams / GetEvents plus the populate operations.

    Each instance owns its own ``Store`` and ``TokenRegistry``; tokens issued by
    one service are invalid on another.
    """

    def __init__(
        self,
        *,
        store: Store | None = None,
        tokens: TokenRegistry | None = None,
        default_list_limit: int = DEFAULT_LIST_LIMIT,
        default_events_limit: int = DEFAULT_EVENTS_LIMIT,
    ) -> None:
        self.store = store if store is not None else Store()
        self.tokens = tokens if tokens is not None else TokenRegistry()
        self.paginator = Paginator(self.tokens, default_limit=default_list_limit)
        self.windower = EventWindower(self.tokens, default_limit=default_events_limit)

    def populate_groups(self, groups: Iterable[LogGroup]) -> None:
        groups = list(groups)
        self.store.add_groups(groups)
        logger.debug("logs_store event=populate_groups count=%s", len(groups))

    def populate_streams(self, group_name: str, streams: Iterable[LogStream]) -> None:
        streams = list(streams)
        self.store.add_streams(group_name, streams)
        logger.debug(
            "logs_store event=populate_streams group=%s count=%s", group_name, len(streams)
        )

    def populate_events(
        self,
        group_name: str,
        stream_name: str,
        events: Iterable[OutputLogEvent],
    ) -> LogStream:
        events = list(events)
        stream = self.store.append_events(group_name, stream_name, events)
        logger.debug(
            "logs_store event=populate_events group=%s stream=%s count=%s",
            group_name,
            stream_name,
            len(events),
        )
        return stream

    def list_groups(
        self,
        next_token: str | None = None,
        limit: int | None = None,
    ) -> Page[LogGroup]:
        return self.paginator.paginate(self.store.groups(), next_token, limit)

    def list_streams(
        self,
        group_name: str,
        next_token: str | None = None,
        limit: int | None = None,
    ) -> Page[LogStream]:
        streams = self.store.streams(group_name)
        if streams is None:
            return Page()
        return self.paginator.paginate(streams, next_token, limit)

    def get_events(
        self,
        group_name: str,
        stream_name: str,
        next_token: str | None = None,
        limit: int | None = None,
        start_time: int | None = None,
        end_time: int | None = None,
    ) -> EventPage:
        return self.windower.window(
            self.store.events(group_name, stream_name),
            next_token,
            limit=limit,
            start_time=start_time,
            end_time=end_time,
        )
