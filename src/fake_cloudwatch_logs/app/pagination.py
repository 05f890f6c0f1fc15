"""Offset-cursor pagination for listings and tail windowing for log events."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from fake_cloudwatch_logs.app.errors import InvalidTokenError
from fake_cloudwatch_logs.app.models import OutputLogEvent
from fake_cloudwatch_logs.app.tokens import TokenRegistry

T = TypeVar("T")

DEFAULT_LIST_LIMIT = 50
DEFAULT_EVENTS_LIMIT = 10000

FORWARD_PREFIX = "f/"
BACKWARD_PREFIX = "b/"


@dataclass
class Page(Generic[T]):
    items: list[T] = field(default_factory=list)
    next_token: str | None = None


@dataclass
class EventPage:
    items: list[OutputLogEvent] = field(default_factory=list)
    next_forward_token: str | None = None
    next_backward_token: str | None = None


class Paginator:
    """Forward-only "slice + continuation token" listing.

    Following ``next_token`` to exhaustion visits every item once, in order,
    as long as the backing sequence is not mutated between calls.
    """

    def __init__(self, tokens: TokenRegistry, default_limit: int = DEFAULT_LIST_LIMIT) -> None:
        self._tokens = tokens
        self.default_limit = default_limit

    def paginate(
        self,
        items: Sequence[T],
        prev_token: str | None = None,
        limit: int | None = None,
    ) -> Page[T]:
        offset = self._tokens.redeem(prev_token) if prev_token else 0
        if offset < 0:
            # Event window tokens can hold negative offsets; they never address a listing.
            raise InvalidTokenError(prev_token)
        end = offset + (limit or self.default_limit)

        next_token = None
        if end < len(items):
            next_token = self._tokens.issue(end)
        return Page(items=list(items[offset:end]), next_token=next_token)


class EventWindower:
    """Bidirectional tail pagination over a time-ordered event collection.

    Offsets count back from the newest event, so a window stays a consistent
    view of the tail while more events are appended between calls. With 50
    events and ``limit=10`` the first call returns events 40-49; its backward
    token leads to 30-39 and the forward token of that page leads back to
    40-49. A forward token past the present yields an empty page plus fresh
    tokens, which lets a client keep polling for new events.
    """

    def __init__(self, tokens: TokenRegistry, default_limit: int = DEFAULT_EVENTS_LIMIT) -> None:
        self._tokens = tokens
        self.default_limit = default_limit

    def window(
        self,
        events: Sequence[OutputLogEvent] | None,
        prev_token: str | None = None,
        limit: int | None = None,
        start_time: int | None = None,
        end_time: int | None = None,
    ) -> EventPage:
        if events is None:
            return EventPage()

        if start_time or end_time:
            events = filter_time_range(events, start_time, end_time)

        offset = self._tokens.redeem(prev_token) if prev_token else 0
        limit = limit or self.default_limit

        total = len(events)
        start = max(0, total - limit - offset)
        end = max(0, total - offset)

        return EventPage(
            items=list(events[start:end]),
            next_forward_token=self._tokens.issue(offset - limit, prefix=FORWARD_PREFIX),
            next_backward_token=self._tokens.issue(offset + limit, prefix=BACKWARD_PREFIX),
        )


def filter_time_range(
    events: Sequence[OutputLogEvent],
    start_time: int | None,
    end_time: int | None,
) -> list[OutputLogEvent]:
    """Keep events with ``start_time <= timestamp < end_time``.

    Either bound may be omitted. Events without a timestamp never match.
    """
    lower = start_time or 0
    return [
        event
        for event in events
        if event.timestamp
        and lower <= event.timestamp
        and (not end_time or event.timestamp < end_time)
    ]
