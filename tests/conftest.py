from __future__ import annotations

import shutil
from collections.abc import Iterator
from typing import Any

import pytest
from fastapi.testclient import TestClient

from fake_cloudwatch_logs.app.models import LogGroup, LogStream, OutputLogEvent
from fake_cloudwatch_logs.app.service import LogsService
from fake_cloudwatch_logs.app.settings import Settings
from fake_cloudwatch_logs.main import create_app
from fake_cloudwatch_logs.server import FakeCloudwatchLogs

BASE_TS = 1_700_000_000_000


class LogFactory:
    """Builds uniquely named groups/streams/events with a shared counter."""

    def __init__(self) -> None:
        self.counter = 0

    def log_group(self, name: str | None = None) -> LogGroup:
        group = LogGroup(
            log_group_name=name or f"my-log-group-{self.counter}",
            creation_time=BASE_TS + self.counter,
            retention_in_days=7,
        )
        self.counter += 1
        return group

    def log_stream(self, name: str | None = None) -> LogStream:
        stream = LogStream(
            log_stream_name=name or f"my-log-stream-{self.counter}",
            creation_time=BASE_TS + self.counter,
            first_event_timestamp=0,
            last_event_timestamp=0,
        )
        self.counter += 1
        return stream

    def log_event(self, timestamp: int | None = None) -> OutputLogEvent:
        ts = BASE_TS + self.counter if timestamp is None else timestamp
        event = OutputLogEvent(
            timestamp=ts,
            ingestion_time=ts,
            message=f"[INFO]: A log message: {self.counter}",
        )
        self.counter += 1
        return event

    def log_events(self, count: int) -> list[OutputLogEvent]:
        return [self.log_event() for _ in range(count)]


@pytest.fixture
def factory() -> LogFactory:
    return LogFactory()


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, cache_dir=None, port=0)


@pytest.fixture
def service(settings: Settings) -> LogsService:
    return LogsService(
        default_list_limit=settings.default_list_limit,
        default_events_limit=settings.default_events_limit,
    )


@pytest.fixture
def client(service: LogsService, settings: Settings) -> Iterator[TestClient]:
    app = create_app(service=service, settings_override=settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def fake_server(settings: Settings) -> Iterator[FakeCloudwatchLogs]:
    server = FakeCloudwatchLogs(settings=settings)
    try:
        yield server
    finally:
        server.close()
        for cache_dir in server.known_caches:
            shutil.rmtree(cache_dir, ignore_errors=True)


def call_logs_api(
    client: TestClient,
    operation: str,
    payload: dict[str, Any] | None = None,
) -> tuple[int, dict[str, Any]]:
    response = client.post(
        "/",
        json=payload or {},
        headers={
            "X-Amz-Target": f"Logs_20140328.{operation}",
            "Content-Type": "application/x-amz-json-1.1",
        },
    )
    return response.status_code, response.json()


@pytest.fixture
def logs_api():
    return call_logs_api


@pytest.fixture
def populate(service: LogsService, factory: LogFactory):
    """Register one group + stream and append `count` increasing events to it."""

    def _populate(
        count: int,
        group_name: str = "test-group",
        stream_name: str = "test-stream",
    ) -> list[OutputLogEvent]:
        service.populate_groups([factory.log_group(group_name)])
        service.populate_streams(group_name, [factory.log_stream(stream_name)])
        events = factory.log_events(count)
        if events:
            service.populate_events(group_name, stream_name, events)
        return events

    return _populate
