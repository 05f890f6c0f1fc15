"""Fake CloudWatch Logs server: populated in-process, queried over HTTP."""

from __future__ import annotations

import logging
import socket
import threading
import time
from collections.abc import Iterable
from pathlib import Path

import uvicorn

from fake_cloudwatch_logs.app import cache
from fake_cloudwatch_logs.app.models import LogGroup, LogStream, OutputLogEvent
from fake_cloudwatch_logs.app.service import LogsService
from fake_cloudwatch_logs.app.settings import Settings, get_settings
from fake_cloudwatch_logs.main import create_app

logger = logging.getLogger(__name__)


class FakeCloudwatchLogs:
    """One fake backend: its own store, tokens, HTTP listener and cache roots.

    Test code populates it directly (``populate_*`` or ``populate_from_cache``)
    and points an AWS SDK client at ``http://<bootstrap() result>``.
    """

    def __init__(self, *, port: int | None = None, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self.port = self.settings.port if port is None else port
        self.service = LogsService(
            default_list_limit=self.settings.default_list_limit,
            default_events_limit=self.settings.default_events_limit,
        )
        self.app = create_app(service=self.service, settings_override=self.settings)
        if self.settings.cache_dir is not None:
            self.populate_from_cache(self.settings.cache_dir)
        self.host_port: str | None = None
        self.touched_cache = False
        self.known_caches: list[Path] = []
        self._server: uvicorn.Server | None = None
        self._thread: threading.Thread | None = None
        self._closed = False

    def populate_groups(self, groups: Iterable[LogGroup]) -> None:
        self.service.populate_groups(groups)

    def populate_streams(self, group_name: str, streams: Iterable[LogStream]) -> None:
        self.service.populate_streams(group_name, streams)

    def populate_events(
        self,
        group_name: str,
        stream_name: str,
        events: Iterable[OutputLogEvent],
    ) -> LogStream:
        return self.service.populate_events(group_name, stream_name, events)

    def cache_groups_to_disk(self, cache_dir: Path, groups: Iterable[LogGroup]) -> Path:
        self._remember_cache(cache_dir)
        return cache.write_groups(cache_dir, groups)

    def cache_streams_to_disk(
        self,
        cache_dir: Path,
        group_name: str,
        streams: Iterable[LogStream],
    ) -> Path:
        self._remember_cache(cache_dir)
        return cache.write_streams(cache_dir, group_name, streams)

    def cache_events_to_disk(
        self,
        cache_dir: Path,
        group_name: str,
        stream_name: str,
        events: Iterable[OutputLogEvent],
    ) -> Path:
        self._remember_cache(cache_dir)
        return cache.write_events(cache_dir, group_name, stream_name, events)

    def cache_store_to_disk(self, cache_dir: Path) -> list[Path]:
        self._remember_cache(cache_dir)
        return cache.write_store(cache_dir, self.service.store)

    def populate_from_cache(self, cache_dir: Path) -> None:
        cache.load_into(cache_dir, self.service)

    def bootstrap(self) -> str:
        """Start listening and return ``"localhost:<port>"``."""
        if self._closed:
            raise RuntimeError("cannot bootstrap closed server")
        if self._server is not None:
            raise RuntimeError("server is already running")

        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind((self.settings.host, self.port))
        except OSError:
            sock.close()
            raise
        port = sock.getsockname()[1]

        config = uvicorn.Config(self.app, log_level=self.settings.log_level, lifespan="off")
        server = uvicorn.Server(config)
        thread = threading.Thread(
            target=server.run,
            kwargs={"sockets": [sock]},
            name=f"fake-cloudwatch-logs-{port}",
            daemon=True,
        )
        thread.start()

        deadline = time.time() + self.settings.startup_timeout_s
        while not server.started:
            if not thread.is_alive() or time.time() > deadline:
                server.should_exit = True
                sock.close()
                raise RuntimeError(f"fake cloudwatch logs server failed to start on port {port}")
            time.sleep(0.01)

        self._server = server
        self._thread = thread
        self.host_port = f"localhost:{port}"
        logger.info("logs_server event=bootstrapped host_port=%s", self.host_port)
        return self.host_port

    def close(self) -> None:
        if self._server is not None and self._thread is not None:
            self._server.should_exit = True
            self._thread.join(timeout=self.settings.startup_timeout_s)
            logger.info("logs_server event=closed host_port=%s", self.host_port)
        self._server = None
        self._thread = None
        self._closed = True

    def __enter__(self) -> FakeCloudwatchLogs:
        self.bootstrap()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _remember_cache(self, cache_dir: Path) -> None:
        self.touched_cache = True
        if cache_dir not in self.known_caches:
            self.known_caches.append(cache_dir)
