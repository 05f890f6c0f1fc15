"""In-process fake of the CloudWatch Logs query API for integration tests."""

from fake_cloudwatch_logs.app.errors import (
    FakeLogsError,
    InvalidTokenError,
    NotFoundError,
    ValidationError,
)
from fake_cloudwatch_logs.app.models import LogGroup, LogStream, OutputLogEvent
from fake_cloudwatch_logs.app.service import LogsService
from fake_cloudwatch_logs.server import FakeCloudwatchLogs

__all__ = [
    "FakeCloudwatchLogs",
    "FakeLogsError",
    "InvalidTokenError",
    "LogGroup",
    "LogStream",
    "LogsService",
    "NotFoundError",
    "OutputLogEvent",
    "ValidationError",
]
