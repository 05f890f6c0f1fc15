"""Pydantic models for log data, wire requests/responses and cache documents.

Python attributes are snake_case; the JSON names are the AWS camelCase names
(for example ``log_group_name`` <-> ``logGroupName``). Unknown keys are kept
as-is so descriptive fields the engine never inspects round-trip verbatim.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class AwsModel(BaseModel):
    """Base model speaking the AWS JSON 1.1 field naming."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )


class LogGroup(AwsModel):
    """A named collection of log streams."""

    log_group_name: str
    creation_time: int | None = None
    retention_in_days: int | None = None
    metric_filter_count: int | None = None
    arn: str | None = None
    stored_bytes: int | None = None
    kms_key_id: str | None = None


class LogStream(AwsModel):
    """A time-ordered sequence of events inside a group.

    The three event timestamps are derived by the store whenever events are
    appended; values supplied by callers are overwritten at that point.
    """

    log_stream_name: str
    creation_time: int | None = None
    first_event_timestamp: int | None = None
    last_event_timestamp: int | None = None
    last_ingestion_time: int | None = None
    upload_sequence_token: str | None = None
    arn: str | None = None
    stored_bytes: int | None = None


class OutputLogEvent(AwsModel):
    """A single timestamped log message."""

    timestamp: int | None = None
    message: str | None = None
    ingestion_time: int | None = None


# Request bodies. Fields the fake accepts but ignores (prefix filters, ordering,
# startFromHead) are declared so they validate; nothing reads them.


class DescribeLogGroupsRequest(AwsModel):
    next_token: str | None = None
    limit: int | None = Field(default=None, ge=0)
    log_group_name_prefix: str | None = None


class DescribeLogStreamsRequest(AwsModel):
    log_group_name: str
    next_token: str | None = None
    limit: int | None = Field(default=None, ge=0)
    log_stream_name_prefix: str | None = None
    order_by: str | None = None
    descending: bool | None = None


class GetLogEventsRequest(AwsModel):
    log_group_name: str
    log_stream_name: str
    next_token: str | None = None
    limit: int | None = Field(default=None, ge=0)
    start_time: int | None = None
    end_time: int | None = None
    start_from_head: bool | None = None


class DescribeLogGroupsResponse(AwsModel):
    log_groups: list[LogGroup] = Field(default_factory=list)
    next_token: str | None = None


class DescribeLogStreamsResponse(AwsModel):
    log_streams: list[LogStream] = Field(default_factory=list)
    next_token: str | None = None


class GetLogEventsResponse(AwsModel):
    events: list[OutputLogEvent] = Field(default_factory=list)
    next_forward_token: str | None = None
    next_backward_token: str | None = None


# On-disk cache documents, one per file, tagged with a ``type`` discriminator.


class CachedLogGroups(AwsModel):
    type: Literal["cached-log-group"] = "cached-log-group"
    groups: list[LogGroup] = Field(default_factory=list)


class CachedLogStreams(AwsModel):
    type: Literal["cached-log-stream"] = "cached-log-stream"
    group_name: str
    streams: list[LogStream] = Field(default_factory=list)


class CachedLogEvents(AwsModel):
    type: Literal["cached-log-event"] = "cached-log-event"
    group_name: str
    stream_name: str
    events: list[OutputLogEvent] = Field(default_factory=list)
