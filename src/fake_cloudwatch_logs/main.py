"""FastAPI app speaking the CloudWatch Logs JSON 1.1 wire protocol.

AWS SDKs send every call as ``POST /`` with the operation named in the
``X-Amz-Target`` header (``Logs_20140328.GetLogEvents``) and the parameters as
a JSON body. The app routes on the last dot-separated part of that header.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse, Response
from pydantic import ValidationError as PydanticValidationError

from fake_cloudwatch_logs.app.cache import load_into
from fake_cloudwatch_logs.app.errors import FakeLogsError
from fake_cloudwatch_logs.app.models import (
    AwsModel,
    DescribeLogGroupsRequest,
    DescribeLogGroupsResponse,
    DescribeLogStreamsRequest,
    DescribeLogStreamsResponse,
    GetLogEventsRequest,
    GetLogEventsResponse,
)
from fake_cloudwatch_logs.app.service import LogsService
from fake_cloudwatch_logs.app.settings import Settings, get_settings

logger = logging.getLogger(__name__)

AWS_JSON_CONTENT_TYPE = "application/x-amz-json-1.1"


def describe_log_groups(
    service: LogsService, body: DescribeLogGroupsRequest
) -> DescribeLogGroupsResponse:
    page = service.list_groups(body.next_token, body.limit)
    return DescribeLogGroupsResponse(log_groups=page.items, next_token=page.next_token)


def describe_log_streams(
    service: LogsService, body: DescribeLogStreamsRequest
) -> DescribeLogStreamsResponse:
    page = service.list_streams(body.log_group_name, body.next_token, body.limit)
    return DescribeLogStreamsResponse(log_streams=page.items, next_token=page.next_token)


def get_log_events(service: LogsService, body: GetLogEventsRequest) -> GetLogEventsResponse:
    page = service.get_events(
        body.log_group_name,
        body.log_stream_name,
        next_token=body.next_token,
        limit=body.limit,
        start_time=body.start_time,
        end_time=body.end_time,
    )
    return GetLogEventsResponse(
        events=page.items,
        next_forward_token=page.next_forward_token,
        next_backward_token=page.next_backward_token,
    )


# Operation name -> (request model, handler).
OPERATIONS: dict[str, tuple[type[AwsModel], Callable[[LogsService, Any], AwsModel]]] = {
    "DescribeLogGroups": (DescribeLogGroupsRequest, describe_log_groups),
    "DescribeLogStreams": (DescribeLogStreamsRequest, describe_log_streams),
    "GetLogEvents": (GetLogEventsRequest, get_log_events),
}


def aws_error(code: str, message: str, status_code: int = 400) -> Response:
    return Response(
        content=json.dumps({"__type": code, "message": message}),
        status_code=status_code,
        media_type=AWS_JSON_CONTENT_TYPE,
        headers={"x-amzn-ErrorType": code},
    )


def create_app(
    *,
    service: LogsService | None = None,
    settings_override: Settings | None = None,
) -> FastAPI:
    """Build an app over ``service``, or over a fresh one sized by settings.

    When no service is passed and ``cache_dir`` is configured, the new service
    is populated from that cache before the app is returned.
    """
    settings = settings_override or get_settings()
    if service is None:
        service = LogsService(
            default_list_limit=settings.default_list_limit,
            default_events_limit=settings.default_events_limit,
        )
        if settings.cache_dir is not None:
            load_into(settings.cache_dir, service)

    app = FastAPI(title=settings.app_name)
    app.state.service = service
    app.state.settings = settings

    @app.exception_handler(FakeLogsError)
    async def handle_engine_error(request: Request, exc: FakeLogsError) -> Response:
        logger.warning(
            "logs_api event=request_failed target=%s error=%s message=%s",
            request.headers.get("x-amz-target"),
            exc.aws_code,
            exc.message,
        )
        return aws_error(exc.aws_code, exc.message)

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok", "service": settings.app_name}

    @app.post("/")
    async def dispatch(request: Request) -> Response:
        targets = request.headers.getlist("x-amz-target")
        if len(targets) > 1:
            return aws_error("SerializationException", "bad request, array header x-amz-target")

        target = targets[0] if targets else ""
        operation = target.split(".")[-1]
        if operation not in OPERATIONS:
            logger.warning("logs_api event=unknown_operation target=%s", target)
            return PlainTextResponse("Not Found", status_code=404)

        request_model, handler = OPERATIONS[operation]
        raw_body = await request.body()
        try:
            body = request_model.model_validate_json(raw_body or b"{}")
        except PydanticValidationError as exc:
            return aws_error(_validation_code(exc), str(exc))

        result = handler(request.app.state.service, body)
        logger.debug("logs_api event=handled operation=%s", operation)
        return Response(
            content=result.model_dump_json(by_alias=True, exclude_none=True),
            media_type=AWS_JSON_CONTENT_TYPE,
        )

    return app


def _validation_code(exc: PydanticValidationError) -> str:
    if any(error["type"] == "json_invalid" for error in exc.errors()):
        return "SerializationException"
    return "InvalidParameterException"
