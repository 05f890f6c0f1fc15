"""Typed failures raised by the query engine.

Each error carries the AWS error code the HTTP layer reports for it, so the
transport never has to guess how a core failure looks on the wire.
"""

from __future__ import annotations


class FakeLogsError(Exception):
    """Base class for all engine failures."""

    aws_code = "ServiceUnavailableException"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(FakeLogsError):
    """Malformed caller input, for example appending zero events."""

    aws_code = "InvalidParameterException"


class NotFoundError(FakeLogsError):
    """A stream (or its group) was referenced before being registered."""

    aws_code = "ResourceNotFoundException"


class InvalidTokenError(FakeLogsError):
    """A cursor token that is unknown, already redeemed, or from another run."""

    aws_code = "InvalidParameterException"

    def __init__(self, token: str) -> None:
        super().__init__(f"invalid nextToken: {token}")
        self.token = token
