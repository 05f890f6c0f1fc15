"""Single-use opaque cursor tokens."""

from __future__ import annotations

import threading
from uuid import uuid4

from fake_cloudwatch_logs.app.errors import InvalidTokenError


class TokenRegistry:
    """Maps opaque token strings to integer offsets.

    A token is valid for exactly one redemption. Replaying it, or presenting a
    token this registry never issued, raises ``InvalidTokenError`` instead of
    returning stale data.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._offsets: dict[str, int] = {}

    def issue(self, offset: int, prefix: str = "") -> str:
        token = f"{prefix}{uuid4()}"
        with self._lock:
            self._offsets[token] = offset
        return token

    def redeem(self, token: str) -> int:
        with self._lock:
            offset = self._offsets.pop(token, None)
        if offset is None:
            raise InvalidTokenError(token)
        return offset

    def __len__(self) -> int:
        with self._lock:
            return len(self._offsets)

    def __contains__(self, token: object) -> bool:
        with self._lock:
            return token in self._offsets
