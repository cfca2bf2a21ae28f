"""Shared protocol definitions."""

from typing import Protocol

import httpx

from core.request_types import Body


class Transport(Protocol):
    """Protocol for the HTTP client that issues outbound requests."""

    async def send(
        self,
        method: str,
        url: httpx.URL,
        body: Body,
        headers: httpx.Headers,
    ) -> httpx.Response: ...


class RequestLogger(Protocol):
    """Protocol for request logging (Dashboard)."""

    def log_forward(
        self,
        method: str,
        url: str,
        status: int,
        *,
        operation: str,
    ) -> None: ...
    def log_error(self, route: str, status: int, message: str) -> None: ...
