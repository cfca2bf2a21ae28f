"""Shared request and response data types."""

from dataclasses import dataclass, field
from typing import Iterable, Mapping

import httpx

Body = str | bytes | None


@dataclass
class InboundRequest:
    """Request as received by the proxy endpoint."""

    method: str
    url: str
    headers: httpx.Headers | Mapping[str, str] | Iterable[tuple[str, str]] = field(
        default_factory=httpx.Headers
    )
    body: Body = None

    def __post_init__(self) -> None:
        self.headers = httpx.Headers(self.headers)


@dataclass(frozen=True)
class OutboundRequest:
    """Re-addressed request ready for the backend."""

    method: str
    url: httpx.URL
    headers: httpx.Headers
    body: Body


@dataclass(frozen=True)
class Cookie:
    """Single name/value pair taken from a cookie header."""

    name: str
    value: str | None = None


@dataclass
class OutwardResponse:
    """Backend response in the shape handed back to the invocation layer."""

    status: int
    headers: httpx.Headers
    body: bytes
    cookies: list[Cookie] = field(default_factory=list)
    # Tells the host to skip its own response formatting
    is_raw: bool | None = None
