"""Translate raw backend responses for the invocation layer."""

import httpx

from core.cookies import parse_cookie_header
from core.request_types import OutwardResponse


async def from_raw(raw: httpx.Response) -> OutwardResponse:
    """Read the backend response fully and copy it into an OutwardResponse."""
    try:
        body = await raw.aread()
    finally:
        await raw.aclose()

    return OutwardResponse(
        status=raw.status_code,
        headers=httpx.Headers(raw.headers),
        body=body,
        cookies=parse_cookie_header(raw.headers.get("cookie")),
    )
