"""FastAPI route handlers."""

from http.cookies import CookieError, Morsel

import httpx
from fastapi import Request, Response

from api.operations import Operation
from core.config import Config
from core.protocols import RequestLogger
from core.request_types import Cookie, InboundRequest, OutwardResponse
from ui.log_utils import write_incoming_log

MAX_BODY_SIZE = 50 * 1024 * 1024  # 50MB

# RFC 7230 hop-by-hop headers, plus framing headers that no longer match
# once httpx has decoded the body.
_DROP_RESPONSE_HEADERS = {
    "connection",
    "keep-alive",
    "proxy-authenticate",
    "proxy-authorization",
    "te",
    "trailer",
    "transfer-encoding",
    "upgrade",
    "content-length",
    "content-encoding",
}

# The backend may only pick encodings httpx can decode; httpx offers its own
# Accept-Encoding when none is forwarded.
_DROP_REQUEST_HEADERS = {"accept-encoding"}


async def _read_inbound(request: Request) -> InboundRequest | Response:
    """Capture the inbound request, or return an error Response."""
    raw_body = await request.body()
    if len(raw_body) > MAX_BODY_SIZE:
        return Response(
            content='{"error": "Request body too large"}',
            status_code=413,
            media_type="application/json",
        )
    return InboundRequest(
        method=request.method,
        url=str(request.url),
        headers=[
            (key, value)
            for key, value in request.headers.items()
            if key.lower() not in _DROP_REQUEST_HEADERS
        ],
        body=raw_body or None,
    )


async def handle_forward(
    request: Request,
    operation: Operation,
    config: Config,
    logger: RequestLogger,
) -> Response:
    """Forward one Key Vault operation to the configured backend."""
    inbound = await _read_inbound(request)
    if isinstance(inbound, Response):
        return inbound

    if config.proxy.debug:
        write_incoming_log(
            inbound.method,
            inbound.url,
            dict(inbound.headers),
            inbound.body,
            operation=operation.name,
        )

    translator = request.app.state.translator
    backend_url = request.app.state.backend_url
    try:
        outward = await translator.request(operation.method, backend_url, inbound)
    except httpx.TimeoutException:
        logger.log_error(operation.name, 504, "Upstream timeout")
        return Response(
            content='{"error": "Upstream timeout"}',
            status_code=504,
            media_type="application/json",
        )
    except httpx.RequestError as e:
        logger.log_error(operation.name, 502, str(e))
        return Response(
            content=f'{{"error": "Upstream connection error: {e}"}}',
            status_code=502,
            media_type="application/json",
        )

    logger.log_forward(
        operation.method,
        inbound.url,
        outward.status,
        operation=operation.name,
    )
    if outward.status >= 400:
        logger.log_error(
            operation.name,
            outward.status,
            outward.body.decode("utf-8", errors="replace"),
        )
    return to_response(outward)


def to_response(outward: OutwardResponse) -> Response:
    """Serialise an OutwardResponse for the caller."""
    response = Response(
        content=outward.body,
        status_code=outward.status,
        media_type=None,
    )
    for key, value in outward.headers.multi_items():
        if key.lower() in _DROP_RESPONSE_HEADERS:
            continue
        response.headers.append(key, value)
    for cookie in outward.cookies:
        set_cookie = _set_cookie_value(cookie)
        if set_cookie is not None:
            response.headers.append("set-cookie", set_cookie)
    return response


def _set_cookie_value(cookie: Cookie) -> str | None:
    """Backend cookie as a Set-Cookie value, unquoted; None if the name is unusable."""
    try:
        Morsel().set(cookie.name, cookie.value or "", cookie.value or "")
    except CookieError:
        return None
    if cookie.value is None:
        return cookie.name
    return f"{cookie.name}={cookie.value}"
