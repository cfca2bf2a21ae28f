"""HTTP transport for forwarded requests."""

import httpx

from core.request_types import Body


class HttpxTransport:
    """Send forwarded requests through a shared httpx client.

    Failures (timeouts, refused connections, protocol errors) are raised
    as httpx exceptions; nothing is retried here.
    """

    def __init__(self, client: httpx.AsyncClient, timeout: float = 60.0) -> None:
        self._client = client
        self._timeout = timeout

    async def send(
        self,
        method: str,
        url: httpx.URL,
        body: Body,
        headers: httpx.Headers,
    ) -> httpx.Response:
        """Send the request; the body is read later by the response translator."""
        req = self._client.build_request(
            method,
            url,
            content=body,
            headers=headers,
            timeout=self._timeout,
        )
        return await self._client.send(req, stream=True)
