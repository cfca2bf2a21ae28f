"""Re-address inbound requests to the backend and relay the response."""

import copy
import socket

import httpx

from core.exceptions import InvalidParameter
from core.headers import HeaderBuilder
from core.protocols import Transport
from core.request_types import InboundRequest, OutboundRequest, OutwardResponse
from core.response import from_raw


class ProxyTranslator:
    """Transparent forwarding: only the authority and hop headers change."""

    def __init__(
        self,
        transport: Transport,
        header_builder: HeaderBuilder | None = None,
        pseudonym: str | None = None,
    ) -> None:
        self._transport = transport
        self._headers = header_builder or HeaderBuilder()
        self._pseudonym = pseudonym

    def prepare(
        self,
        request: InboundRequest | None,
        endpoint_url: httpx.URL | str | None,
        method: str | None = None,
    ) -> OutboundRequest:
        """Build the outbound request from a private copy of ``request``."""
        if request is None:
            raise InvalidParameter("request")
        if endpoint_url is None:
            raise InvalidParameter("endpoint_url")
        endpoint = httpx.URL(endpoint_url)
        if not endpoint.is_absolute_url or not endpoint.host:
            raise InvalidParameter("endpoint_url")

        # The caller keeps its own request untouched
        request = copy.deepcopy(request)
        inbound_url = httpx.URL(request.url)

        headers = self._headers.build_forward_headers(
            request.headers,
            endpoint,
            self._received_by(request, inbound_url),
        )
        return OutboundRequest(
            method=method or request.method,
            url=self._proxy_url(endpoint, inbound_url),
            headers=headers,
            body=request.body,
        )

    async def translate(
        self,
        request: InboundRequest | None,
        endpoint_url: httpx.URL | str | None,
    ) -> OutwardResponse:
        """Forward ``request`` to ``endpoint_url`` and translate the reply."""
        return await self._forward(self.prepare(request, endpoint_url))

    async def request(
        self,
        verb: str | None,
        endpoint_url: httpx.URL | str | None,
        request: InboundRequest | None,
    ) -> OutwardResponse:
        """Forward ``request`` using ``verb`` instead of its own method."""
        if not verb:
            raise InvalidParameter("verb")
        return await self._forward(self.prepare(request, endpoint_url, method=verb.upper()))

    async def get(
        self,
        endpoint_url: httpx.URL | str | None,
        request: InboundRequest | None,
    ) -> OutwardResponse:
        return await self.request("GET", endpoint_url, request)

    async def post(
        self,
        endpoint_url: httpx.URL | str | None,
        request: InboundRequest | None,
    ) -> OutwardResponse:
        return await self.request("POST", endpoint_url, request)

    async def put(
        self,
        endpoint_url: httpx.URL | str | None,
        request: InboundRequest | None,
    ) -> OutwardResponse:
        return await self.request("PUT", endpoint_url, request)

    async def patch(
        self,
        endpoint_url: httpx.URL | str | None,
        request: InboundRequest | None,
    ) -> OutwardResponse:
        return await self.request("PATCH", endpoint_url, request)

    async def delete(
        self,
        endpoint_url: httpx.URL | str | None,
        request: InboundRequest | None,
    ) -> OutwardResponse:
        return await self.request("DELETE", endpoint_url, request)

    async def _forward(self, outbound: OutboundRequest) -> OutwardResponse:
        """Issue exactly one outbound call; transport errors propagate as-is."""
        raw = await self._transport.send(
            outbound.method,
            outbound.url,
            outbound.body,
            outbound.headers,
        )
        return await from_raw(raw)

    @staticmethod
    def _proxy_url(endpoint: httpx.URL, inbound_url: httpx.URL) -> httpx.URL:
        """Endpoint origin followed by the inbound path and query."""
        raw_path = inbound_url.raw_path
        if not raw_path.startswith(b"/"):
            raw_path = b"/" + raw_path
        return endpoint.copy_with(raw_path=raw_path, fragment=None)

    def _received_by(self, request: InboundRequest, inbound_url: httpx.URL) -> str:
        """Name this proxy goes by in the Via header."""
        if self._pseudonym:
            return self._pseudonym
        if inbound_url.host:
            return inbound_url.host
        host_header = request.headers.get("host")
        if host_header:
            try:
                return httpx.URL(f"//{host_header}").host or host_header
            except httpx.InvalidURL:
                return host_header
        return socket.gethostname()
