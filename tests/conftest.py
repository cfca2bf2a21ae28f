"""Shared fixtures: a recording transport double and sample requests."""

from dataclasses import dataclass

import httpx
import pytest

from core.request_types import InboundRequest


@dataclass
class SentRequest:
    method: str
    url: httpx.URL
    body: object
    headers: httpx.Headers


class RecordingTransport:
    """Transport double that records every send and replays a canned reply."""

    def __init__(self, response: httpx.Response | None = None, error: Exception | None = None):
        self.calls: list[SentRequest] = []
        self.response = response or httpx.Response(200, content=b'{"value": "ok"}')
        self.error = error

    async def send(self, method, url, body, headers):
        self.calls.append(SentRequest(method, url, body, httpx.Headers(headers)))
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def inbound():
    """The POST from the forwarding example."""
    return InboundRequest(
        method="POST",
        url="https://proxy.example/v1/keys/foo?api-version=2020",
        headers={"Content-Type": "application/json"},
        body='{"kty": "RSA"}',
    )
