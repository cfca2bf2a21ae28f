"""FastAPI application factory."""

from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request

from api.handlers import handle_forward
from api.operations import KEYVAULT_OPERATIONS, Operation
from core.config import Config, resolve_backend_url
from core.headers import HeaderBuilder
from core.protocols import RequestLogger, Transport
from core.translator import ProxyTranslator
from services.upstream import HttpxTransport


def create_app(
    config: Config,
    logger: RequestLogger,
    transport: Transport | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Raises ConfigurationError when the backend endpoint is not configured.
    """
    backend_url = resolve_backend_url(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        client: httpx.AsyncClient | None = None
        upstream = transport
        if upstream is None:
            limits = httpx.Limits(max_connections=100, max_keepalive_connections=20)
            client = httpx.AsyncClient(timeout=config.backend.timeout, limits=limits)
            upstream = HttpxTransport(client, timeout=config.backend.timeout)
        app.state.backend_url = backend_url
        app.state.translator = ProxyTranslator(
            upstream,
            header_builder=HeaderBuilder(),
            pseudonym=config.proxy.pseudonym,
        )
        try:
            yield
        finally:
            if client is not None:
                await client.aclose()

    app = FastAPI(title="Key Vault Proxy", version="0.1.0", lifespan=lifespan)

    for operation in KEYVAULT_OPERATIONS:
        app.add_api_route(
            operation.path,
            _route_for(operation, config, logger),
            methods=[operation.method],
            name=f"{operation.name} {operation.path}",
        )

    return app


def _route_for(operation: Operation, config: Config, logger: RequestLogger):
    """Bind one operation to the shared forwarding handler."""
    async def forward(request: Request):
        return await handle_forward(request, operation, config, logger)

    return forward
