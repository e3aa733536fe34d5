"""FastAPI application factory."""

import httpx
from fastapi import FastAPI, Request

from api.handlers import handle_fallback, handle_health, handle_proxy
from core.config import SERVICE_NAME, VERSION, Config
from core.headers import HeaderBuilder
from core.protocols import RequestLogger
from services.upstream import ForwardingEngine

PROXY_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD"]

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
    "Access-Control-Allow-Credentials": "false",
}


def create_app(
    config: Config,
    logger: RequestLogger,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(title=SERVICE_NAME, version=VERSION)
    app.state.forwarding_engine = ForwardingEngine(
        logger,
        HeaderBuilder(),
        max_body_bytes=config.limits.max_body_bytes,
        transport=transport,
    )

    @app.middleware("http")
    async def add_cors_headers(request: Request, call_next):
        # Unconditional, whatever the Origin; relayed target values win
        response = await call_next(request)
        for key, value in CORS_HEADERS.items():
            response.headers.setdefault(key, value)
        return response

    @app.api_route("/", methods=PROXY_METHODS)
    @app.api_route("/health", methods=PROXY_METHODS)
    async def health():
        return await handle_health()

    @app.api_route("/proxy", methods=PROXY_METHODS)
    async def proxy(request: Request):
        return await handle_proxy(request, config)

    @app.api_route("/{path:path}", methods=[*PROXY_METHODS, "OPTIONS"])
    async def fallback(request: Request, path: str):
        return await handle_fallback(request)

    return app
