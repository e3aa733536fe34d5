"""FastAPI route handlers."""

from datetime import UTC, datetime
from typing import Any

from fastapi import Request, Response
from fastapi.responses import JSONResponse

from core.config import SERVICE_NAME, VERSION, Config
from core.exceptions import ProxyError, RequestTooLarge
from core.request_types import InboundRequest, RelayedResponse
from core.target import parse_target
from ui.log_utils import write_cli_log, write_incoming_log


async def _read_body(request: Request, limit: int) -> bytes:
    """Buffer the inbound body, refusing anything over ``limit`` bytes."""
    chunks: list[bytes] = []
    size = 0
    async for chunk in request.stream():
        size += len(chunk)
        if size > limit:
            raise RequestTooLarge(limit)
        chunks.append(chunk)
    return b"".join(chunks)


def _inbound_headers(request: Request) -> list[tuple[str, str]]:
    return [(key.decode("latin-1"), value.decode("latin-1")) for key, value in request.headers.raw]


def _relay(relayed: RelayedResponse) -> Response:
    """Turn a RelayedResponse into a Starlette response, keeping repeated headers."""
    response = Response(content=relayed.body, status_code=relayed.status_code)
    if any(key.lower() == "content-length" for key, _ in relayed.headers):
        del response.headers["content-length"]
    for key, value in relayed.headers:
        response.headers.append(key, value)
    return response


async def handle_proxy(request: Request, config: Config) -> Response:
    """Handle /proxy?url=... by forwarding to the target URL."""
    raw_target = request.query_params.get("url")
    try:
        target = parse_target(raw_target)
        body = await _read_body(request, config.limits.max_body_bytes)
    except ProxyError as e:
        write_cli_log("REJECTED", e.error, target=raw_target, status=e.status_code)
        return JSONResponse(status_code=e.status_code, content=e.to_payload())

    inbound = InboundRequest(
        method=request.method,
        headers=_inbound_headers(request),
        body=body,
        target=raw_target,
    )
    if config.proxy.debug:
        write_incoming_log(inbound.method, inbound.target, inbound.headers, inbound.body)

    engine = request.app.state.forwarding_engine
    relayed = await engine.forward(inbound, target)
    return _relay(relayed)


async def handle_health() -> dict[str, Any]:
    """Static status document for /health and /."""
    return {
        "status": "ok",
        "service": SERVICE_NAME,
        "version": VERSION,
        "timestamp": datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
    }


async def handle_fallback(request: Request) -> Response:
    """Answer CORS preflight for any path; everything else is unknown."""
    if request.method == "OPTIONS":
        return Response(status_code=200)
    return JSONResponse(status_code=404, content={"error": "Not found"})
