"""Forwarding engine - one outbound round trip per proxied request."""

import asyncio
import time

import httpx

from core.exceptions import (
    InternalFault,
    InvalidTarget,
    ProxyError,
    ResponseTooLarge,
    TargetTimeout,
    UnreachableTarget,
)
from core.headers import HeaderBuilder
from core.protocols import RequestLogger
from core.request_types import InboundRequest, OutboundRequest, RelayedResponse, TargetDescriptor

FORWARD_TIMEOUT = 30.0
MAX_BODY_SIZE = 50 * 1024 * 1024  # 50MB
SUPPORTED_SCHEMES = ("http", "https")


class ForwardingEngine:
    """Re-issue inbound requests against their target and relay the answer.

    Every call opens its own client and closes it once the response body has
    been buffered; nothing is shared between concurrent requests.
    """

    def __init__(
        self,
        logger: RequestLogger,
        header_builder: HeaderBuilder | None = None,
        *,
        timeout: float = FORWARD_TIMEOUT,
        max_body_bytes: int = MAX_BODY_SIZE,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._logger = logger
        self._headers = header_builder or HeaderBuilder()
        self._timeout = timeout
        self._max_body_bytes = max_body_bytes
        self._transport = transport

    def build_request(self, inbound: InboundRequest, target: TargetDescriptor) -> OutboundRequest:
        """Derive the outbound request: same method and body, merged headers."""
        if target.scheme not in SUPPORTED_SCHEMES:
            raise InvalidTarget(f"Unsupported scheme: {target.scheme}", target=target.raw)
        return OutboundRequest(
            method=inbound.method,
            url=target.url,
            headers=self._headers.build_outbound_headers(inbound.headers, target),
            body=inbound.body,
        )

    async def forward(self, inbound: InboundRequest, target: TargetDescriptor) -> RelayedResponse:
        """Forward ``inbound`` to ``target``; failures come back as JSON responses."""
        started = time.perf_counter()
        self._logger.log_forward(inbound.method, target.raw)
        try:
            outbound = self.build_request(inbound, target)
            relayed = await self._round_trip(outbound, target)
        except ProxyError as e:
            self._logger.log_error(target.raw, e.status_code, str(e))
            return RelayedResponse.error(e.status_code, e.to_payload())
        except Exception as e:
            fault = InternalFault(str(e) or type(e).__name__)
            self._logger.log_error(target.raw, fault.status_code, str(fault))
            return RelayedResponse.error(fault.status_code, fault.to_payload())

        elapsed_ms = (time.perf_counter() - started) * 1000
        self._logger.log_response(inbound.method, target.raw, relayed.status_code, elapsed_ms)
        return relayed

    async def _round_trip(self, outbound: OutboundRequest, target: TargetDescriptor) -> RelayedResponse:
        """Send the request and buffer the full response within the timeout budget."""
        request = httpx.Request(
            outbound.method,
            outbound.url,
            headers=outbound.headers,
            content=outbound.body or None,
            extensions={"timeout": httpx.Timeout(self._timeout).as_dict()},
        )
        try:
            async with asyncio.timeout(self._timeout):
                async with self._client_for(target) as client:
                    response = await client.send(request, stream=True)
                    try:
                        body = await self._read_body(response, target)
                    finally:
                        await response.aclose()
        except TimeoutError as e:
            raise TargetTimeout(
                f"No response within {self._timeout:g} seconds", target=target.raw
            ) from e
        except httpx.TimeoutException as e:
            raise TargetTimeout(str(e) or "Request timed out", target=target.raw) from e
        except httpx.RequestError as e:
            raise UnreachableTarget(str(e) or type(e).__name__, target=target.raw) from e

        return RelayedResponse(
            status_code=response.status_code,
            headers=self._headers.build_relayed_headers(response.headers),
            body=body,
        )

    async def _read_body(self, response: httpx.Response, target: TargetDescriptor) -> bytes:
        """Collect the raw (still content-encoded) body, enforcing the size cap."""
        chunks: list[bytes] = []
        size = 0
        async for chunk in response.aiter_raw():
            size += len(chunk)
            if size > self._max_body_bytes:
                raise ResponseTooLarge(
                    f"Response body exceeds {self._max_body_bytes} bytes", target=target.raw
                )
            chunks.append(chunk)
        return b"".join(chunks)

    def _client_for(self, target: TargetDescriptor) -> httpx.AsyncClient:
        """Open a one-shot client; certificate checks apply to https targets only."""
        return httpx.AsyncClient(
            transport=self._transport,
            verify=target.scheme == "https",
            follow_redirects=False,
            trust_env=False,
        )
