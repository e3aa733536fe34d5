"""Shared request data types."""

import json
from dataclasses import dataclass, field
from typing import Any

import httpx

DEFAULT_PORTS = {"http": 80, "https": 443}


@dataclass(frozen=True)
class InboundRequest:
    """Request as received by the proxy endpoint."""

    method: str
    headers: list[tuple[str, str]]
    body: bytes = b""
    target: str | None = None


@dataclass(frozen=True)
class TargetDescriptor:
    """Parsed absolute target URL."""

    raw: str
    scheme: str
    host: str
    port: int | None
    path: str
    query: str

    @property
    def path_with_query(self) -> str:
        path = self.path or "/"
        return f"{path}?{self.query}" if self.query else path

    @property
    def host_header(self) -> str:
        """Host header value: hostname only, bracketed for IPv6 literals."""
        if ":" in self.host:
            return f"[{self.host}]"
        return self.host

    @property
    def url(self) -> str:
        authority = self.host_header
        if self.port is not None and self.port != DEFAULT_PORTS.get(self.scheme):
            authority = f"{authority}:{self.port}"
        return f"{self.scheme}://{authority}{self.path_with_query}"


@dataclass(frozen=True)
class OutboundRequest:
    """Request the engine sends to the target."""

    method: str
    url: str
    headers: httpx.Headers
    body: bytes = b""


@dataclass(frozen=True)
class RelayedResponse:
    """Response handed back to the caller."""

    status_code: int
    headers: list[tuple[str, str]] = field(default_factory=list)
    body: bytes = b""

    @classmethod
    def error(cls, status_code: int, payload: dict[str, Any]) -> "RelayedResponse":
        """Synthesize a JSON error response."""
        return cls(
            status_code=status_code,
            headers=[("content-type", "application/json")],
            body=json.dumps(payload).encode(),
        )
