"""Header construction for outbound requests."""

from collections.abc import Iterable

import httpx

from core.request_types import TargetDescriptor

USER_AGENT = "NetSuite-Proxy/1.0.0 (Mozilla/5.0)"
ACCEPT_ENCODING = "gzip, deflate"

# Connection-scoped headers (RFC 7230 6.1) plus framing the client recomputes
HOP_BY_HOP_HEADERS = frozenset(
    {
        "connection",
        "keep-alive",
        "proxy-authenticate",
        "proxy-authorization",
        "proxy-connection",
        "te",
        "trailer",
        "trailers",
        "transfer-encoding",
        "upgrade",
    }
)
FRAMING_HEADERS = frozenset({"content-length"})


class HeaderBuilder:
    """Build outbound and relayed header sets."""

    def __init__(self, user_agent: str = USER_AGENT) -> None:
        self.user_agent = user_agent

    def overrides(self, target: TargetDescriptor) -> list[tuple[str, str]]:
        """Headers the proxy always sets, whatever the caller sent."""
        return [
            ("User-Agent", self.user_agent),
            ("Host", target.host_header),
            ("Accept-Encoding", ACCEPT_ENCODING),
        ]

    def build_outbound_headers(
        self,
        inbound: Iterable[tuple[str, str]],
        target: TargetDescriptor,
    ) -> httpx.Headers:
        """Merge inbound headers with the override set, overrides last."""
        overrides = self.overrides(target)
        skipped = HOP_BY_HOP_HEADERS | FRAMING_HEADERS | {k.lower() for k, _ in overrides}
        merged = [(key, value) for key, value in inbound if key.lower() not in skipped]
        merged.extend(overrides)
        # Latin-1 maps each obs-text byte back to itself on the wire
        return httpx.Headers(merged, encoding="latin-1")

    def build_relayed_headers(self, upstream: httpx.Headers) -> list[tuple[str, str]]:
        """Target headers minus those scoped to the upstream connection."""
        relayed = [(key.decode("latin-1").lower(), value.decode("latin-1")) for key, value in upstream.raw]
        return [(key, value) for key, value in relayed if key not in HOP_BY_HOP_HEADERS]
