"""Target URL validation - turns the ``url`` query value into a descriptor."""

from urllib.parse import urlsplit

import httpx

from core.exceptions import InvalidTarget, MissingTarget
from core.request_types import DEFAULT_PORTS, TargetDescriptor


def parse_target(raw: str | None) -> TargetDescriptor:
    """Parse and validate an absolute target URL.

    Raises:
        MissingTarget: ``raw`` is None or empty
        InvalidTarget: ``raw`` lacks a scheme or host, or is otherwise malformed
    """
    if not raw:
        raise MissingTarget()

    try:
        parts = urlsplit(raw)
        port = parts.port
    except ValueError as e:
        raise InvalidTarget(str(e), target=raw) from e

    if not parts.scheme or not parts.netloc or not parts.hostname:
        raise InvalidTarget("URL must include a scheme and a host", target=raw)

    try:
        httpx.URL(raw)
    except httpx.InvalidURL as e:
        raise InvalidTarget(str(e), target=raw) from e

    scheme = parts.scheme.lower()
    return TargetDescriptor(
        raw=raw,
        scheme=scheme,
        host=parts.hostname,
        port=port if port is not None else DEFAULT_PORTS.get(scheme),
        path=parts.path,
        query=parts.query,
    )
