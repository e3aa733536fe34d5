"""Tests for target URL validation."""

import pytest

from core.exceptions import InvalidTarget, MissingTarget
from core.target import parse_target


class TestParseTarget:
    """Test parse_target accept/reject behaviour."""

    def test_https_url_with_path_and_query(self):
        """Test that every component of a full URL is captured."""
        target = parse_target("https://api.example.test/v1/items?limit=5&q=a%20b")

        assert target.scheme == "https"
        assert target.host == "api.example.test"
        assert target.port == 443
        assert target.path == "/v1/items"
        assert target.query == "limit=5&q=a%20b"
        assert target.path_with_query == "/v1/items?limit=5&q=a%20b"

    def test_default_http_port(self):
        """Test that http targets without a port default to 80."""
        target = parse_target("http://example.test")

        assert target.port == 80
        assert target.path_with_query == "/"
        assert target.url == "http://example.test/"

    def test_explicit_port_kept(self):
        """Test that an explicit port survives into the outbound URL."""
        target = parse_target("http://127.0.0.1:8080/status")

        assert target.port == 8080
        assert target.url == "http://127.0.0.1:8080/status"

    def test_scheme_is_normalised(self):
        """Test that an upper-case scheme is lowered."""
        assert parse_target("HTTPS://example.test/").scheme == "https"

    def test_ipv6_host_header_is_bracketed(self):
        """Test IPv6 literals are bracketed when used as Host."""
        target = parse_target("http://[::1]:9000/x")

        assert target.host == "::1"
        assert target.host_header == "[::1]"
        assert target.url == "http://[::1]:9000/x"

    def test_fragment_is_not_forwarded(self):
        """Test that the fragment never reaches the target."""
        target = parse_target("https://example.test/page?a=1#section")

        assert target.url == "https://example.test/page?a=1"

    def test_other_schemes_pass_validation(self):
        """Test that scheme restriction is left to the forwarding engine."""
        target = parse_target("ftp://files.example.test/pub")

        assert target.scheme == "ftp"
        assert target.port is None

    @pytest.mark.parametrize("raw", [None, ""])
    def test_missing_target(self, raw):
        """Test that an absent or empty parameter is MissingTarget."""
        with pytest.raises(MissingTarget):
            parse_target(raw)

    @pytest.mark.parametrize(
        "raw",
        ["not-a-url", "ftp:/bad", "http://", "/relative/path", "http://example.test:99999/"],
    )
    def test_invalid_target(self, raw):
        """Test that malformed URLs are rejected with the raw value attached."""
        with pytest.raises(InvalidTarget) as exc_info:
            parse_target(raw)

        assert exc_info.value.target == raw
        assert exc_info.value.to_payload() == {"error": "Invalid URL format", "target": raw}
