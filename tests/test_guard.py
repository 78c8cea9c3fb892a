"""Tests for agentwallet.guard."""

from __future__ import annotations

import pytest

from agentwallet.errors import BlockedDestinationError, UnsupportedSchemeError
from agentwallet.guard import guard_url, is_blocked_host


class TestGuardUrl:
    @pytest.mark.parametrize(
        "url",
        [
            "http://169.254.169.254/latest/meta-data/",
            "https://localhost:8443/",
            "https://127.0.0.1/",
            "https://0.0.0.0/",
            "https://[::1]/",
            "https://metadata.google.internal/computeMetadata/v1/",
            "https://10.0.0.5/paid",
            "https://172.16.0.1/",
            "https://172.31.255.255/",
            "https://192.168.1.10/",
            "https://LOCALHOST/",
        ],
    )
    def test_blocks_internal_hosts(self, url):
        with pytest.raises(BlockedDestinationError) as exc_info:
            guard_url(url)
        assert exc_info.value.code == "BLOCKED_DESTINATION"

    def test_internal_host_wins_over_scheme(self):
        with pytest.raises(BlockedDestinationError):
            guard_url("http://192.168.0.1/")

    @pytest.mark.parametrize("url", ["http://api.example.com/", "ftp://api.example.com/x"])
    def test_requires_https(self, url):
        with pytest.raises(UnsupportedSchemeError):
            guard_url(url)

    @pytest.mark.parametrize(
        "url",
        [
            "https://api.example.com/premium",
            "https://172.32.0.1/",
            "https://172.15.0.1/",
            "https://11.0.0.1/",
        ],
    )
    def test_allows_public_hosts(self, url):
        assert guard_url(url) == url

    def test_missing_host(self):
        with pytest.raises(BlockedDestinationError):
            guard_url("https:///path-only")


class TestIsBlockedHost:
    def test_prefix_match(self):
        assert is_blocked_host("10.1.2.3")
        assert is_blocked_host("172.20.0.9")
        assert not is_blocked_host("100.64.0.1")
