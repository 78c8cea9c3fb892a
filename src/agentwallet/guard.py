"""Outbound URL checks for the x402 payer.

An agent can be talked into "paying" a URL that resolves to something on
the local network or the cloud metadata service. Every URL is checked here
before the first request of a payment flow.
"""
from __future__ import annotations

import logging
from urllib.parse import urlsplit

from .errors import BlockedDestinationError, UnsupportedSchemeError

logger = logging.getLogger(__name__)

BLOCKED_HOSTS: frozenset[str] = frozenset({
    "localhost",
    "127.0.0.1",
    "0.0.0.0",
    "[::1]",
    "::1",
    "169.254.169.254",
    "metadata.google.internal",
})

BLOCKED_PREFIXES: tuple[str, ...] = (
    "10.",
    *(f"172.{octet}." for octet in range(16, 32)),
    "192.168.",
)


def is_blocked_host(hostname: str) -> bool:
    host = hostname.lower()
    return host in BLOCKED_HOSTS or host.startswith(BLOCKED_PREFIXES)


def guard_url(url: str) -> str:
    """Validate ``url`` for an x402 payment flow and return it unchanged.

    Raises:
        BlockedDestinationError: Loopback, metadata or RFC 1918 host.
        UnsupportedSchemeError: Anything but ``https``.
    """
    parts = urlsplit(url)
    hostname = (parts.hostname or "").lower()
    if is_blocked_host(hostname):
        logger.warning(f"Blocked x402 request to internal host {hostname}")
        raise BlockedDestinationError(hostname)
    if parts.scheme.lower() != "https":
        raise UnsupportedSchemeError(parts.scheme)
    if not hostname:
        raise BlockedDestinationError(hostname)
    return url


__all__ = ["BLOCKED_HOSTS", "BLOCKED_PREFIXES", "guard_url", "is_blocked_host"]
