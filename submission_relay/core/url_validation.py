"""Outbound webhook URL checks (SSRF defense)."""

from __future__ import annotations

import ipaddress
import socket
from urllib.parse import SplitResult, urlsplit, urlunsplit

IPAddress = ipaddress.IPv4Address | ipaddress.IPv6Address


def _resolve_host(host: str, port: int) -> set[IPAddress]:
    try:
        infos = socket.getaddrinfo(host, port, type=socket.SOCK_STREAM)
    except Exception as exc:
        raise ValueError("Webhook URL host could not be resolved") from exc

    resolved: set[IPAddress] = set()
    for info in infos:
        sockaddr = info[4]
        if not sockaddr:
            continue
        try:
            resolved.add(ipaddress.ip_address(sockaddr[0]))
        except ValueError:
            continue
    return resolved


def _normalized(parts: SplitResult) -> str:
    return urlunsplit(("https", parts.netloc, parts.path, parts.query, ""))


def validate_outbound_webhook_url(url: str) -> str:
    """
    Validate the webhook receiver URL before posting submission data to it.

    Only https:// is accepted; credentials and fragments are rejected, and the
    host must resolve exclusively to publicly routable addresses.

    Returns the normalized URL or raises ValueError.
    """
    candidate = (url or "").strip()
    if not candidate:
        raise ValueError("Webhook URL is required")

    parts = urlsplit(candidate)
    if (parts.scheme or "").lower() != "https":
        raise ValueError("Webhook URL must start with https://")
    if parts.username or parts.password:
        raise ValueError("Webhook URL must not include credentials")
    if parts.fragment:
        raise ValueError("Webhook URL must not include a fragment")

    host = (parts.hostname or "").strip().lower().rstrip(".")
    if not parts.netloc or not host:
        raise ValueError("Webhook URL must include a host")

    try:
        literal = ipaddress.ip_address(host)
    except ValueError:
        literal = None

    addresses = {literal} if literal is not None else _resolve_host(host, parts.port or 443)
    if not addresses:
        raise ValueError("Webhook URL host could not be resolved")
    if any(not address.is_global for address in addresses):
        raise ValueError("Webhook URL host is not allowed")

    return _normalized(parts)
