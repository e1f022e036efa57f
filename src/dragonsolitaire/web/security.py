"""Client identity helpers for the web API."""

from __future__ import annotations

import hashlib
import hmac
from typing import Optional

from fastapi import Request

from dragonsolitaire.config import get_ip_salt


def get_real_ip(request: Request) -> str:
    """Get real client IP, handling reverse proxy.

    Returns the first address in X-Forwarded-For when present.
    """
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        # X-Forwarded-For: client, proxy1, proxy2
        return forwarded.split(",")[0].strip()
    if request.client is None:
        return "0.0.0.0"
    return request.client.host


def hash_ip(ip: str, salt: Optional[str] = None) -> str:
    """HMAC-SHA256 of an IP address, so sessions store no raw addresses.

    Args:
        ip: IP address to hash
        salt: Secret salt (defaults to DRAGONSOLITAIRE_IP_SALT)

    Returns:
        Hex-encoded hash, truncated for storage
    """
    if salt is None:
        salt = get_ip_salt()
    return hmac.new(salt.encode(), ip.encode(), hashlib.sha256).hexdigest()[:32]
