"""Security utilities for edit tokens and shared-secret checks."""

import hashlib
import hmac


# =============================================================================
# Shared secrets
# =============================================================================

def verify_secret(expected: str | None, provided: str | None) -> bool:
    """
    Constant-time comparison of a stored secret against a presented one.

    An empty or missing stored secret never matches, not even an empty
    presented value. Legacy entries without a token therefore cannot be
    opened for editing.
    """
    if not expected or not provided:
        return False
    return hmac.compare_digest(str(expected).encode("utf-8"), str(provided).encode("utf-8"))


# =============================================================================
# Keyed hashes
# =============================================================================

def keyed_hash(message: str, secret: str) -> str:
    """HMAC-SHA256 hex digest of `message` keyed with `secret`."""
    return hmac.new(secret.encode("utf-8"), message.encode("utf-8"), hashlib.sha256).hexdigest()


def mask_token(token: str | None) -> str:
    """Shorten a token for log output (first 8 chars only)."""
    if not token:
        return ""
    return f"{token[:8]}..."
