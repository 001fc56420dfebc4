"""Webhook signature and credential display helpers."""

import hashlib
import hmac

SIGNATURE_PREFIX = "sha256="


def compute_signature(secret: str, body: bytes) -> str:
    """Return ``sha256=<hex>`` HMAC-SHA256 of the raw body."""
    digest = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()
    return f"{SIGNATURE_PREFIX}{digest}"


def verify_signature(secret: str, body: bytes, signature: str) -> bool:
    """Check a ``sha256=<hex>`` signature header against the raw body.

    Args:
        secret: Shared webhook secret
        body: Exact request body bytes
        signature: Header value supplied by the caller

    Returns:
        True if the signature matches
    """
    expected = compute_signature(secret, body)
    return hmac.compare_digest(signature.encode("utf-8"), expected.encode("utf-8"))


def mask_api_key(api_key: str) -> str:
    """Display form of an API key: first 8 and last 4 characters."""
    if len(api_key) <= 12:
        return "..."
    return f"{api_key[:8]}...{api_key[-4:]}"
