"""Webhook signature verification."""

import hashlib
import hmac

SIGNATURE_PREFIX = "sha256="


def sign_payload(payload: bytes, secret: str) -> str:
    """Compute the X-Hub-Signature-256 header value for a payload."""
    digest = hmac.new(secret.encode(), payload, hashlib.sha256).hexdigest()
    return f"{SIGNATURE_PREFIX}{digest}"


def verify_signature(payload: bytes, signature: str | None, secret: str | None) -> bool:
    """Verify a webhook signature using HMAC-SHA256.

    The comparison runs over bytes in constant time. Any malformed input
    (missing header, wrong length, non-ASCII characters) yields False.

    Args:
        payload: Raw request body bytes, exactly as received
        signature: X-Hub-Signature-256 header value
        secret: Shared webhook secret

    Returns:
        True if valid, False otherwise
    """
    if not signature or not secret:
        return False

    expected = sign_payload(payload, secret).encode()
    try:
        received = signature.encode("ascii")
    except UnicodeEncodeError:
        return False

    return hmac.compare_digest(expected, received)
