"""Webhook signature verification."""

import hashlib
import hmac

SIGNATURE_PREFIX = "sha256="


def sign_body(body: bytes, secret: str) -> str:
    """Return the ``sha256=<hex>`` signature of ``body`` under ``secret``."""
    digest = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()
    return SIGNATURE_PREFIX + digest


def verify_signature(body: bytes, signature: str, secret: str) -> bool:
    """Return True if the request signature matches the shared secret."""
    if not signature.startswith(SIGNATURE_PREFIX):
        return False
    return hmac.compare_digest(sign_body(body, secret), signature)
