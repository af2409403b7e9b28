"""Tally webhook signature verification.

Tally signs the raw request body with HMAC-SHA256 using the webhook's signing
secret and sends the base64-encoded digest in the ``tally-signature`` header.
"""

import base64
import hashlib
import hmac
import logging

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "tally-signature"


def sign(raw_body: bytes, secret: str) -> str:
    """Return the base64 HMAC-SHA256 signature Tally would send for ``raw_body``."""
    digest = hmac.new(secret.encode("utf-8"), raw_body, hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")


def verify(raw_body: bytes, provided_signature: str, secret: str) -> bool:
    """Check ``provided_signature`` against the body using a constant-time compare.

    Never raises: a missing signature or one that cannot be compared counts as
    a mismatch.
    """
    if not provided_signature:
        return False

    calculated = sign(raw_body, secret)
    logger.debug(f"Received signature: {provided_signature}")
    logger.debug(f"Calculated signature: {calculated}")

    try:
        return hmac.compare_digest(calculated.encode("ascii"), provided_signature.encode("utf-8"))
    except (TypeError, UnicodeEncodeError):
        return False
