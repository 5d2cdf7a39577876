"""HMAC utilities for webhook signature validation."""

import hmac
import hashlib
import logging
from typing import Optional

logger = logging.getLogger(__name__)


def compute_hmac_sha256(data: bytes, secret: str) -> str:
    """Compute the lowercase hex HMAC-SHA256 signature of ``data``."""
    return hmac.new(
        secret.encode('utf-8'),
        data,
        hashlib.sha256
    ).hexdigest()


def verify_hmac_signature(data: bytes, signature_header: Optional[str], secret: str) -> bool:
    """Verify the ``linear-signature`` header against the raw request body.

    Linear sends the bare hex digest, so the header is compared verbatim:
    no prefix is stripped and the case is not folded.
    """
    if not signature_header or not secret:
        return False

    computed_signature = compute_hmac_sha256(data, secret)

    # Compare as bytes so a header with non-ASCII characters fails cleanly
    return hmac.compare_digest(
        computed_signature.encode('utf-8'),
        signature_header.encode('utf-8'),
    )
