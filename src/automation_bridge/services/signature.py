"""Webhook request signature verification."""

import hashlib
import hmac
import logging
from typing import Optional

from automation_bridge.exceptions import ConfigurationError, SignatureError

logger = logging.getLogger(__name__)


def compute_signature(signing_secret: str, body: bytes) -> str:
    """HMAC-SHA256 of the raw request body, hex encoded."""
    return hmac.new(signing_secret.encode("utf-8"), body, hashlib.sha256).hexdigest()


def verify_signature(
    signing_secret: Optional[str],
    body: bytes,
    authorization: Optional[str],
) -> None:
    """
    Verify that a webhook body was signed with the shared signing secret.

    Args:
        signing_secret: Secret shared with the platform
        body: Exact raw request body
        authorization: Value of the ``authorization`` header

    Raises:
        ConfigurationError: If no signing secret is configured
        SignatureError: If the header is missing or does not match
    """
    if not signing_secret:
        logger.error("MONDAY_SIGNING_SECRET is not configured, rejecting webhook")
        raise ConfigurationError("Webhook signing secret is not configured.")

    if not authorization:
        logger.warning("Webhook request without authorization header")
        raise SignatureError()

    # compare_digest rejects non-ASCII str, so compare bytes
    expected = compute_signature(signing_secret, body).encode("ascii")
    received = authorization.strip().encode("utf-8", "surrogateescape")
    if not hmac.compare_digest(expected, received):
        logger.warning("Webhook signature mismatch")
        raise SignatureError()
