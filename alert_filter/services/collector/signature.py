"""Verification of Slack request signatures."""

import hashlib
import hmac
import time
from collections.abc import Mapping

from alert_filter.common.errors import StaleRequest, Unauthorized

SIGNATURE_HEADER = "x-slack-signature"
TIMESTAMP_HEADER = "x-slack-request-timestamp"
SIGNATURE_VERSION = "v0"

DEFAULT_TOLERANCE_SECONDS = 60 * 5


def compute_signature(secret: str, timestamp: str, body: bytes) -> str:
    """Signature over ``v0:{timestamp}:{body}`` as sent by Slack."""
    base = f"{SIGNATURE_VERSION}:{timestamp}:".encode("utf-8") + body
    digest = hmac.new(secret.encode("utf-8"), base, hashlib.sha256).hexdigest()
    return f"{SIGNATURE_VERSION}={digest}"


def verify_request(
    body: bytes,
    headers: Mapping[str, str],
    signing_secret: str,
    tolerance_seconds: int = DEFAULT_TOLERANCE_SECONDS,
    now: float | None = None,
) -> int:
    """Verify a signed callback and return its timestamp.

    The signature is checked before the timestamp, so a request with a
    forged body is always reported as unauthorized.

    Raises:
        Unauthorized: if the signature is missing, malformed or wrong
        StaleRequest: if the timestamp is outside the freshness window
    """
    normalized = {key.lower(): value for key, value in headers.items()}
    signature = normalized.get(SIGNATURE_HEADER)
    timestamp = normalized.get(TIMESTAMP_HEADER)

    if not signature or not timestamp:
        raise Unauthorized("signature or timestamp header is missing")
    if not signature.startswith(f"{SIGNATURE_VERSION}="):
        raise Unauthorized("unsupported signature version")

    try:
        issued_at = int(timestamp)
    except ValueError as e:
        raise Unauthorized("timestamp header is not an integer") from e

    expected = compute_signature(signing_secret, timestamp, body)
    if not hmac.compare_digest(expected.encode("utf-8"), signature.encode("utf-8")):
        raise Unauthorized("signature mismatch")

    current = time.time() if now is None else now
    if abs(current - issued_at) > tolerance_seconds:
        raise StaleRequest(f"request timestamp {issued_at} is outside the freshness window")

    return issued_at
