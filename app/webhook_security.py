"""
Webhook Security Module

Signature verification for Stripe webhook endpoints:
- Constant-time signature comparison
- Timestamp tolerance check against replayed deliveries
- Verification runs on the raw request body, before any JSON parsing
"""

import hashlib
import hmac
import json
import logging
import time
from typing import Optional

logger = logging.getLogger(__name__)

# Maximum age of webhook in seconds (5 minutes)
MAX_WEBHOOK_AGE_SECONDS = 300


class WebhookSignatureError(Exception):
    """Raised when webhook signature verification fails"""

    pass


class WebhookPayloadError(Exception):
    """Raised when a verified webhook body is not a usable Stripe event"""

    pass


def constant_time_compare(a: str, b: str) -> bool:
    """Compare two strings in constant time"""
    if not a or not b:
        return False
    return hmac.compare_digest(a, b)


def compute_hmac_sha256(secret: str, payload: bytes) -> str:
    """Compute HMAC-SHA256 signature of payload"""
    return hmac.new(secret.encode("utf-8"), payload, hashlib.sha256).hexdigest()


def verify_timestamp(
    timestamp: Optional[str],
    max_age: int = MAX_WEBHOOK_AGE_SECONDS,
    now: Optional[int] = None,
) -> bool:
    """
    Verify webhook timestamp is within acceptable range.

    Args:
        timestamp: Unix timestamp as string
        max_age: Maximum age in seconds
        now: Current unix time (defaults to time.time())

    Returns:
        True if timestamp is valid, False otherwise
    """
    if not timestamp:
        return False

    try:
        webhook_time = int(timestamp)
        current_time = int(now if now is not None else time.time())
        age = abs(current_time - webhook_time)

        if age > max_age:
            logger.warning(f"🚫 Webhook timestamp too old: {age}s (max: {max_age}s)")
            return False

        return True
    except (ValueError, TypeError):
        logger.warning(f"🚫 Invalid webhook timestamp format: {timestamp}")
        return False


def parse_stripe_signature_header(signature_header: str) -> tuple[Optional[str], list[str]]:
    """
    Parse a Stripe-Signature header.

    Format: "t=<timestamp>,v1=<signature>[,v1=<signature>...][,v0=...]"
    Several v1 entries are sent while an endpoint secret is being rolled.

    Returns:
        Tuple of (timestamp, list of v1 signatures)
    """
    timestamp = None
    signatures = []
    for item in signature_header.split(","):
        key, sep, value = item.strip().partition("=")
        if not sep:
            continue
        if key == "t":
            timestamp = value
        elif key == "v1":
            signatures.append(value)
    return timestamp, signatures


def verify_stripe_signature(
    payload: bytes,
    signature_header: str,
    secret: str,
    tolerance: int = MAX_WEBHOOK_AGE_SECONDS,
    now: Optional[int] = None,
) -> None:
    """
    Verify a Stripe webhook signature.

    Stripe signs "<timestamp>.<raw body>" with HMAC-SHA256 using the endpoint
    secret and sends the hex digest as a v1 entry of the Stripe-Signature header.

    Raises:
        WebhookSignatureError: if the header is malformed, stale, or no v1 matches
    """
    if not signature_header:
        raise WebhookSignatureError("Missing signature header")

    timestamp, signatures = parse_stripe_signature_header(signature_header)
    if not timestamp or not signatures:
        logger.warning("🚫 Stripe webhook invalid signature format")
        raise WebhookSignatureError("Invalid signature format")

    if not verify_timestamp(timestamp, max_age=tolerance, now=now):
        raise WebhookSignatureError("Timestamp outside the tolerance zone")

    signed_payload = timestamp.encode("utf-8") + b"." + payload
    expected_signature = compute_hmac_sha256(secret, signed_payload)

    if not any(constant_time_compare(expected_signature, sig) for sig in signatures):
        logger.warning("🚫 Stripe webhook signature mismatch")
        raise WebhookSignatureError("No signatures found matching the expected signature")

    logger.debug("✅ Stripe webhook signature verified")


def parse_stripe_event(payload: bytes) -> tuple[dict, dict]:
    """
    Decode a Stripe event body.

    Returns:
        Tuple of (event, data.object); data.object is {} when absent

    Raises:
        WebhookPayloadError: if the body is not JSON, or the event or its
            data.object is not a JSON object
    """
    try:
        event = json.loads(payload)
    except ValueError:
        raise WebhookPayloadError("Invalid JSON payload")

    if not isinstance(event, dict):
        raise WebhookPayloadError("Event payload must be a JSON object")

    data = event.get("data") or {}
    if not isinstance(data, dict):
        raise WebhookPayloadError("Event data must be a JSON object")

    obj = data.get("object") or {}
    if not isinstance(obj, dict):
        raise WebhookPayloadError("Event data.object must be a JSON object")

    return event, obj


def create_webhook_signature(secret: str, payload: bytes, timestamp: Optional[int] = None) -> str:
    """
    Create a Stripe-Signature header value for testing.

    Args:
        secret: Signing secret
        payload: Request body bytes
        timestamp: Unix timestamp to sign with (defaults to now)

    Returns:
        Header value in Stripe's "t=...,v1=..." format
    """
    ts = int(timestamp if timestamp is not None else time.time())
    sig = compute_hmac_sha256(secret, str(ts).encode("utf-8") + b"." + payload)
    return f"t={ts},v1={sig}"
