import time

import pytest

from app.webhook_security import (
    WebhookPayloadError,
    WebhookSignatureError,
    create_webhook_signature,
    parse_stripe_event,
    parse_stripe_signature_header,
    verify_stripe_signature,
    verify_timestamp,
)

SECRET = "whsec_unit"
PAYLOAD = b'{"id": "evt_1", "type": "checkout.session.completed"}'


def test_valid_signature_is_accepted():
    header = create_webhook_signature(SECRET, PAYLOAD)
    verify_stripe_signature(PAYLOAD, header, SECRET)


def test_any_matching_v1_entry_is_accepted():
    ts = int(time.time())
    good = create_webhook_signature(SECRET, PAYLOAD, timestamp=ts).split("v1=")[1]
    header = f"t={ts},v1=deadbeef,v1={good}"
    verify_stripe_signature(PAYLOAD, header, SECRET)


def test_tampered_payload_is_rejected():
    header = create_webhook_signature(SECRET, PAYLOAD)
    with pytest.raises(WebhookSignatureError, match="No signatures found"):
        verify_stripe_signature(PAYLOAD + b" ", header, SECRET)


def test_wrong_secret_is_rejected():
    header = create_webhook_signature("whsec_other", PAYLOAD)
    with pytest.raises(WebhookSignatureError):
        verify_stripe_signature(PAYLOAD, header, SECRET)


def test_stale_timestamp_is_rejected():
    old = int(time.time()) - 3600
    header = create_webhook_signature(SECRET, PAYLOAD, timestamp=old)
    with pytest.raises(WebhookSignatureError, match="tolerance"):
        verify_stripe_signature(PAYLOAD, header, SECRET)


@pytest.mark.parametrize("header", ["", None])
def test_missing_header_is_rejected(header):
    with pytest.raises(WebhookSignatureError, match="Missing signature header"):
        verify_stripe_signature(PAYLOAD, header, SECRET)


def test_malformed_header_is_rejected():
    with pytest.raises(WebhookSignatureError, match="Invalid signature format"):
        verify_stripe_signature(PAYLOAD, "garbage", SECRET)


def test_parse_header_collects_all_v1_entries():
    ts, sigs = parse_stripe_signature_header("t=123,v1=aa,v0=zz,v1=bb")
    assert ts == "123"
    assert sigs == ["aa", "bb"]


def test_verify_timestamp_window():
    now = 1_700_000_000
    assert verify_timestamp(str(now - 10), max_age=300, now=now)
    assert not verify_timestamp(str(now - 301), max_age=300, now=now)
    assert not verify_timestamp("not-a-number", max_age=300, now=now)


def test_parse_event_returns_data_object():
    event, obj = parse_stripe_event(
        b'{"id": "evt_1", "type": "checkout.session.completed", "data": {"object": {"id": "cs_1"}}}'
    )
    assert event["type"] == "checkout.session.completed"
    assert obj == {"id": "cs_1"}


def test_parse_event_without_data_object():
    _, obj = parse_stripe_event(b'{"id": "evt_1", "type": "ping"}')
    assert obj == {}


@pytest.mark.parametrize(
    "payload",
    [
        b"not json",
        b"[]",
        b'"checkout.session.completed"',
        b'{"type": "x", "data": []}',
        b'{"type": "x", "data": {"object": "cs_1"}}',
    ],
)
def test_parse_event_rejects_non_object_bodies(payload):
    with pytest.raises(WebhookPayloadError):
        parse_stripe_event(payload)
