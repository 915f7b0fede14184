"""Unit tests for logging processors."""

import structlog

from core.logging import bind_request_context, mask_phone, redact_phone_numbers


def test_mask_phone_keeps_last_two_digits():
    assert mask_phone("+15551234567") == "*********67"


def test_mask_short_value():
    assert mask_phone("12") == "**"


def test_redacts_known_keys_only():
    event = {"event": "sms_send_failed", "phone": "+15551234567", "note": "+15551234567"}

    result = redact_phone_numbers(None, "info", event)

    assert result["phone"] == "*********67"
    assert result["note"] == "+15551234567"


def test_non_string_values_untouched():
    event = {"event": "x", "target_phone": None}

    assert redact_phone_numbers(None, "info", event)["target_phone"] is None


def test_bind_request_context_replaces_previous():
    bind_request_context({"request_id": "a", "path": "/one"})
    bind_request_context({"request_id": "b"})

    context = structlog.contextvars.get_contextvars()

    assert context == {"request_id": "b"}
    structlog.contextvars.clear_contextvars()
