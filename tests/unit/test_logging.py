"""Tests for log redaction."""

from passentry.logging import mask_secrets


def test_masks_entry_keys_and_session_tokens():
    key = "a" * 64
    event = mask_secrets(None, "info", {"event": "entry_key_issued", "key": key, "auth_token": "s" * 43, "user_id": "u1"})

    assert event["key"] == "aaaaaa..."
    assert event["auth_token"] == "ssssss..."
    assert event["user_id"] == "u1"
    assert key not in str(event)


def test_short_and_non_string_values():
    event = mask_secrets(None, "info", {"event": "x", "token": "abc", "key": None})
    assert event["token"] == "***"
    assert event["key"] is None
