"""Tests for logging helpers."""

import logging

import pytest

from shopify_admin_mcp.utils.logger import (
    _correlation_id_processor,
    _redact_processor,
    correlation_id_var,
    new_correlation_id,
    setup_logging,
)


def test_tokens_are_redacted():
    event = {
        "event": "Request failed for shpat_abc123DEF",
        "access_token": "anything",
        "shop_domain": "test-shop.myshopify.com",
    }

    redacted = _redact_processor(None, "info", event)

    assert redacted["event"] == "Request failed for [REDACTED]"
    assert redacted["access_token"] == "[REDACTED]"
    assert redacted["shop_domain"] == "test-shop.myshopify.com"


def test_correlation_id_is_attached():
    cid = new_correlation_id()

    event = _correlation_id_processor(None, "info", {"event": "Tool invoked"})

    assert event["correlation_id"] == cid == correlation_id_var.get()
    assert len(cid) == 8


def test_invalid_level_rejected():
    with pytest.raises(ValueError):
        setup_logging(level="LOUD")


def test_nested_secrets_are_redacted():
    event = {
        "event": "Sending request",
        "headers": {"X-Shopify-Access-Token": "shpat_abc", "Content-Type": "application/json"},
        "errors": ["token shpca_XYZ789 rejected"],
    }

    redacted = _redact_processor(None, "debug", event)

    assert redacted["headers"] == {
        "X-Shopify-Access-Token": "[REDACTED]",
        "Content-Type": "application/json",
    }
    assert redacted["errors"] == ["token [REDACTED] rejected"]


def test_log_file_is_private(tmp_path):
    log_file = tmp_path / "logs" / "server.log"

    setup_logging(level="debug", log_file=str(log_file))
    root = logging.getLogger()
    try:
        assert log_file.exists()
        assert log_file.stat().st_mode & 0o777 == 0o600
    finally:
        for handler in [h for h in root.handlers if isinstance(h, logging.FileHandler)]:
            root.removeHandler(handler)
            handler.close()
