"""Unit tests for logging processors and correlation ID context."""

import structlog

from fileserve.core.logging import (
    add_correlation_id,
    bind_correlation_id,
    clear_context,
    new_correlation_id,
    rename_message_field,
)


def test_new_correlation_id_format():
    correlation_id = new_correlation_id()

    assert correlation_id.startswith("cid_")
    assert len(correlation_id) == 16
    assert new_correlation_id() != correlation_id


def test_add_correlation_id_keeps_existing():
    event_dict = add_correlation_id(None, "info", {"event": "x", "correlation_id": "cid_abc"})

    assert event_dict["correlation_id"] == "cid_abc"


def test_add_correlation_id_generates_when_missing():
    event_dict = add_correlation_id(None, "info", {"event": "x"})

    assert event_dict["correlation_id"].startswith("cid_")


def test_rename_message_field():
    event_dict = rename_message_field(None, "info", {"event": "File not found"})

    assert event_dict == {"message": "File not found"}


def test_bind_and_clear_context():
    bind_correlation_id("cid_request")
    try:
        assert structlog.contextvars.get_contextvars()["correlation_id"] == "cid_request"
    finally:
        clear_context()

    assert "correlation_id" not in structlog.contextvars.get_contextvars()
