"""
Unit tests for the stubbed customer notifications.
"""
from types import SimpleNamespace

import pytest
from loguru import logger

from bikeride.notifications import build_message, send_booking_notifications


@pytest.fixture
def captured_logs():
    messages = []
    handler_id = logger.add(messages.append, format="{message}")
    yield messages
    logger.remove(handler_id)


def test_approve_message():
    message = build_message("Trail Blazer", "approve")
    assert message.startswith("Great news!")
    assert "Trail Blazer" in message


def test_reject_message():
    assert "declined" in build_message("Trail Blazer", "reject")


def test_unknown_action():
    with pytest.raises(ValueError):
        build_message("Trail Blazer", "archive")


def test_send_logs_whatsapp_and_email(captured_logs):
    booking = SimpleNamespace(customer_phone="+15550001111", customer_email="rider@example.com")
    send_booking_notifications(booking, "Trail Blazer", "approve")
    text = "".join(captured_logs)
    assert "Sending WhatsApp to +15550001111" in text
    assert "Sending Email to rider@example.com" in text
