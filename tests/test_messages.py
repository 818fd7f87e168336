from datetime import datetime, timezone

from chatrelay.services.messages import format_message, format_time


def test_format_message_carries_sender_and_text():
    now = datetime(2024, 1, 1, 9, 5, tzinfo=timezone.utc)

    message = format_message("Bob", "hi", now=now, tz_name="Asia/Dhaka")

    assert message.username == "Bob"
    assert message.text == "hi"
    assert message.time == "3:05 pm"


def test_format_message_passes_text_through():
    message = format_message("Bob", "", now=datetime.now(timezone.utc))

    assert message.text == ""


def test_format_message_defaults_to_configured_timezone(monkeypatch):
    from chatrelay.core.config import settings

    monkeypatch.setattr(settings, "CHAT_TIMEZONE", "UTC")
    now = datetime(2024, 6, 1, 23, 59, tzinfo=timezone.utc)

    assert format_message("Bob", "hi", now=now).time == "11:59 pm"


def test_format_time_midnight_and_noon():
    midnight = datetime(2024, 1, 1, 0, 7, tzinfo=timezone.utc)
    noon = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    assert format_time(midnight, "UTC") == "12:07 am"
    assert format_time(noon, "UTC") == "12:00 pm"


def test_format_time_is_deterministic():
    now = datetime(2024, 3, 10, 18, 30, tzinfo=timezone.utc)

    assert format_time(now, "Asia/Dhaka") == format_time(now, "Asia/Dhaka") == "12:30 am"
