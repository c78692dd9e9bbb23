"""
Fixed-date convention for time-of-day columns.

The engine only offers full timestamps, so a time of day is stored on a
constant calendar date and only the hour and minute are meaningful.
"""

from __future__ import annotations

from datetime import date, datetime, time

FIXED_DATE = date(1999, 12, 30)


def encode_time_of_day(hour: int, minute: int) -> datetime:
    """Timestamp on FIXED_DATE carrying `hour:minute`."""
    return datetime.combine(FIXED_DATE, time(hour, minute))


def decode_time_of_day(value: datetime) -> time:
    """Hour and minute of a stored timestamp; the date part is ignored."""
    return time(value.hour, value.minute)


def pin_to_fixed_date(value: datetime) -> datetime:
    """Move a timestamp onto FIXED_DATE, dropping seconds and below."""
    return encode_time_of_day(value.hour, value.minute)


__all__ = ["FIXED_DATE", "decode_time_of_day", "encode_time_of_day", "pin_to_fixed_date"]
