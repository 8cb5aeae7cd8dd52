"""UTC-everywhere time handling, plus the calendar formats bookings use."""

from datetime import date, datetime, time, timezone


def now_utc() -> datetime:
    """
    Current time in UTC.

    Use this instead of datetime.now() everywhere.
    """
    return datetime.now(timezone.utc)


def to_utc(dt: datetime) -> datetime:
    """
    Convert a datetime to UTC.

    Raises ValueError if datetime is naive (no timezone).
    """
    if dt.tzinfo is None:
        raise ValueError(
            "Cannot convert naive datetime to UTC. Datetime must be timezone-aware."
        )
    return dt.astimezone(timezone.utc)


def parse_iso(iso_string: str) -> datetime:
    """
    Parse ISO 8601 datetime string to UTC datetime.

    Raises ValueError if string has no timezone info.
    """
    dt = datetime.fromisoformat(iso_string)
    if dt.tzinfo is None:
        raise ValueError(
            "Cannot parse naive datetime string. "
            "Include timezone offset (e.g., 'Z' or '+00:00')."
        )
    return to_utc(dt)


def parse_calendar_date(value: str) -> date:
    """
    Parse a booking date in YYYY-MM-DD form.

    Only the zero-padded extended form is accepted; other ISO 8601 spellings
    (20240601, 2024-W22-6) raise ValueError.
    """
    try:
        parsed = date.fromisoformat(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid date '{value}'. Expected YYYY-MM-DD.") from e
    if parsed.isoformat() != value:
        raise ValueError(f"Invalid date '{value}'. Expected YYYY-MM-DD.")
    return parsed


def parse_time_of_day(value: str) -> time:
    """
    Parse a 24-hour booking time in zero-padded HH:MM form.

    Raises ValueError on any other format, including '9:5'.
    """
    try:
        parsed = datetime.strptime(value, "%H:%M").time()
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid time '{value}'. Expected 24-hour HH:MM.") from e
    if parsed.strftime("%H:%M") != value:
        raise ValueError(f"Invalid time '{value}'. Expected 24-hour HH:MM.")
    return parsed


def format_date_for_display(value: str | None) -> str:
    """Render YYYY-MM-DD as MM/DD/YYYY. Missing dates render as 'N/A'."""
    if not value:
        return "N/A"
    parsed = parse_calendar_date(value)
    return parsed.strftime("%m/%d/%Y")


def format_time_for_display(value: str | None) -> str:
    """Render 24-hour HH:MM as 12-hour '10:00 AM'. Missing times render as 'N/A'."""
    if not value:
        return "N/A"
    parsed = parse_time_of_day(value)
    hour12 = parsed.hour % 12 or 12
    suffix = "AM" if parsed.hour < 12 else "PM"
    return f"{hour12}:{parsed.minute:02d} {suffix}"
