"""Utility modules for cross-cutting concerns."""

from utils.timezone import (
    now_utc,
    to_utc,
    parse_iso,
    parse_calendar_date,
    parse_time_of_day,
    format_date_for_display,
    format_time_for_display,
)
from utils.user_context import (
    get_current_user_id,
    peek_current_user_id,
    set_current_user_id,
    clear_current_user_id,
    user_context,
)
