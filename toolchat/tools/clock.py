"""
Current date/time tool.
"""

from datetime import datetime, timezone


def get_current_datetime() -> dict:
    """
    Get the current instant in several renderings.

    Returns:
        Dictionary with locale-formatted date/time strings, an ISO-8601
        UTC timestamp, and the local time zone name
    """
    now = datetime.now().astimezone()
    return {
        "full_date_time": now.strftime("%c"),
        "date": now.strftime("%x"),
        "time": now.strftime("%X"),
        "iso_string": utc_timestamp(now),
        "time_zone": now.tzname(),
    }


def utc_timestamp(moment: datetime | None = None) -> str:
    """Render a moment as ISO-8601 UTC with millisecond precision, e.g. 2024-01-01T12:00:00.000Z."""
    moment = moment or datetime.now(timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _register():
    from .registry import ToolRegistry

    ToolRegistry.register(
        name="get_current_datetime",
        description=(
            "When asked about the current date, time, day, or time zone, use this "
            "tool. It returns the current date and time of the server."
        ),
        parameters={},
        handler=lambda params: get_current_datetime(),
    )


_register()
