"""Timestamp display helpers."""

from datetime import datetime

# yyyyMMdd-HHmmss, e.g. 20230615-143022
DATE_DISPLAY_FORMAT = "%Y%m%d-%H%M%S"


def format_timestamp(value: datetime) -> str:
    """Render a timestamp in the fixed display template.

    Aware datetimes are converted to local time first; naive datetimes
    are rendered as-is.

    Args:
        value: Timestamp to render

    Returns:
        String such as ``20230615-143022``
    """
    if value.tzinfo is not None:
        value = value.astimezone()
    return value.strftime(DATE_DISPLAY_FORMAT)
