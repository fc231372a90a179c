"""Time formatting shared by the status sections."""
from datetime import datetime, timedelta
from typing import Optional


def format_rfc3339(moment: Optional[datetime]) -> str:
    """Format as RFC 3339 to whole seconds, using `Z` for UTC."""
    if moment is None:
        return ""
    text = moment.isoformat(timespec="seconds")
    if text.endswith("+00:00"):
        text = text[: -len("+00:00")] + "Z"
    return text


def format_duration(elapsed: timedelta) -> str:
    """
    Render a duration truncated to whole seconds as `1h2m3s`.

    Leading zero units are dropped, inner ones kept:
    0 -> "0s", 59 -> "59s", 120 -> "2m0s", 3600 -> "1h0m0s".
    """
    seconds = int(elapsed.total_seconds())
    sign = "-" if seconds < 0 else ""
    seconds = abs(seconds)
    hours, rest = divmod(seconds, 3600)
    minutes, seconds = divmod(rest, 60)
    if hours:
        return f"{sign}{hours}h{minutes}m{seconds}s"
    if minutes:
        return f"{sign}{minutes}m{seconds}s"
    return f"{sign}{seconds}s"
