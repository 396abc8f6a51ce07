from datetime import datetime, tzinfo
from typing import Optional


def format_duration(ms: int, show_milliseconds: bool) -> str:
    """Render a duration as ``[HH:]MM:SS[.CC]``.

    Hours are omitted when zero; centiseconds are floored, never rounded.
    Negative input renders as zero.
    """
    ms = max(0, int(ms))
    total_seconds = ms // 1000
    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    seconds = total_seconds % 60

    text = ''
    if hours > 0:
        text += f'{hours:02d}:'
    text += f'{minutes:02d}:{seconds:02d}'
    if show_milliseconds:
        text += f'.{(ms % 1000) // 10:02d}'
    return text


def format_wall_clock(instant_ms: int, tz: Optional[tzinfo] = None) -> str:
    """Render an epoch-ms instant as 12-hour ``hh:mm:ss AM``.

    ``tz=None`` means the host's local zone. No sub-second digits, ever.
    """
    moment = datetime.fromtimestamp(max(0, int(instant_ms)) / 1000, tz=tz)
    if tz is None:
        moment = moment.astimezone()
    hour = moment.hour % 12 or 12
    suffix = 'AM' if moment.hour < 12 else 'PM'
    return f'{hour:02d}:{moment.minute:02d}:{moment.second:02d} {suffix}'


def format_time(mode: str, value: int, show_milliseconds: bool, tz: Optional[tzinfo] = None) -> str:
    """Mode-aware entry point.

    ``value`` is a wall-clock instant for ``clock`` and a duration otherwise.
    ``show_milliseconds`` is ignored in clock mode.
    """
    if mode == 'clock':
        return format_wall_clock(value, tz)
    return format_duration(value, show_milliseconds)
