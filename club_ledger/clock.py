from __future__ import annotations

MINUTES_PER_HOUR = 60
MINUTES_PER_DAY = 24 * MINUTES_PER_HOUR


def is_valid_time(text: str) -> bool:
    """
    True when text is a wall-clock time in strict HH:MM form.

    Hours must be in [0, 23] and minutes in [0, 59], both zero padded.
    """
    if not isinstance(text, str) or len(text) != 5 or text[2] != ":":
        return False
    hh, mm = text[:2], text[3:]
    if not (hh.isdigit() and mm.isdigit() and hh.isascii() and mm.isascii()):
        return False
    return 0 <= int(hh) < 24 and 0 <= int(mm) < 60


def parse_time(text: str) -> int:
    """Convert HH:MM to minutes since midnight. Raises ValueError on bad input."""
    if not is_valid_time(text):
        raise ValueError(f"invalid time {text!r}: expected HH:MM")
    return int(text[:2]) * MINUTES_PER_HOUR + int(text[3:])


def format_time(minutes: int) -> str:
    """Render minutes since midnight as HH:MM."""
    if not 0 <= minutes < MINUTES_PER_DAY:
        raise ValueError(f"minutes out of range for a wall-clock time: {minutes}")
    return format_duration(minutes)


def format_duration(minutes: int) -> str:
    """
    Render a non-negative duration as HH:MM.

    Unlike format_time(), hours are not capped at 23.
    """
    if minutes < 0:
        raise ValueError(f"duration must be >= 0 (got {minutes})")
    hours, rest = divmod(int(minutes), MINUTES_PER_HOUR)
    return f"{hours:02d}:{rest:02d}"
