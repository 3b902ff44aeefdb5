from __future__ import annotations

from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Iterable

from club_ledger.clock import is_valid_time, parse_time
from club_ledger.events import ClientEvent, EventType, Record
from club_ledger.models import ClubConfig
from club_ledger.reporting import ReportLine, TableReport

HEADER_LINES = 3


class InputFormatError(ValueError):
    """Raised when the log header (or the log file itself) fails validation."""

    def __init__(self, message: str, line: str | None = None) -> None:
        super().__init__(message)
        # Offending raw line, when there is one.
        self.line = line


@dataclass(frozen=True)
class ClubLog:
    config: ClubConfig
    events: list[ClientEvent]


def load_club_log(path: Path) -> ClubLog:
    """Load a club log from a UTF-8 text file."""

    if not path.exists():
        raise InputFormatError(f"file not found: {path}")
    if not path.is_file():
        raise InputFormatError(f"not a file: {path}")

    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise InputFormatError(f"file is not valid UTF-8: {path}") from e

    return parse_club_log(text.splitlines())


def parse_club_log(lines: Iterable[str]) -> ClubLog:
    """Parse a club log.

    Format:

      3
      09:00 19:00
      10
      08:48 1 client1
      09:54 2 client1 1
      ...

    Only the header is validated here. Event lines are tokenized leniently;
    malformed ones are reported by the engine when they are reached, so that
    every event before them is still processed.
    """
    raw = list(lines)
    if len(raw) < HEADER_LINES:
        raise InputFormatError(
            f"header must have {HEADER_LINES} lines (table count, hours, hourly rate); got {len(raw)}"
        )

    table_count = _parse_positive_int(raw[0], label="table count")
    open_time, close_time = _parse_hours(raw[1])
    hourly_rate = _parse_positive_int(raw[2], label="hourly rate")

    try:
        config = ClubConfig(
            table_count=table_count,
            open_time=open_time,
            close_time=close_time,
            hourly_rate=hourly_rate,
        )
    except ValueError as e:
        raise InputFormatError(str(e), line=raw[1]) from e

    events = [parse_event_line(line) for line in raw[HEADER_LINES:] if line.strip()]
    return ClubLog(config=config, events=events)


def parse_event_line(line: str) -> ClientEvent:
    """Tokenize `time type client [table_id]`.

    A type token that is not an int becomes 0 (an unknown event). The table
    token is read only for sit events and is None when missing or not an int.
    """
    tokens = line.split()
    time = tokens[0] if tokens else ""
    event_type = _int_or_none(tokens[1]) if len(tokens) > 1 else None
    client = tokens[2] if len(tokens) > 2 else ""

    table_id = None
    if event_type == EventType.SIT and len(tokens) > 3:
        table_id = _int_or_none(tokens[3])

    return ClientEvent(
        time=time,
        type=event_type if event_type is not None else 0,
        client=client,
        table_id=table_id,
    )


def _parse_positive_int(line: str, *, label: str) -> int:
    tokens = line.split()
    if len(tokens) != 1:
        raise InputFormatError(f"{label} line must hold exactly one integer", line=line)
    value = _int_or_none(tokens[0])
    if value is None or value <= 0:
        raise InputFormatError(f"{label} must be a positive integer (got {tokens[0]!r})", line=line)
    return value


def _parse_hours(line: str) -> tuple[int, int]:
    tokens = line.split()
    if len(tokens) != 2:
        raise InputFormatError("hours line must be '<open HH:MM> <close HH:MM>'", line=line)
    for token in tokens:
        if not is_valid_time(token):
            raise InputFormatError(f"invalid time {token!r}: expected HH:MM", line=line)
    return parse_time(tokens[0]), parse_time(tokens[1])


def _int_or_none(token: str) -> int | None:
    # Digits only: int() would also accept "+1", " 1" or "1_0".
    if not token.isascii() or not token.isdigit():
        return None
    return int(token)


def dump_records(lines: Iterable[ReportLine]) -> list[dict[str, Any]]:
    """Return a JSON-serializable copy of the emitted lines, in order."""
    out: list[dict[str, Any]] = []
    for line in lines:
        d = asdict(line)
        if isinstance(line, TableReport):
            d["kind"] = "table"
        else:
            d["kind"] = "record"
            if isinstance(line, Record) and line.error is not None:
                d["error"] = str(line.error.value)
        out.append(d)
    return out
