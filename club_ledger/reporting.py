from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Union

from club_ledger.clock import MINUTES_PER_HOUR, format_duration
from club_ledger.events import Record


@dataclass(frozen=True, slots=True)
class TableReport:
    """Closing line for one table: revenue and total occupied time."""

    table_id: int
    revenue: int
    minutes: int


ReportLine = Union[Record, TableReport]


def hours_to_charge(minutes: int) -> int:
    """Every started hour is billed in full."""
    if minutes < 0:
        raise ValueError(f"minutes must be >= 0 (got {minutes})")
    return (minutes + MINUTES_PER_HOUR - 1) // MINUTES_PER_HOUR


def revenue_for(minutes: int, hourly_rate: int) -> int:
    return hours_to_charge(minutes) * hourly_rate


def render_record(record: Record) -> str:
    parts = [record.time]
    if record.code is not None:
        parts.append(str(int(record.code)))
    if record.error is not None:
        parts.append(record.error.value)
    else:
        if record.client:
            parts.append(record.client)
        if record.table_id is not None:
            parts.append(str(record.table_id))
    return " ".join(parts)


def render_table_report(report: TableReport) -> str:
    return f"{report.table_id} {report.revenue} {format_duration(report.minutes)}"


def render_line(line: ReportLine) -> str:
    if isinstance(line, TableReport):
        return render_table_report(line)
    return render_record(line)


def render_report(lines: Iterable[ReportLine]) -> str:
    """Render the whole report, one line per entry, with a trailing newline."""
    out = [render_line(line) for line in lines]
    if not out:
        return ""
    return "\n".join(out) + "\n"
