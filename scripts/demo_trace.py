from __future__ import annotations

from pathlib import Path

from club_ledger.clock import format_time
from club_ledger.models import status_label
from club_ledger.reporting import render_record, render_report
from club_ledger.stream_io import load_club_log
from club_ledger.trace import run_with_trace

SAMPLE = Path(__file__).resolve().parents[1] / "samples" / "example_input.txt"


def main() -> None:
    log = load_club_log(SAMPLE)
    trace = run_with_trace(log.config, log.events)

    print(f"Open {format_time(log.config.open_time)} - {format_time(log.config.close_time)}, "
          f"{log.config.table_count} tables @ {log.config.hourly_rate}/h")

    for step in trace.steps:
        e = step.event
        print(f"\nEvent {step.index:2d} | {e.time} type={e.type} {e.client} -> {step.outcome.outcome.value}")
        for record in step.outcome.records:
            print(f"  > {render_record(record)}")

        for t in step.snapshot.tables:
            who = t.occupant if t.occupant is not None else "-"
            print(f"  table {t.table_id}: {who:<10s} used={t.accumulated_minutes:4d}m")
        if step.snapshot.queue:
            print(f"  queue: {', '.join(step.snapshot.queue)}")
        for name, status in sorted(step.snapshot.clients.items()):
            print(f"  {name:<10s} {status_label(status)}")

    if trace.closing is not None:
        print("\nClosing")
        print(render_report([*trace.closing.records, *trace.closing.tables]), end="")


if __name__ == "__main__":
    main()
