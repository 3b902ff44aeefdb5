from __future__ import annotations

import random

from club_ledger.clock import format_time
from club_ledger.engine import Outcome
from club_ledger.events import ClientEvent, ErrorName
from club_ledger.models import Seated
from club_ledger.trace import run_with_trace
from tests._support.club_helpers import ev, make_config

NAMES = ["ann", "bob", "cid", "dee", "eve", "fay", "gus"]


def _random_log(seed: int, *, tables: int, length: int = 80) -> list[ClientEvent]:
    rng = random.Random(seed)
    minute = 8 * 60 + 30
    events: list[ClientEvent] = []
    for _ in range(length):
        minute = min(minute + rng.randint(0, 12), 23 * 60 + 59)
        kind = rng.choice([1, 1, 2, 2, 3, 4, 4])
        table_id = rng.randint(1, tables) if kind == 2 else None
        events.append(ClientEvent(format_time(minute), kind, rng.choice(NAMES), table_id))
    return events


def test_invariants_hold_after_every_event():
    for seed in range(40):
        tables = 1 + seed % 3
        trace = run_with_trace(make_config(tables=tables), _random_log(seed, tables=tables))

        for step in trace.steps:
            snap = step.snapshot
            assert snap.violations() == [], (seed, step.index, step.event)
            assert snap.occupied_count <= tables
            assert len(snap.queue) <= tables
            seated_tables = [s.table_id for s in snap.clients.values() if isinstance(s, Seated)]
            assert len(seated_tables) == len(set(seated_tables))

        assert trace.final is not None
        assert trace.final.violations() == []
        assert trace.final.occupied_count == 0


def test_rejected_events_leave_state_unchanged():
    for seed in range(20):
        trace = run_with_trace(make_config(tables=2), _random_log(seed, tables=2))
        previous = None
        for step in trace.steps:
            if previous is not None and step.outcome.outcome in (Outcome.REJECTED, Outcome.IGNORED):
                assert step.snapshot == previous
            previous = step.snapshot


def test_wait_with_a_free_table_is_always_rejected():
    for seed in range(20):
        trace = run_with_trace(make_config(tables=2), _random_log(seed, tables=2))
        free_tables = 2
        for step in trace.steps:
            if step.event.type == 3 and free_tables > 0:
                assert step.outcome.error == ErrorName.I_CAN_WAIT_NO_LONGER
            free_tables = 2 - step.snapshot.occupied_count


def test_echo_lines_replay_the_processed_input():
    """Dropping synthesized lines leaves one echo per processed event, in order."""
    for seed in range(20):
        events = _random_log(seed, tables=2)
        trace = run_with_trace(make_config(tables=2), events)

        echoed = [
            (r.time, r.code, r.client, r.table_id)
            for step in trace.steps
            for r in step.outcome.records
            if not r.is_synthesized
        ]
        expected = [
            (e.time, e.type, e.client, e.table_id)
            for step, e in zip(trace.steps, events)
            if step.outcome.outcome != Outcome.IGNORED
            and not (e.type == 3 and step.outcome.records and step.outcome.records[0].code == 11)
        ]
        assert echoed == expected


def test_trace_stops_at_fatal_event():
    trace = run_with_trace(make_config(), [ev("09:00", 1, "ann"), ev("09:01", 5, "bob"), ev("09:02", 1, "cid")])

    assert len(trace.steps) == 2
    assert trace.steps[-1].outcome.is_fatal
    assert trace.closing is None
    assert trace.final is None
