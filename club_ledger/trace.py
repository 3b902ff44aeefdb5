from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from club_ledger.engine import ClubEngine, ClosingReport, StepOutcome
from club_ledger.events import ClientEvent
from club_ledger.models import ClubConfig
from club_ledger.snapshots import ClubSnapshot


@dataclass(frozen=True)
class StepTrace:
    index: int
    event: ClientEvent
    outcome: StepOutcome
    # AFTER the event (and any auto-seating it triggered)
    snapshot: ClubSnapshot


@dataclass(frozen=True)
class RunTrace:
    steps: list[StepTrace]
    closing: ClosingReport | None
    # State once closing has run; None when the run was aborted.
    final: ClubSnapshot | None


def run_with_trace(config: ClubConfig, events: Iterable[ClientEvent]) -> RunTrace:
    """
    Replay events like engine.run_club(), keeping a snapshot after every step.

    Adds observability only (no rule changes).
    """
    engine = ClubEngine(config)
    engine.open()

    steps: list[StepTrace] = []
    for i, event in enumerate(events, start=1):
        outcome = engine.apply(event)
        steps.append(StepTrace(index=i, event=event, outcome=outcome, snapshot=engine.snapshot()))
        if outcome.is_fatal:
            return RunTrace(steps=steps, closing=None, final=None)

    closing = engine.close()
    return RunTrace(steps=steps, closing=closing, final=engine.snapshot())
