from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from club_ledger.clock import format_time, is_valid_time, parse_time
from club_ledger.event_sink import ReportSink
from club_ledger.events import ClientEvent, ErrorName, EventType, Record
from club_ledger.logging_utils import get_logger
from club_ledger.models import ClientStatus, ClubConfig, InClub, Seated, Table, Waiting
from club_ledger.reporting import ReportLine, TableReport, revenue_for
from club_ledger.snapshots import ClubSnapshot, TableSnapshot

logger = get_logger(__name__)


class Outcome(str, Enum):
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    # Repeated wait request: nothing is emitted.
    IGNORED = "IGNORED"
    FATAL = "FATAL"


@dataclass(frozen=True)
class StepOutcome:
    outcome: Outcome
    records: tuple[Record, ...] = ()
    error: ErrorName | None = None

    @property
    def is_fatal(self) -> bool:
        return self.outcome == Outcome.FATAL


@dataclass(frozen=True)
class ClosingReport:
    records: tuple[Record, ...]
    tables: tuple[TableReport, ...]


@dataclass(frozen=True)
class RunResult:
    processed: int
    aborted: bool
    closing: ClosingReport | None


class ClubEngine:
    """
    Allocation state machine for one business day.

    Lifecycle: open() once, apply() for every log event in order, close()
    once. A fatal event (IncorrectFormat / UnknownEvent) halts the engine;
    after that neither apply() nor close() may be called.
    """

    def __init__(self, config: ClubConfig, sink: ReportSink | None = None) -> None:
        self.config = config
        self._sink = sink
        self._tables = [Table(table_id=i) for i in range(1, config.table_count + 1)]
        self._clients: dict[str, ClientStatus] = {}
        self._queue: deque[str] = deque()
        self._halted = False
        self._closed = False

    # ----------------------------
    # Introspection
    # ----------------------------

    @property
    def halted(self) -> bool:
        return self._halted

    def status_of(self, client: str) -> ClientStatus | None:
        return self._clients.get(client)

    def table(self, table_id: int) -> Table:
        return self._tables[table_id - 1]

    def snapshot(self) -> ClubSnapshot:
        return ClubSnapshot(
            tables=tuple(
                TableSnapshot(
                    table_id=t.table_id,
                    occupant=t.occupant,
                    occupied_since=t.occupied_since,
                    accumulated_minutes=t.accumulated_minutes,
                )
                for t in self._tables
            ),
            clients=dict(self._clients),
            queue=tuple(self._queue),
        )

    # ----------------------------
    # Lifecycle
    # ----------------------------

    def open(self) -> Record:
        record = Record(time=format_time(self.config.open_time))
        self._emit(record)
        return record

    def apply(self, event: ClientEvent) -> StepOutcome:
        """
        Process one log event and return what happened.

        Log conditions never raise: they come back as REJECTED or FATAL
        outcomes carrying the lines to print.
        """
        if self._halted:
            raise RuntimeError("engine halted by a fatal event; no further events can be applied")
        if self._closed:
            raise RuntimeError("engine already closed")

        if not self._is_well_formed(event):
            return self._fatal(event, ErrorName.INCORRECT_FORMAT)

        event_type = EventType.from_input(event.type)
        if event_type is None:
            return self._fatal(event, ErrorName.UNKNOWN_EVENT)

        at = parse_time(event.time)
        if event_type == EventType.ARRIVAL:
            result = self._arrival(event, at)
        elif event_type == EventType.SIT:
            result = self._sit(event, at)
        elif event_type == EventType.WAIT:
            result = self._wait(event)
        else:
            result = self._departure(event, at)

        for record in result.records:
            self._emit(record)
        return result

    def close(self) -> ClosingReport:
        if self._halted:
            raise RuntimeError("engine halted by a fatal event; closing is skipped")
        if self._closed:
            raise RuntimeError("engine already closed")
        self._closed = True

        close_at = self.config.close_time
        close_label = format_time(close_at)

        for table in self._tables:
            if not table.is_free:
                table.release(close_at)

        records = [
            Record(time=close_label, code=int(EventType.FORCED_DEPARTURE), client=name)
            for name in sorted(self._clients)
        ]
        self._clients.clear()
        self._queue.clear()
        records.append(Record(time=close_label))

        tables = tuple(
            TableReport(
                table_id=t.table_id,
                revenue=revenue_for(t.accumulated_minutes, self.config.hourly_rate),
                minutes=t.accumulated_minutes,
            )
            for t in self._tables
        )

        for line in (*records, *tables):
            self._emit(line)

        logger.info(
            "closing at %s: %d forced departures, revenue %d",
            close_label,
            len(records) - 1,
            sum(t.revenue for t in tables),
        )
        return ClosingReport(records=tuple(records), tables=tables)

    # ----------------------------
    # Per-event handlers
    # ----------------------------

    def _arrival(self, event: ClientEvent, at: int) -> StepOutcome:
        if at < self.config.open_time or at >= self.config.close_time:
            return self._reject(event, ErrorName.NOT_OPEN_YET)
        if event.client in self._clients:
            return self._reject(event, ErrorName.YOU_SHALL_NOT_PASS)

        self._clients[event.client] = InClub()
        return StepOutcome(Outcome.ACCEPTED, (Record.echo(event),))

    def _sit(self, event: ClientEvent, at: int) -> StepOutcome:
        # Only a client standing in the club may take a table; waiting or
        # seated clients are unknown to the seating desk.
        if not isinstance(self._clients.get(event.client), InClub):
            return self._reject(event, ErrorName.CLIENT_UNKNOWN)

        if event.table_id is None:
            raise RuntimeError(f"sit event without a table id reached dispatch: {event!r}")
        table = self.table(event.table_id)
        if not table.is_free:
            return self._reject(event, ErrorName.PLACE_IS_BUSY)

        table.occupy(event.client, at)
        self._clients[event.client] = Seated(table.table_id)
        return StepOutcome(Outcome.ACCEPTED, (Record.echo(event),))

    def _wait(self, event: ClientEvent) -> StepOutcome:
        if any(t.is_free for t in self._tables):
            return self._reject(event, ErrorName.I_CAN_WAIT_NO_LONGER)

        status = self._clients.get(event.client)
        if isinstance(status, Waiting):
            return StepOutcome(Outcome.IGNORED)
        # Deliberately rejected: a client who never arrived has no place in
        # the queue, and queuing a seated client would leave them holding a
        # table while waiting for one.
        if status is None or isinstance(status, Seated):
            return self._reject(event, ErrorName.CLIENT_UNKNOWN)

        if len(self._queue) >= self.config.table_count:
            # The client is turned away but stays tracked as InClub.
            forced = Record(time=event.time, code=int(EventType.FORCED_DEPARTURE), client=event.client)
            logger.debug("queue full at %s; %s forced out", event.time, event.client)
            return StepOutcome(Outcome.ACCEPTED, (forced,))

        self._queue.append(event.client)
        self._clients[event.client] = Waiting()
        return StepOutcome(Outcome.ACCEPTED, (Record.echo(event),))

    def _departure(self, event: ClientEvent, at: int) -> StepOutcome:
        # The echo always comes first, even when the departure is then rejected.
        status = self._clients.get(event.client)
        if not isinstance(status, (InClub, Seated)):
            return self._reject(event, ErrorName.CLIENT_UNKNOWN)

        records = [Record.echo(event)]
        if isinstance(status, Seated):
            table = self.table(status.table_id)
            table.release(at)
            if self._queue:
                next_client = self._queue.popleft()
                table.occupy(next_client, at)
                self._clients[next_client] = Seated(table.table_id)
                records.append(
                    Record(
                        time=event.time,
                        code=int(EventType.AUTO_SEAT),
                        client=next_client,
                        table_id=table.table_id,
                    )
                )

        del self._clients[event.client]
        return StepOutcome(Outcome.ACCEPTED, tuple(records))

    # ----------------------------
    # Helpers
    # ----------------------------

    def _is_well_formed(self, event: ClientEvent) -> bool:
        if not is_valid_time(event.time):
            return False
        if not event.client:
            return False
        if event.type == EventType.SIT:
            if event.table_id is None or not 1 <= event.table_id <= self.config.table_count:
                return False
        return True

    def _reject(self, event: ClientEvent, error: ErrorName) -> StepOutcome:
        logger.debug("rejected %s at %s: %s", event.client, event.time, error.value)
        return StepOutcome(
            Outcome.REJECTED,
            (Record.echo(event), Record.rejection(event.time, error)),
            error,
        )

    def _fatal(self, event: ClientEvent, error: ErrorName) -> StepOutcome:
        self._halted = True
        logger.warning("fatal %s at event %r; halting", error.value, event)
        result = StepOutcome(
            Outcome.FATAL,
            (Record.echo(event), Record.rejection(event.time, error)),
            error,
        )
        for record in result.records:
            self._emit(record)
        return result

    def _emit(self, line: ReportLine) -> None:
        if self._sink is not None:
            self._sink.emit(line)


def run_club(
    config: ClubConfig,
    events: Iterable[ClientEvent],
    sink: ReportSink | None = None,
) -> RunResult:
    """
    Replay a whole log: opening line, every event in order, then closing.

    A fatal event stops consumption of the iterable immediately and the
    closing report is skipped.
    """
    engine = ClubEngine(config, sink=sink)
    engine.open()

    processed = 0
    for event in events:
        processed += 1
        if engine.apply(event).is_fatal:
            return RunResult(processed=processed, aborted=True, closing=None)

    return RunResult(processed=processed, aborted=False, closing=engine.close())
