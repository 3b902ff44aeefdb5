from __future__ import annotations

from dataclasses import dataclass

from club_ledger.models import ClientStatus, Seated, Waiting


@dataclass(frozen=True)
class TableSnapshot:
    table_id: int
    occupant: str | None
    occupied_since: int | None
    accumulated_minutes: int


@dataclass(frozen=True)
class ClubSnapshot:
    """
    Point-in-time copy of the engine state.

    Taking a snapshot never changes the engine; tests and traces use it to
    check the state invariants after each event.
    """

    tables: tuple[TableSnapshot, ...]
    clients: dict[str, ClientStatus]
    queue: tuple[str, ...]

    @property
    def occupied_count(self) -> int:
        return sum(1 for t in self.tables if t.occupant is not None)

    def violations(self) -> list[str]:
        """Return a description of every broken invariant (empty when consistent)."""
        problems: list[str] = []
        capacity = len(self.tables)

        for t in self.tables:
            if (t.occupant is None) != (t.occupied_since is None):
                problems.append(f"table {t.table_id}: occupant and occupied_since disagree")
            if t.accumulated_minutes < 0:
                problems.append(f"table {t.table_id}: negative accumulated minutes")
            if t.occupant is not None and self.clients.get(t.occupant) != Seated(t.table_id):
                problems.append(f"table {t.table_id}: occupant {t.occupant!r} is not seated there")

        for name, status in self.clients.items():
            if isinstance(status, Seated):
                if not 1 <= status.table_id <= capacity:
                    problems.append(f"{name!r}: seated at unknown table {status.table_id}")
                elif self.tables[status.table_id - 1].occupant != name:
                    problems.append(f"{name!r}: table {status.table_id} is held by someone else")
            if isinstance(status, Waiting) and self.queue.count(name) != 1:
                problems.append(f"{name!r}: waiting but queued {self.queue.count(name)} times")

        for name in self.queue:
            if not isinstance(self.clients.get(name), Waiting):
                problems.append(f"{name!r}: queued but not waiting")

        if len(self.queue) > capacity:
            problems.append(f"queue length {len(self.queue)} exceeds capacity {capacity}")

        return problems
