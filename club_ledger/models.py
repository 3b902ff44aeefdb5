from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from club_ledger.clock import MINUTES_PER_DAY


@dataclass(frozen=True)
class ClubConfig:
    """Venue parameters taken from the log header. Times are minutes since midnight."""

    table_count: int
    open_time: int
    close_time: int
    hourly_rate: int

    def __post_init__(self) -> None:
        if self.table_count < 1:
            raise ValueError("table_count must be >= 1")
        for label, value in (("open_time", self.open_time), ("close_time", self.close_time)):
            if not 0 <= value < MINUTES_PER_DAY:
                raise ValueError(f"{label} must be in [0, {MINUTES_PER_DAY})")
        if self.open_time >= self.close_time:
            raise ValueError("open_time must be earlier than close_time")
        if self.hourly_rate <= 0:
            raise ValueError("hourly_rate must be > 0")


@dataclass(slots=True)
class Table:
    table_id: int
    occupant: str | None = None
    occupied_since: int | None = None
    # Only grows; folded in on every release.
    accumulated_minutes: int = 0

    @property
    def is_free(self) -> bool:
        return self.occupant is None

    def occupy(self, client: str, at: int) -> None:
        if self.occupant is not None:
            raise RuntimeError(f"table {self.table_id} is already occupied by {self.occupant!r}")
        self.occupant = client
        self.occupied_since = at

    def release(self, at: int) -> int:
        """Free the table and return the minutes added to its usage."""
        if self.occupant is None or self.occupied_since is None:
            raise RuntimeError(f"table {self.table_id} is not occupied")
        duration = max(0, at - self.occupied_since)
        self.accumulated_minutes += duration
        self.occupant = None
        self.occupied_since = None
        return duration


# Client status variants. An absent client simply has no entry in the engine.


@dataclass(frozen=True, slots=True)
class InClub:
    pass


@dataclass(frozen=True, slots=True)
class Waiting:
    pass


@dataclass(frozen=True, slots=True)
class Seated:
    table_id: int


ClientStatus = Union[InClub, Waiting, Seated]


def status_label(status: ClientStatus | None) -> str:
    if status is None:
        return "absent"
    if isinstance(status, Seated):
        return f"seated@{status.table_id}"
    if isinstance(status, Waiting):
        return "waiting"
    return "in_club"
