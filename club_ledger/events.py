from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class EventType(int, Enum):
    """
    Numeric event codes shared by the input log and the output report.
    1-4 arrive in the log; 11-13 are only ever produced by the engine.
    """

    ARRIVAL = 1
    SIT = 2
    WAIT = 3
    DEPARTURE = 4

    FORCED_DEPARTURE = 11
    AUTO_SEAT = 12
    ERROR = 13

    @classmethod
    def from_input(cls, code: int) -> EventType | None:
        """Return the input event type for code, or None if it is not one of 1-4."""
        if code in INPUT_EVENT_CODES:
            return cls(code)
        return None


INPUT_EVENT_CODES = frozenset({1, 2, 3, 4})


class ErrorName(str, Enum):
    NOT_OPEN_YET = "NotOpenYet"
    YOU_SHALL_NOT_PASS = "YouShallNotPass"
    CLIENT_UNKNOWN = "ClientUnknown"
    PLACE_IS_BUSY = "PlaceIsBusy"
    I_CAN_WAIT_NO_LONGER = "ICanWaitNoLonger!"
    INCORRECT_FORMAT = "IncorrectFormat"
    UNKNOWN_EVENT = "UnknownEvent"

    @property
    def is_fatal(self) -> bool:
        return self in FATAL_ERRORS


FATAL_ERRORS = frozenset({ErrorName.INCORRECT_FORMAT, ErrorName.UNKNOWN_EVENT})


@dataclass(frozen=True, slots=True)
class ClientEvent:
    """
    One already-tokenized line of the input log.

    time is kept as the raw token so the engine can reject malformed
    timestamps. type is the raw numeric code (0 when the token was not an int).
    """

    time: str
    type: int
    client: str
    table_id: int | None = None


@dataclass(frozen=True, slots=True)
class Record:
    """
    A single output line.

    Opening/closing timestamps carry only a time. Echoes and synthesized
    events carry a code, a client and (for seatings) a table. Rejections
    carry code 13 and an error name.
    """

    time: str
    code: int | None = None
    client: str | None = None
    table_id: int | None = None
    error: ErrorName | None = None

    @classmethod
    def echo(cls, event: ClientEvent) -> Record:
        return cls(time=event.time, code=event.type, client=event.client, table_id=event.table_id)

    @classmethod
    def rejection(cls, time: str, error: ErrorName) -> Record:
        return cls(time=time, code=int(EventType.ERROR), error=error)

    @property
    def is_synthesized(self) -> bool:
        return self.code in (EventType.FORCED_DEPARTURE, EventType.AUTO_SEAT, EventType.ERROR)
