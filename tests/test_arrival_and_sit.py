from __future__ import annotations

from club_ledger.engine import ClubEngine, Outcome
from club_ledger.events import ErrorName
from club_ledger.models import InClub, Seated, Waiting
from tests._support.club_helpers import ev, make_config


def test_arrival_before_opening_is_not_open_yet():
    engine = ClubEngine(make_config())

    result = engine.apply(ev("08:59", 1, "alice"))

    assert result.outcome == Outcome.REJECTED
    assert result.error == ErrorName.NOT_OPEN_YET
    assert engine.status_of("alice") is None


def test_arrival_at_or_after_closing_is_not_open_yet():
    engine = ClubEngine(make_config(close_at="19:00"))

    assert engine.apply(ev("19:00", 1, "alice")).error == ErrorName.NOT_OPEN_YET
    assert engine.apply(ev("18:59", 1, "alice")).outcome == Outcome.ACCEPTED


def test_arrival_at_opening_minute_is_accepted():
    engine = ClubEngine(make_config(open_at="09:00"))

    result = engine.apply(ev("09:00", 1, "alice"))

    assert result.outcome == Outcome.ACCEPTED
    assert engine.status_of("alice") == InClub()


def test_duplicate_arrival_is_you_shall_not_pass():
    engine = ClubEngine(make_config())
    engine.apply(ev("09:00", 1, "alice"))

    result = engine.apply(ev("09:10", 1, "alice"))

    assert result.error == ErrorName.YOU_SHALL_NOT_PASS
    assert engine.status_of("alice") == InClub()


def test_client_names_are_case_sensitive():
    engine = ClubEngine(make_config())
    engine.apply(ev("09:00", 1, "alice"))

    assert engine.apply(ev("09:01", 1, "Alice")).outcome == Outcome.ACCEPTED


def test_sit_by_unknown_client_is_rejected_without_tracking_them():
    engine = ClubEngine(make_config())

    result = engine.apply(ev("09:05", 2, "ghost", 1))

    assert result.error == ErrorName.CLIENT_UNKNOWN
    # A rejected sit must not make the name "present".
    assert engine.apply(ev("09:06", 1, "ghost")).outcome == Outcome.ACCEPTED


def test_sit_occupies_table_and_records_start():
    engine = ClubEngine(make_config())
    engine.apply(ev("09:00", 1, "alice"))

    result = engine.apply(ev("09:05", 2, "alice", 2))

    assert result.outcome == Outcome.ACCEPTED
    assert engine.status_of("alice") == Seated(2)
    assert engine.table(2).occupant == "alice"
    assert engine.table(2).occupied_since == 9 * 60 + 5


def test_sit_on_busy_table_is_place_is_busy_regardless_of_occupant():
    engine = ClubEngine(make_config())
    engine.apply(ev("09:00", 1, "alice"))
    engine.apply(ev("09:01", 1, "bob"))
    engine.apply(ev("09:02", 2, "alice", 1))

    assert engine.apply(ev("09:03", 2, "bob", 1)).error == ErrorName.PLACE_IS_BUSY
    assert engine.table(1).occupant == "alice"
    assert engine.status_of("bob") == InClub()


def test_seated_client_cannot_sit_again():
    engine = ClubEngine(make_config())
    engine.apply(ev("09:00", 1, "alice"))
    engine.apply(ev("09:02", 2, "alice", 1))

    result = engine.apply(ev("09:03", 2, "alice", 2))

    assert result.error == ErrorName.CLIENT_UNKNOWN
    assert engine.status_of("alice") == Seated(1)
    assert engine.table(2).is_free


def test_rejection_lines_are_echo_then_error():
    engine = ClubEngine(make_config())

    result = engine.apply(ev("08:00", 1, "alice"))

    assert [r.code for r in result.records] == [1, 13]
    assert result.records[0].client == "alice"
    assert result.records[1].error == ErrorName.NOT_OPEN_YET


def test_waiting_client_cannot_sit_and_keeps_queue_position():
    engine = ClubEngine(make_config(tables=1))
    engine.apply(ev("09:00", 1, "alice"))
    engine.apply(ev("09:01", 2, "alice", 1))
    engine.apply(ev("09:02", 1, "bob"))
    engine.apply(ev("09:03", 3, "bob"))

    result = engine.apply(ev("09:04", 2, "bob", 1))

    assert result.error == ErrorName.CLIENT_UNKNOWN
    assert engine.status_of("bob") == Waiting()
    assert engine.snapshot().queue == ("bob",)
    assert engine.table(1).occupant == "alice"
