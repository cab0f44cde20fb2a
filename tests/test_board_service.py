from datetime import date

import pytest
from pydantic import ValidationError

from sunny_auto.core.errors import ConfirmationRequired, NotFound, ValidationFailed
from sunny_auto.models.board import BoardEntryIn, BoardStatus
from sunny_auto.services.board_service import (
    AppointmentBoard, CreateEntry, DeleteEntry, entries_for_date, reduce_board,
)

TODAY = date(2026, 10, 19)
DAY = TODAY.isoformat()


@pytest.fixture
def board():
    return AppointmentBoard(today=TODAY)


def new_entry(**overrides) -> BoardEntryIn:
    data = {
        "customer_name": "Ana Lopez",
        "vehicle": "Mazda 3 2017",
        "service": "Battery Replacement",
        "date": DAY,
        "time": "08:15",
        "phone": "+1 (555) 000-1111",
        "estimated_duration": "1 hour",
    }
    data.update(overrides)
    return BoardEntryIn(**data)


def test_seeded_day_sorted_by_time(board):
    view = board.day_view(DAY)

    times = [e.time for e in view["appointments"]]
    assert times == sorted(times)
    assert len(times) == 6
    assert view["status_counts"] == {"Scheduled": 3, "In Progress": 1, "Completed": 1, "Cancelled": 1}


def test_create_assigns_next_id_and_sorts_first(board):
    created = board.create(new_entry())

    assert created.id == 7
    assert board.day_view(DAY)["appointments"][0].customer_name == "Ana Lopez"


def test_early_morning_entry_sorts_before_later_ones(board):
    board.create(new_entry(time="09:30"))

    times = [e.time for e in board.day_view(DAY)["appointments"]]
    assert times.index("09:30") < times.index("10:30")
    assert times == sorted(times)


@pytest.mark.parametrize("time", ["9:30", "24:00", "12:60", "noon", ""])
def test_time_must_be_zero_padded_hh_mm(time):
    with pytest.raises(ValidationError):
        new_entry(time=time)


@pytest.mark.parametrize("day", ["2026-10-5", "19/10/2026", "2026-13-01", ""])
def test_date_must_be_iso(day):
    with pytest.raises(ValidationError):
        new_entry(date=day)


@pytest.mark.parametrize("field", ["customer_name", "vehicle", "service"])
def test_create_requires_fields(board, field):
    with pytest.raises(ValidationFailed):
        board.create(new_entry(**{field: "   "}))
    assert len(board.state.entries) == 6


def test_update_replaces_whole_entry(board):
    updated = board.update(2, new_entry(customer_name="Maria Garcia", status=BoardStatus.COMPLETED, time="10:30"))

    assert updated.id == 2
    assert updated.status == BoardStatus.COMPLETED
    assert updated.vehicle == "Mazda 3 2017"
    assert updated.notes is None


def test_update_unknown_entry(board):
    with pytest.raises(NotFound):
        board.update(99, new_entry())


def test_delete_needs_confirmation(board):
    with pytest.raises(ConfirmationRequired):
        board.delete(1)
    assert len(board.state.entries) == 6

    board.delete(1, confirmed=True)
    assert [e.id for e in board.state.entries] == [2, 3, 4, 5, 6]


def test_filter_by_other_date(board):
    board.create(new_entry(date="2026-10-20", time="12:00"))
    board.create(new_entry(date="2026-10-20", time="07:45"))

    view = board.day_view("2026-10-20")

    assert [e.time for e in view["appointments"]] == ["07:45", "12:00"]
    assert view["date"] == "2026-10-20"


def test_viewing_a_day_leaves_the_board_untouched(board):
    before = board.state

    board.day_view("2030-01-01")

    assert board.state is before
    assert len(board.day_view(DAY)["appointments"]) == 6


def test_day_view_defaults_to_today():
    assert AppointmentBoard().day_view()["date"] == date.today().isoformat()


def test_reducer_is_pure(board):
    before = board.state

    after = reduce_board(before, CreateEntry(new_entry(date="2026-10-21")))

    assert len(before.entries) == 6
    assert len(after.entries) == 7
    assert len(entries_for_date(after, "2026-10-21")) == 1
    assert entries_for_date(before, "2026-10-21") == []


def test_reset_restores_seed(board):
    board.dispatch(DeleteEntry(3, confirmed=True))
    board.reset(TODAY)

    assert len(board.state.entries) == 6
