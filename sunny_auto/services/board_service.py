"""
Admin appointment board.

A process-local list of workshop appointments, seeded with sample data and
never persisted: restarting the service restores the seed. It is not
connected to the `appointments` table and uses its own four-value status.

State changes go through `reduce_board`, a pure function from
(state, action) to a new state; `AppointmentBoard` owns the current state.
"""
from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict

from sunny_auto.core.errors import ConfirmationRequired, NotFound, ValidationFailed
from sunny_auto.core.logger import logger
from sunny_auto.models.board import BoardEntry, BoardEntryIn, BoardStatus

REQUIRED_FIELDS = ("customer_name", "vehicle", "service")


class BoardState(BaseModel):
    model_config = ConfigDict(frozen=True)

    entries: List[BoardEntry]


@dataclass(frozen=True)
class CreateEntry:
    entry: BoardEntryIn


@dataclass(frozen=True)
class UpdateEntry:
    entry_id: int
    entry: BoardEntryIn


@dataclass(frozen=True)
class DeleteEntry:
    entry_id: int
    confirmed: bool = False


BoardAction = Union[CreateEntry, UpdateEntry, DeleteEntry]


def seed_entries(today: Optional[date] = None) -> List[BoardEntry]:
    day = (today or date.today()).isoformat()
    rows = [
        ("John Smith", "Toyota Camry 2019", "Oil Change", "09:00", BoardStatus.SCHEDULED,
         "+1 (555) 123-4567", "45 mins", "Synthetic oil preferred"),
        ("Maria Garcia", "Honda Civic 2021", "Brake Service", "10:30", BoardStatus.IN_PROGRESS,
         "+1 (555) 987-6543", "2 hours", "Front brakes only"),
        ("Robert Johnson", "Ford F-150 2020", "Tire Rotation", "11:15", BoardStatus.SCHEDULED,
         "+1 (555) 456-7890", "30 mins", None),
        ("Sarah Williams", "Chevrolet Malibu 2018", "Full Service", "13:00", BoardStatus.SCHEDULED,
         "+1 (555) 234-5678", "3 hours", "Includes oil change, filter replacement, and inspection"),
        ("James Brown", "Nissan Altima 2022", "AC Repair", "14:45", BoardStatus.COMPLETED,
         "+1 (555) 876-5432", "1.5 hours", None),
        ("Lisa Davis", "BMW X5 2020", "Electrical Diagnostics", "16:00", BoardStatus.CANCELLED,
         "+1 (555) 345-6789", "2 hours", "Customer will reschedule"),
    ]
    return [
        BoardEntry(id=i, customer_name=name, vehicle=vehicle, service=service, date=day, time=time,
                   status=status, phone=phone, estimated_duration=duration, notes=notes)
        for i, (name, vehicle, service, time, status, phone, duration, notes) in enumerate(rows, start=1)
    ]


def validate_entry(entry: BoardEntryIn):
    if any(not getattr(entry, field).strip() for field in REQUIRED_FIELDS):
        raise ValidationFailed("Please fill in customer name, vehicle and service")


def _find(entries: List[BoardEntry], entry_id: int) -> BoardEntry:
    for entry in entries:
        if entry.id == entry_id:
            return entry
    raise NotFound(f"Appointment {entry_id} not found")


def reduce_board(state: BoardState, action: BoardAction) -> BoardState:
    """Returns the state after `action`; raises ShopError subclasses on rejected actions."""
    if isinstance(action, CreateEntry):
        validate_entry(action.entry)
        next_id = max((e.id for e in state.entries), default=0) + 1
        created = BoardEntry(id=next_id, **action.entry.model_dump())
        return state.model_copy(update={"entries": [*state.entries, created]})

    if isinstance(action, UpdateEntry):
        _find(state.entries, action.entry_id)
        validate_entry(action.entry)
        replaced = BoardEntry(id=action.entry_id, **action.entry.model_dump())
        entries = [replaced if e.id == action.entry_id else e for e in state.entries]
        return state.model_copy(update={"entries": entries})

    if isinstance(action, DeleteEntry):
        target = _find(state.entries, action.entry_id)
        if not action.confirmed:
            raise ConfirmationRequired(f"Are you sure you want to delete the appointment for {target.customer_name}?")
        return state.model_copy(update={"entries": [e for e in state.entries if e.id != action.entry_id]})

    raise TypeError(f"Unknown board action: {action!r}")


def entries_for_date(state: BoardState, day: str) -> List[BoardEntry]:
    """Entries on `day`, sorted by "HH:MM" start time."""
    return sorted((e for e in state.entries if e.date == day), key=lambda e: e.time)


def status_counts(entries: List[BoardEntry]) -> Dict[str, int]:
    counts = {status.value: 0 for status in BoardStatus}
    for entry in entries:
        counts[entry.status.value] += 1
    return counts


class AppointmentBoard:
    def __init__(self, today: Optional[date] = None):
        self.reset(today)

    def reset(self, today: Optional[date] = None):
        today = today or date.today()
        self.state = BoardState(entries=seed_entries(today))

    def dispatch(self, action: BoardAction) -> BoardState:
        self.state = reduce_board(self.state, action)
        logger.info(f"📋 Board action applied: {type(action).__name__}")
        return self.state

    def create(self, entry: BoardEntryIn) -> BoardEntry:
        self.dispatch(CreateEntry(entry))
        return self.state.entries[-1]

    def update(self, entry_id: int, entry: BoardEntryIn) -> BoardEntry:
        self.dispatch(UpdateEntry(entry_id, entry))
        return _find(self.state.entries, entry_id)

    def delete(self, entry_id: int, confirmed: bool = False):
        self.dispatch(DeleteEntry(entry_id, confirmed))

    def day_view(self, day: Optional[str] = None) -> Dict:
        """One day of the board; the day is chosen by the caller, the board keeps no selection."""
        day = day or date.today().isoformat()
        entries = entries_for_date(self.state, day)
        return {
            "date": day,
            "appointments": entries,
            "status_counts": status_counts(entries),
        }


board = AppointmentBoard()
