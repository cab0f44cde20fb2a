import itertools

from sunny_auto.models.booking import BookingRecord
from sunny_auto.models.profile import Account

_ids = itertools.count(1)


def booking_row(**overrides) -> dict:
    n = next(_ids)
    row = {
        "id": f"a{n:03d}f6c2-77d1-4d2e-9a7b-5f1e0c9b{n:04d}",
        "name": "John Smith",
        "email": "john@example.com",
        "phone": "+1 (555) 123-4567",
        "vehicle_type": "Sedan",
        "service_type": "Oil Change",
        "preferred_date": "2026-10-15",
        "preferred_time": "09:00",
        "message": "",
        "status": "pending",
        "created_at": "2026-10-01T08:00:00+00:00",
    }
    row.update(overrides)
    return row


def booking(**overrides) -> BookingRecord:
    return BookingRecord.model_validate(booking_row(**overrides))


def account(**overrides) -> Account:
    data = {
        "id": "3f9a1c2e-5b6d-4e7f-8a9b-0c1d2e3f4a5b",
        "email": "jane@example.com",
        "user_metadata": {"full_name": "Jane Doe", "phone": "+1 (555) 222-3333"},
    }
    data.update(overrides)
    return Account(**data)
