from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError

from sunny_auto.core.cancellation import CancellationToken
from sunny_auto.core.errors import BackendUnavailable
from sunny_auto.core.logger import logger
from sunny_auto.models.booking import BookingRecord, PaymentMethod
from sunny_auto.services.db_service import db_service
from sunny_auto.services.finance_service import payment_changes


def parse_bookings(rows: Iterable[Dict[str, Any]]) -> List[BookingRecord]:
    records = []
    for row in rows:
        try:
            records.append(BookingRecord.model_validate(row))
        except ValidationError as e:
            logger.warning(f"⚠️ Skipping malformed appointment row {row.get('id')}: {e.error_count()} errors")
    return records


async def load_bookings(token: Optional[CancellationToken] = None) -> List[BookingRecord]:
    """
    All bookings, newest preferred date first. A failed fetch yields [] (logged by db_service).
    Raises Cancelled if the token was cancelled while the fetch was in flight.
    """
    token = token or CancellationToken()
    rows = await token.run(db_service.fetch_appointments())
    return parse_bookings(rows)


async def mark_paid(record_id: str, method: PaymentMethod, today: Optional[date] = None):
    changes = payment_changes(method, today or date.today())
    if not await db_service.update_appointment(record_id, changes):
        raise BackendUnavailable("Failed to process payment. Please try again.")
    logger.info(f"💳 Payment recorded for appointment {record_id} ({method.value})")
