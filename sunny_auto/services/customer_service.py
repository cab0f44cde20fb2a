import hashlib
import json
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional, Sequence

from sunny_auto.core.logger import logger
from sunny_auto.models.booking import BookingRecord
from sunny_auto.models.customer import CustomerAggregate, CustomerCohort, LoyaltyTier

FREQUENT_MIN_SERVICES = 3
NEW_CUSTOMER_DAYS = 30

# (minimum count, tier), checked top-down
LOYALTY_STEPS = (
    (10, LoyaltyTier.VIP),
    (5, LoyaltyTier.REGULAR),
    (2, LoyaltyTier.RETURNING),
)


def loyalty_tier(service_count: int) -> LoyaltyTier:
    for minimum, tier in LOYALTY_STEPS:
        if service_count >= minimum:
            return tier
    return LoyaltyTier.NEW


def _recency(record: BookingRecord):
    created = record.created_at.timestamp() if record.created_at else float("-inf")
    return (record.preferred_date, created)


def aggregate_customers(records: Sequence[BookingRecord]) -> List[CustomerAggregate]:
    """
    Groups bookings by e-mail. Name and phone come from the customer's most recent booking.
    Result is ordered by last service date, newest first.
    """
    groups: Dict[str, List[BookingRecord]] = {}
    for record in records:
        groups.setdefault(record.email, []).append(record)

    customers = []
    for email, bookings in groups.items():
        latest = max(bookings, key=_recency)
        dates = [b.preferred_date for b in bookings]
        customers.append(CustomerAggregate(
            email=email,
            name=latest.name,
            phone=latest.phone,
            total_services=len(bookings),
            first_service=min(dates),
            last_service=max(dates),
            loyalty_tier=loyalty_tier(len(bookings)),
            appointments=sorted(bookings, key=_recency, reverse=True),
        ))

    customers.sort(key=lambda c: c.last_service, reverse=True)
    return customers


def matches_query(customer: CustomerAggregate, query: str) -> bool:
    needle = query.strip().lower()
    if not needle:
        return True
    return any(needle in (field or "").lower() for field in (customer.name, customer.email, customer.phone))


def filter_customers(customers: Sequence[CustomerAggregate], query: str = "",
                     cohort: CustomerCohort = CustomerCohort.ALL,
                     now: Optional[datetime] = None) -> List[CustomerAggregate]:
    now = now or datetime.now()
    result = [c for c in customers if matches_query(c, query)]

    if cohort == CustomerCohort.FREQUENT:
        result = [c for c in result if c.total_services >= FREQUENT_MIN_SERVICES]
    elif cohort == CustomerCohort.NEW:
        cutoff: date = (now - timedelta(days=NEW_CUSTOMER_DAYS)).date()
        result = [c for c in result if c.first_service >= cutoff]

    return result


def content_hash(records: Sequence[BookingRecord]) -> str:
    payload = json.dumps([r.model_dump(mode="json") for r in records], sort_keys=True)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


class CustomerAggregator:
    """Memoizes `aggregate_customers` on the content hash of its input."""

    def __init__(self):
        self._last_hash: Optional[str] = None
        self._last_result: List[CustomerAggregate] = []
        self.recomputations = 0

    def __call__(self, records: Sequence[BookingRecord]) -> List[CustomerAggregate]:
        digest = content_hash(records)
        if digest != self._last_hash:
            self._last_result = aggregate_customers(records)
            self._last_hash = digest
            self.recomputations += 1
            logger.debug(f"Customer aggregation recomputed for {len(records)} bookings")
        # Callers get their own copies, the cached result is never shared
        return [c.model_copy(deep=True) for c in self._last_result]


customer_aggregator = CustomerAggregator()
