import calendar
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional, Sequence

from sunny_auto.core.errors import InvalidTransition, NotFound
from sunny_auto.models.booking import (
    BookingRecord, BookingStatus, BusinessSummary, FinanceRecord, MonthlyRevenue,
    PaymentMethod, PaymentReport, PaymentStatus, ReportPeriod, ServiceRevenue,
)
from sunny_auto.services.pricing import INVOICE_PRICES, PriceTable


def invoice_number(record_id: str) -> str:
    return f"INV-{record_id[:8].upper()}"


def to_finance_record(record: BookingRecord, table: PriceTable = INVOICE_PRICES) -> FinanceRecord:
    """
    Adds amount, invoice number and payment fields.
    Completed bookings without stored payment details are treated as paid by credit card
    on their preferred date.
    """
    data = record.model_dump()
    completed = record.status == BookingStatus.COMPLETED
    data.update(
        amount=table.price(record.service_type),
        invoice_number=invoice_number(record.id),
        payment_status=PaymentStatus.PAID if completed else PaymentStatus.PENDING,
        payment_method=record.payment_method or (PaymentMethod.CREDIT_CARD if completed else None),
        payment_date=record.payment_date or (record.preferred_date if completed else None),
    )
    return FinanceRecord(**data)


def enrich(records: Sequence[BookingRecord], table: PriceTable = INVOICE_PRICES) -> List[FinanceRecord]:
    return [to_finance_record(r, table) for r in records]


def completed_only(records: Sequence[FinanceRecord]) -> List[FinanceRecord]:
    return [r for r in records if r.status == BookingStatus.COMPLETED]


def _months_back(day: date, months: int) -> date:
    month_index = day.year * 12 + (day.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def window_start(period: ReportPeriod, now: datetime) -> date:
    today = now.date()
    if period == ReportPeriod.WEEKLY:
        return today - timedelta(days=7)
    if period == ReportPeriod.BIWEEKLY:
        return today - timedelta(days=14)
    return _months_back(today, 1)


def settlement_date(record: FinanceRecord) -> date:
    return record.payment_date or record.preferred_date


def generate_report(period: ReportPeriod, records: Sequence[FinanceRecord],
                    now: Optional[datetime] = None) -> PaymentReport:
    """
    Completed payments settled inside [now - window, now], with revenue,
    service count and average ticket (0 when nothing matched).
    """
    now = now or datetime.now()
    start, end = window_start(period, now), now.date()

    payments = [r for r in completed_only(records) if start <= settlement_date(r) <= end]
    revenue = sum(p.amount for p in payments)
    count = len(payments)

    return PaymentReport(
        period=period,
        window_start=start,
        window_end=end,
        total_revenue=revenue,
        total_services=count,
        average_ticket=revenue / count if count > 0 else 0.0,
        payments=payments,
    )


def payment_changes(method: PaymentMethod, today: date) -> Dict[str, str]:
    """Column values written to the store when a payment is taken."""
    return {
        "status": BookingStatus.COMPLETED.value,
        "payment_status": PaymentStatus.PAID.value,
        "payment_method": method.value,
        "payment_date": today.isoformat(),
    }


def check_payable(record: BookingRecord):
    if record.status != BookingStatus.PENDING:
        raise InvalidTransition(
            f"Appointment {invoice_number(record.id)} is {record.status.value}; only pending appointments can be paid"
        )


def apply_payment(records: Sequence[BookingRecord], record_id: str, method: PaymentMethod,
                  today: Optional[date] = None) -> List[BookingRecord]:
    """
    Pure version of the payment transition: returns a new list where exactly the
    matching pending record is completed and stamped with `today`.
    """
    today = today or date.today()
    target = next((r for r in records if r.id == record_id), None)
    if target is None:
        raise NotFound(f"Appointment {record_id} not found")
    check_payable(target)

    changes = payment_changes(method, today)
    return [r.model_validate({**r.model_dump(), **changes}) if r.id == record_id else r for r in records]


def _month_label(day: date) -> str:
    return day.strftime("%b %Y")


def business_summary(records: Sequence[FinanceRecord], now: Optional[datetime] = None,
                     months: int = 6, top: int = 5) -> BusinessSummary:
    """Revenue per month (oldest first), top services by revenue and payment counts."""
    now = now or datetime.now()
    completed = completed_only(records)
    revenue = sum(r.amount for r in completed)

    monthly = []
    for back in range(months - 1, -1, -1):
        month_day = _months_back(now.date(), back)
        total = sum(
            r.amount for r in completed
            if (settlement_date(r).year, settlement_date(r).month) == (month_day.year, month_day.month)
        )
        monthly.append(MonthlyRevenue(month=_month_label(month_day), revenue=total))

    per_service: Dict[str, ServiceRevenue] = {}
    for r in completed:
        entry = per_service.setdefault(r.service_type, ServiceRevenue(service=r.service_type, count=0, revenue=0.0))
        entry.count += 1
        entry.revenue += r.amount
    popular = sorted(per_service.values(), key=lambda s: s.revenue, reverse=True)[:top]

    return BusinessSummary(
        total_revenue=revenue,
        completed_payments=len(completed),
        pending_payments=sum(1 for r in records if r.payment_status == PaymentStatus.PENDING),
        average_payment_value=revenue / len(completed) if completed else 0.0,
        monthly_revenue=monthly,
        popular_services=popular,
    )
