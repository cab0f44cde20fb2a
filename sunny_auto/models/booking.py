from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class BookingStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"


class PaymentMethod(str, Enum):
    CREDIT_CARD = "credit_card"
    DEBIT_CARD = "debit_card"
    CASH = "cash"
    DIGITAL_WALLET = "digital_wallet"


PAYMENT_METHOD_LABELS = {
    PaymentMethod.CREDIT_CARD: "Credit Card",
    PaymentMethod.DEBIT_CARD: "Debit Card",
    PaymentMethod.CASH: "Cash",
    PaymentMethod.DIGITAL_WALLET: "Digital Wallet",
}


class BookingRecord(BaseModel):
    """One row of the `appointments` table."""
    id: str
    name: str = ""
    email: str
    phone: str = ""
    vehicle_type: str = ""
    service_type: str = ""
    preferred_date: date
    preferred_time: str = ""
    message: Optional[str] = None
    status: BookingStatus = BookingStatus.PENDING
    created_at: Optional[datetime] = None

    # Written by the payment flow, absent on fresh bookings
    payment_status: Optional[PaymentStatus] = None
    payment_method: Optional[PaymentMethod] = None
    payment_date: Optional[date] = None

    @field_validator("preferred_date", "payment_date", mode="before")
    @classmethod
    def _date_only(cls, value):
        # Supabase may hand back full timestamps for date columns
        if isinstance(value, str) and "T" in value:
            return value.split("T", 1)[0]
        return value


class FinanceRecord(BookingRecord):
    """BookingRecord plus the finance fields derived at read time."""
    amount: float
    invoice_number: str
    payment_status: PaymentStatus = PaymentStatus.PENDING


class PaymentRequest(BaseModel):
    payment_method: PaymentMethod = PaymentMethod.CREDIT_CARD
    notes: str = ""


class ReportPeriod(str, Enum):
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"


class PaymentReport(BaseModel):
    period: ReportPeriod
    window_start: date
    window_end: date
    total_revenue: float = 0.0
    total_services: int = 0
    average_ticket: float = 0.0
    payments: List[FinanceRecord] = Field(default_factory=list)


class MonthlyRevenue(BaseModel):
    month: str
    revenue: float


class ServiceRevenue(BaseModel):
    service: str
    count: int
    revenue: float


class BusinessSummary(BaseModel):
    total_revenue: float
    completed_payments: int
    pending_payments: int
    average_payment_value: float
    monthly_revenue: List[MonthlyRevenue]
    popular_services: List[ServiceRevenue]
