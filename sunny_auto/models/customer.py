from datetime import date
from enum import Enum
from typing import List

from pydantic import BaseModel, Field

from sunny_auto.models.booking import BookingRecord


class LoyaltyTier(str, Enum):
    NEW = "New"
    RETURNING = "Returning"
    REGULAR = "Regular"
    VIP = "VIP"


class CustomerCohort(str, Enum):
    ALL = "all"
    FREQUENT = "frequent"
    NEW = "new"


class CustomerAggregate(BaseModel):
    email: str
    name: str
    phone: str
    total_services: int
    first_service: date
    last_service: date
    loyalty_tier: LoyaltyTier
    appointments: List[BookingRecord] = Field(default_factory=list)
