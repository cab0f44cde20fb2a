from typing import List

from pydantic import BaseModel, Field


class CheckoutRequest(BaseModel):
    services: List[str] = Field(min_length=1)


class CheckoutLine(BaseModel):
    service: str
    price: float


class CheckoutSummary(BaseModel):
    lines: List[CheckoutLine]
    subtotal: float
    tax_rate: float
    tax: float
    total: float
