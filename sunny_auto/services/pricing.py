from typing import Dict, Iterable, List, Mapping, Tuple

from sunny_auto.core.config import settings
from sunny_auto.core.logger import logger
from sunny_auto.models.checkout import CheckoutLine, CheckoutSummary


class PriceTable:
    """
    Static service-name -> price lookup.
    Matching is case-insensitive and exact; unknown names get the default price.
    """

    def __init__(self, name: str, prices: Mapping[str, float], default: float):
        self.name = name
        self.default = default
        self._prices: Dict[str, float] = {k.strip().lower(): float(v) for k, v in prices.items()}

    def price(self, service_type: str) -> float:
        if not service_type:
            return self.default
        return self._prices.get(service_type.strip().lower(), self.default)

    def __contains__(self, service_type: str) -> bool:
        return bool(service_type) and service_type.strip().lower() in self._prices

    def items(self) -> List[Tuple[str, float]]:
        return sorted(self._prices.items())

    def as_dict(self) -> Dict[str, float]:
        return dict(self.items())


# Prices shown to customers on the services and checkout pages
CHECKOUT_PRICES = PriceTable(
    "checkout",
    {
        "oil change": 49.99,
        "brake service": 129.99,
        "brake inspection": 79.99,
        "tire rotation": 29.99,
        "basic service": 79.99,
        "full service": 199.99,
        "ac repair": 149.99,
        "battery replacement": 89.99,
    },
    default=settings.DEFAULT_PRICE,
)

# Prices used when the admin finance screen invoices completed appointments
INVOICE_PRICES = PriceTable(
    "invoice",
    {
        "oil change": 89.99,
        "tire rotation": 49.99,
        "brake service": 199.99,
        "engine diagnostic": 79.99,
        "transmission service": 149.99,
        "battery replacement": 129.99,
        "ac service": 119.99,
        "full service": 299.99,
        "wheel alignment": 89.99,
        "filter replacement": 39.99,
    },
    default=settings.DEFAULT_PRICE,
)


def price(service_type: str, table: PriceTable = CHECKOUT_PRICES) -> float:
    return table.price(service_type)


def divergent_prices(a: PriceTable = CHECKOUT_PRICES, b: PriceTable = INVOICE_PRICES) -> Dict[str, Tuple[float, float]]:
    """Services priced in both tables with different values."""
    theirs = b.as_dict()
    return {
        name: (value, theirs[name])
        for name, value in a.items()
        if name in theirs and theirs[name] != value
    }


def report_price_divergence():
    diverging = divergent_prices()
    if diverging:
        logger.warning(
            f"⚠️ Checkout and invoice price tables disagree for {len(diverging)} services: "
            + ", ".join(f"{name} ({c} vs {i})" for name, (c, i) in diverging.items())
        )
    return diverging


def checkout_summary(services: Iterable[str], table: PriceTable = CHECKOUT_PRICES,
                     tax_rate: float = None) -> CheckoutSummary:
    """
    Order summary: subtotal of the line prices plus tax at the shop rate.
    Plain float dollars; tax and total are rounded to cents for display.
    """
    if tax_rate is None:
        tax_rate = settings.TAX_RATE

    lines = [CheckoutLine(service=name, price=table.price(name)) for name in services]
    subtotal = sum(line.price for line in lines)
    tax = subtotal * tax_rate

    return CheckoutSummary(
        lines=lines,
        subtotal=round(subtotal, 2),
        tax_rate=tax_rate,
        tax=round(tax, 2),
        total=round(subtotal + tax, 2),
    )
