import pytest

from sunny_auto.services.pricing import (
    CHECKOUT_PRICES, INVOICE_PRICES, PriceTable, checkout_summary, divergent_prices, price,
)


@pytest.mark.parametrize("name", ["Oil Change", "oil change", "OIL CHANGE", "  Oil Change "])
def test_lookup_is_case_insensitive(name):
    assert price(name) == 49.99


def test_unknown_service_gets_default_price():
    assert price("Flux Capacitor Alignment") == CHECKOUT_PRICES.default
    assert price("") == CHECKOUT_PRICES.default
    assert INVOICE_PRICES.price("General Maintenance") == 99.99


def test_oil_change_checkout_total():
    summary = checkout_summary(["Oil Change"])

    assert summary.subtotal == 49.99
    assert summary.tax == 4.00
    assert summary.total == 53.99


def test_two_line_order_matches_payment_page():
    summary = checkout_summary(["Oil Change", "Brake Inspection"])

    assert [line.price for line in summary.lines] == [49.99, 79.99]
    assert summary.subtotal == 129.98
    assert summary.tax == 10.40
    assert summary.total == 140.38


def test_custom_tax_rate():
    table = PriceTable("test", {"wash": 10.0}, default=5.0)
    summary = checkout_summary(["wash", "unknown"], table=table, tax_rate=0.1)

    assert summary.subtotal == 15.0
    assert summary.tax == 1.5
    assert summary.total == 16.5


def test_tables_disagree_on_shared_services():
    diverging = divergent_prices()

    assert diverging["oil change"] == (49.99, 89.99)
    assert diverging["brake service"] == (129.99, 199.99)
    # priced in only one table
    assert "brake inspection" not in diverging
    assert "engine diagnostic" not in diverging
