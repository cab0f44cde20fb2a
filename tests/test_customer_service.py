from datetime import date, datetime

import pytest

from sunny_auto.models.customer import CustomerCohort, LoyaltyTier
from sunny_auto.services.customer_service import (
    CustomerAggregator, aggregate_customers, filter_customers, loyalty_tier,
)
from tests.factories import booking

NOW = datetime(2026, 10, 19, 12, 0)


@pytest.mark.parametrize("count,tier", [
    (1, LoyaltyTier.NEW),
    (2, LoyaltyTier.RETURNING),
    (4, LoyaltyTier.RETURNING),
    (5, LoyaltyTier.REGULAR),
    (9, LoyaltyTier.REGULAR),
    (10, LoyaltyTier.VIP),
    (25, LoyaltyTier.VIP),
])
def test_loyalty_tier_steps(count, tier):
    assert loyalty_tier(count) == tier


def sample_records():
    return [
        booking(email="john@example.com", name="John Smith", preferred_date="2026-10-10"),
        booking(email="john@example.com", name="Johnny Smith", phone="555-0000", preferred_date="2026-10-18"),
        booking(email="john@example.com", name="J. Smith", preferred_date="2025-01-05"),
        booking(email="maria@example.com", name="Maria Garcia", phone="+1 (555) 987-6543", preferred_date="2026-10-01"),
        booking(email="maria@example.com", name="Maria Garcia", phone="+1 (555) 987-6543", preferred_date="2026-10-02"),
        booking(email="lisa@shop.io", name="Lisa Davis", phone="+1 (555) 345-6789", preferred_date="2026-08-01"),
    ]


def test_aggregates_counts_and_date_bounds():
    records = sample_records()
    customers = aggregate_customers(records)

    assert len(customers) == 3
    for customer in customers:
        assert customer.first_service <= customer.last_service
        assert customer.total_services == sum(1 for r in records if r.email == customer.email)


def test_aggregate_sorted_by_last_service_and_uses_latest_contact():
    customers = aggregate_customers(sample_records())

    assert [c.email for c in customers] == ["john@example.com", "maria@example.com", "lisa@shop.io"]
    john = customers[0]
    assert john.name == "Johnny Smith"
    assert john.phone == "555-0000"
    assert john.first_service == date(2025, 1, 5)
    assert john.last_service == date(2026, 10, 18)
    assert john.loyalty_tier == LoyaltyTier.RETURNING
    assert john.appointments[0].preferred_date == date(2026, 10, 18)


def test_aggregate_empty():
    assert aggregate_customers([]) == []


def test_search_by_email_substring_is_case_insensitive():
    customers = aggregate_customers(sample_records())

    result = filter_customers(customers, "EXAMPLE.com", now=NOW)

    assert {c.email for c in result} == {"john@example.com", "maria@example.com"}


def test_search_by_name_and_phone():
    customers = aggregate_customers(sample_records())

    assert [c.email for c in filter_customers(customers, "lisa", now=NOW)] == ["lisa@shop.io"]
    assert [c.email for c in filter_customers(customers, "987-65", now=NOW)] == ["maria@example.com"]


def test_search_without_match_returns_empty_list():
    customers = aggregate_customers(sample_records())

    assert filter_customers(customers, "zzz-nobody", now=NOW) == []


def test_frequent_cohort():
    customers = aggregate_customers(sample_records())

    result = filter_customers(customers, cohort=CustomerCohort.FREQUENT, now=NOW)

    assert [c.email for c in result] == ["john@example.com"]


def test_new_cohort_uses_first_service_within_30_days():
    customers = aggregate_customers(sample_records())

    result = filter_customers(customers, cohort=CustomerCohort.NEW, now=NOW)

    # John's first visit was in 2025, Lisa's in August
    assert [c.email for c in result] == ["maria@example.com"]


def test_aggregator_skips_recomputation_for_identical_input():
    aggregator = CustomerAggregator()
    records = sample_records()

    first = aggregator(records)
    second = aggregator([r.model_copy() for r in records])

    assert first == second
    assert aggregator.recomputations == 1

    changed = records + [booking(email="new@example.com", preferred_date="2026-10-19")]
    assert len(aggregator(changed)) == 4
    assert aggregator.recomputations == 2


def test_aggregator_hands_out_independent_copies():
    aggregator = CustomerAggregator()
    records = sample_records()

    first = aggregator(records)
    first[0].name = "Changed"
    first[0].appointments.clear()
    second = aggregator(records)

    assert aggregator.recomputations == 1
    assert second[0].name != "Changed"
    assert second[0].appointments
