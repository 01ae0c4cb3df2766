"""
tests/pricing/test_pricing_quote.py

Unit tests for pricing plan quotes.
"""

from decimal import Decimal
from uuid import uuid4

import pytest

from guardhub.pricing.models import PricingPlan
from guardhub.pricing.schemas import BillingCycle, PricingPlanCreate
from guardhub.pricing.services import quote_plan


@pytest.fixture
def plan() -> PricingPlan:
    return PricingPlan(
        id=uuid4(),
        name="Professional",
        monthly_license_fee=Decimal("499.00"),
        yearly_license_fee=Decimal("4990.00"),
        per_guard_monthly_fee=Decimal("12.00"),
        per_guard_yearly_fee=Decimal("120.00"),
        currency="USD",
    )


def test_monthly_quote(plan: PricingPlan) -> None:
    quote = quote_plan(plan, BillingCycle.MONTHLY, 10)
    assert quote.total == Decimal("619.00")
    assert quote.license_fee == Decimal("499.00")
    assert quote.per_guard_fee == Decimal("12.00")


def test_yearly_quote(plan: PricingPlan) -> None:
    quote = quote_plan(plan, BillingCycle.YEARLY, 10)
    assert quote.total == Decimal("6190.00")
    assert quote.cycle == BillingCycle.YEARLY


def test_quote_without_guards(plan: PricingPlan) -> None:
    assert quote_plan(plan, BillingCycle.MONTHLY, 0).total == Decimal("499.00")


def test_plan_limits_default_to_unlimited() -> None:
    payload = PricingPlanCreate(
        name="Starter",
        monthly_license_fee=Decimal("199.00"),
        yearly_license_fee=Decimal("1990.00"),
        per_guard_monthly_fee=Decimal("15.00"),
        per_guard_yearly_fee=Decimal("150.00"),
    )
    assert payload.max_users == payload.max_sites == payload.max_guards == -1
