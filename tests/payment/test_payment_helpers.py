"""
tests/payment/test_payment_helpers.py

Unit tests for payment detail masking and transaction outcomes.
"""

from uuid import uuid4

import pytest
from pydantic import ValidationError

from guardhub.payment.models import MANUAL_GATEWAY, PaymentMethodType, TransactionStatus
from guardhub.payment.schemas import PaymentMethodCreate
from guardhub.payment.services import card_brand, mask_payment_details, resolve_transaction_outcome


def test_card_details_keep_last_four_only() -> None:
    payload = PaymentMethodCreate(
        gateway_id=uuid4(),
        type=PaymentMethodType.CARD,
        card_number="4242 4242 4242 4242",
        holder_name="Jane Doe",
        expiry="12/29",
    )
    details = mask_payment_details(payload)
    assert details == {"last4": "4242", "holder_name": "Jane Doe", "expiry": "12/29", "brand": "visa"}
    assert "4242424242424242" not in str(details)


def test_bank_details_keep_last_four_only() -> None:
    payload = PaymentMethodCreate(
        gateway_id=uuid4(),
        type=PaymentMethodType.BANK_ACCOUNT,
        bank_name="First Bank",
        account_number="0123456789",
        routing_number="021000021",
    )
    details = mask_payment_details(payload)
    assert details == {"bank_name": "First Bank", "last4": "6789", "routing_number": "021000021"}


def test_card_requires_card_fields() -> None:
    with pytest.raises(ValidationError):
        PaymentMethodCreate(gateway_id=uuid4(), type=PaymentMethodType.CARD, holder_name="Jane Doe")


def test_expiry_must_be_month_slash_year() -> None:
    with pytest.raises(ValidationError):
        PaymentMethodCreate(
            gateway_id=uuid4(),
            type=PaymentMethodType.CARD,
            card_number="4242424242424242",
            holder_name="Jane Doe",
            expiry="13/29",
        )


@pytest.mark.parametrize(
    ("number", "brand"),
    [
        ("4111111111111111", "visa"),
        ("5555555555554444", "mastercard"),
        ("2221000000000009", "mastercard"),
        ("378282246310005", "amex"),
        ("6011111111111117", "discover"),
        ("3530111333300000", "card"),
    ],
)
def test_card_brand(number: str, brand: str) -> None:
    assert card_brand(number) == brand


def test_manual_gateway_stays_pending() -> None:
    assert resolve_transaction_outcome(MANUAL_GATEWAY) == TransactionStatus.PENDING


def test_other_gateways_complete() -> None:
    assert resolve_transaction_outcome("stripe") == TransactionStatus.COMPLETED
