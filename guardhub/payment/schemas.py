"""
payment/schemas.py

Schemas for payment gateways, stored payment methods and transactions.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from guardhub.payment.models import PaymentMethodType, TransactionStatus


# ---------------------------------------------------
# Gateways
# ---------------------------------------------------
class PaymentGatewayRead(BaseModel):
    id: UUID
    name: str
    display_name: str
    is_enabled: bool
    configuration: dict[str, Any] | None = Field(None, description="Only returned to super admins")
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ---------------------------------------------------
# Payment Methods
# ---------------------------------------------------
class PaymentMethodCreate(BaseModel):
    """
    Raw card or bank details. Only masked fields are persisted.
    """

    gateway_id: UUID
    type: PaymentMethodType
    # card
    card_number: str | None = Field(None, pattern=r"^[0-9 ]{12,23}$")
    holder_name: str | None = Field(None, max_length=150)
    expiry: str | None = Field(None, pattern=r"^(0[1-9]|1[0-2])/[0-9]{2}$", description="MM/YY")
    # bank account
    bank_name: str | None = Field(None, max_length=150)
    account_number: str | None = Field(None, pattern=r"^[0-9]{4,34}$")
    routing_number: str | None = Field(None, max_length=20)

    @model_validator(mode="after")
    def required_fields_for_type(self) -> "PaymentMethodCreate":
        if self.type == PaymentMethodType.CARD:
            missing = [f for f in ("card_number", "holder_name", "expiry") if not getattr(self, f)]
        else:
            missing = [f for f in ("bank_name", "account_number", "routing_number") if not getattr(self, f)]
        if missing:
            raise ValueError(f"Missing fields for {self.type.value}: {', '.join(missing)}")
        return self


class PaymentMethodRead(BaseModel):
    id: UUID
    company_id: UUID
    gateway_id: UUID
    gateway_name: str | None = None
    type: PaymentMethodType
    details: dict[str, Any]
    is_default: bool
    is_active: bool
    created_at: datetime


# ---------------------------------------------------
# Transactions
# ---------------------------------------------------
class ProcessPaymentRequest(BaseModel):
    invoice_id: UUID
    payment_method_id: UUID


class PaymentTransactionRead(BaseModel):
    id: UUID
    company_id: UUID
    invoice_id: UUID
    invoice_number: str | None = None
    payment_method_id: UUID | None = None
    gateway_id: UUID
    gateway_name: str | None = None
    amount: Decimal
    currency: str
    status: TransactionStatus
    gateway_transaction_id: str
    created_at: datetime
