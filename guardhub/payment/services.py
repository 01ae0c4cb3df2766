"""
payment/services.py

Payment Service Layer
- Gateways (enabled-only view for companies, toggling for super admins)
- Stored payment methods with masked details and a single default
- Paying invoices through a gateway and the resulting transactions
"""

import logging
from typing import Any
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from guardhub.audit.services import record_audit
from guardhub.billing.models import Invoice, InvoiceStatus
from guardhub.billing.schemas import InvoiceRead
from guardhub.billing.services import to_invoice_read
from guardhub.core.dependencies import resolve_company_scope
from guardhub.database.enums import AuditAction, UserRole
from guardhub.database.models import Profile
from guardhub.payment import schemas
from guardhub.payment.models import (
    MANUAL_GATEWAY,
    Payment,
    PaymentGateway,
    PaymentMethod,
    PaymentMethodType,
    PaymentTransaction,
    TransactionStatus,
)
from guardhub.utils.dates import epoch_ms, utcnow

logger = logging.getLogger(__name__)

TRANSACTIONS_LIMIT = 50
PAYABLE_STATUSES = (InvoiceStatus.PENDING, InvoiceStatus.OVERDUE)


# ---------------------------------------------------
# Helpers
# ---------------------------------------------------
def card_brand(card_number: str) -> str:
    digits = card_number.replace(" ", "")
    if digits.startswith("4"):
        return "visa"
    if digits[:2] in {"34", "37"}:
        return "amex"
    if digits[:2] in {"51", "52", "53", "54", "55"} or 2221 <= int(digits[:4] or 0) <= 2720:
        return "mastercard"
    if digits.startswith("6011") or digits.startswith("65"):
        return "discover"
    return "card"


def mask_payment_details(payload: schemas.PaymentMethodCreate) -> dict[str, Any]:
    """The only details we persist: never the full card or account number."""
    if payload.type == PaymentMethodType.CARD:
        number = (payload.card_number or "").replace(" ", "")
        return {
            "last4": number[-4:],
            "holder_name": payload.holder_name,
            "expiry": payload.expiry,
            "brand": card_brand(number),
        }
    return {
        "bank_name": payload.bank_name,
        "last4": (payload.account_number or "")[-4:],
        "routing_number": payload.routing_number,
    }


def resolve_transaction_outcome(gateway_name: str) -> TransactionStatus:
    """Manual payments wait for reconciliation; gateway payments settle immediately."""
    return TransactionStatus.PENDING if gateway_name == MANUAL_GATEWAY else TransactionStatus.COMPLETED


def gateway_transaction_id(gateway_name: str) -> str:
    return f"{gateway_name.upper()}-{epoch_ms()}"


def to_method_read(method: PaymentMethod) -> schemas.PaymentMethodRead:
    return schemas.PaymentMethodRead(
        id=method.id,
        company_id=method.company_id,
        gateway_id=method.gateway_id,
        gateway_name=method.gateway.display_name if method.gateway else None,
        type=method.type,
        details=method.details or {},
        is_default=method.is_default,
        is_active=method.is_active,
        created_at=method.created_at,
    )


def to_transaction_read(txn: PaymentTransaction) -> schemas.PaymentTransactionRead:
    return schemas.PaymentTransactionRead(
        id=txn.id,
        company_id=txn.company_id,
        invoice_id=txn.invoice_id,
        invoice_number=txn.invoice.invoice_number if txn.invoice else None,
        payment_method_id=txn.payment_method_id,
        gateway_id=txn.gateway_id,
        gateway_name=txn.gateway.display_name if txn.gateway else None,
        amount=txn.amount,
        currency=txn.currency,
        status=txn.status,
        gateway_transaction_id=txn.gateway_transaction_id,
        created_at=txn.created_at,
    )


class PaymentService:
    """Service class for payments."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    # ---------------------------------------------------
    # Gateways
    # ---------------------------------------------------
    async def list_gateways(self, user: Profile) -> list[PaymentGateway]:
        stmt = select(PaymentGateway).order_by(PaymentGateway.display_name)
        if user.role != UserRole.SUPER_ADMIN:
            stmt = stmt.filter(PaymentGateway.is_enabled.is_(True))
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def toggle_gateway(self, user: Profile, gateway_id: UUID) -> PaymentGateway:
        gateway = await self.db.get(PaymentGateway, gateway_id)
        if not gateway:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Payment gateway not found")
        gateway.is_enabled = not gateway.is_enabled
        record_audit(
            self.db, user.id, AuditAction.UPDATE, "payment_gateway", gateway.id, {"is_enabled": gateway.is_enabled}
        )
        await self.db.commit()
        await self.db.refresh(gateway)
        logger.info(f"[PAYMENT] Gateway {gateway.name} is_enabled={gateway.is_enabled}")
        return gateway

    # ---------------------------------------------------
    # Payment Methods
    # ---------------------------------------------------
    async def _get_method_in_scope(self, user: Profile, method_id: UUID) -> PaymentMethod:
        result = await self.db.execute(
            select(PaymentMethod)
            .options(selectinload(PaymentMethod.gateway))
            .filter(PaymentMethod.id == method_id)
            .execution_options(populate_existing=True)
        )
        method = result.scalar_one_or_none()
        if not method:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Payment method not found")
        resolve_company_scope(user, method.company_id)
        return method

    async def list_methods(self, user: Profile) -> list[schemas.PaymentMethodRead]:
        company_id = resolve_company_scope(user)
        stmt = (
            select(PaymentMethod)
            .options(selectinload(PaymentMethod.gateway))
            .filter(PaymentMethod.is_active.is_(True))
            .order_by(PaymentMethod.is_default.desc(), PaymentMethod.created_at.desc())
        )
        if company_id is not None:
            stmt = stmt.filter(PaymentMethod.company_id == company_id)
        result = await self.db.execute(stmt)
        return [to_method_read(m) for m in result.scalars().all()]

    async def add_method(self, user: Profile, payload: schemas.PaymentMethodCreate) -> schemas.PaymentMethodRead:
        company_id = resolve_company_scope(user)
        if company_id is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No company assigned to this profile")

        gateway = await self.db.get(PaymentGateway, payload.gateway_id)
        if not gateway or not gateway.is_enabled:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Payment gateway is not available")

        existing = await self.db.execute(
            select(PaymentMethod.id).filter(
                PaymentMethod.company_id == company_id, PaymentMethod.is_active.is_(True)
            )
        )
        is_first = existing.first() is None

        method = PaymentMethod(
            company_id=company_id,
            gateway_id=gateway.id,
            type=payload.type,
            details=mask_payment_details(payload),
            is_default=is_first,
            is_active=True,
        )
        self.db.add(method)
        await self.db.flush()
        record_audit(
            self.db,
            user.id,
            AuditAction.CREATE,
            "payment_method",
            method.id,
            {"type": payload.type.value, "last4": method.details.get("last4")},
        )
        await self.db.commit()
        logger.info(f"[PAYMENT] Added {payload.type.value} method {method.id} for company {company_id}")
        return to_method_read(await self._get_method_in_scope(user, method.id))

    async def deactivate_method(self, user: Profile, method_id: UUID) -> schemas.PaymentMethodRead:
        method = await self._get_method_in_scope(user, method_id)
        method.is_active = False
        method.is_default = False
        record_audit(self.db, user.id, AuditAction.UPDATE, "payment_method", method.id, {"is_active": False})
        await self.db.commit()
        logger.info(f"[PAYMENT] Deactivated payment method {method.id}")
        return to_method_read(method)

    async def set_default_method(self, user: Profile, method_id: UUID) -> schemas.PaymentMethodRead:
        method = await self._get_method_in_scope(user, method_id)
        if not method.is_active:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="Inactive payment methods cannot be default"
            )
        await self.db.execute(
            update(PaymentMethod)
            .where(PaymentMethod.company_id == method.company_id, PaymentMethod.id != method.id)
            .values(is_default=False)
        )
        method.is_default = True
        record_audit(self.db, user.id, AuditAction.UPDATE, "payment_method", method.id, {"is_default": True})
        await self.db.commit()
        logger.info(f"[PAYMENT] Payment method {method.id} is now default for {method.company_id}")
        return to_method_read(method)

    # ---------------------------------------------------
    # Invoices & Transactions
    # ---------------------------------------------------
    async def pending_invoices(self, user: Profile) -> list[InvoiceRead]:
        company_id = resolve_company_scope(user)
        stmt = (
            select(Invoice)
            .options(selectinload(Invoice.company))
            .filter(Invoice.status == InvoiceStatus.PENDING)
            .order_by(Invoice.due_date.asc())
        )
        if company_id is not None:
            stmt = stmt.filter(Invoice.company_id == company_id)
        result = await self.db.execute(stmt)
        return [to_invoice_read(i) for i in result.scalars().all()]

    async def process_payment(
        self, user: Profile, payload: schemas.ProcessPaymentRequest
    ) -> schemas.PaymentTransactionRead:
        method = await self._get_method_in_scope(user, payload.payment_method_id)
        if not method.is_active:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Payment method is inactive")

        invoice = await self.db.get(Invoice, payload.invoice_id)
        if not invoice or invoice.company_id != method.company_id:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Invoice not found")
        if invoice.status not in PAYABLE_STATUSES:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Invoice cannot be paid (status: {invoice.status.value})",
            )

        gateway = method.gateway
        outcome = resolve_transaction_outcome(gateway.name)
        txn = PaymentTransaction(
            company_id=invoice.company_id,
            invoice_id=invoice.id,
            payment_method_id=method.id,
            gateway_id=gateway.id,
            amount=invoice.amount,
            currency="USD",
            status=outcome,
            gateway_transaction_id=gateway_transaction_id(gateway.name),
        )
        self.db.add(txn)
        await self.db.flush()

        if outcome == TransactionStatus.COMPLETED:
            invoice.status = InvoiceStatus.PAID
            invoice.paid_at = utcnow()
            self.db.add(
                Payment(
                    company_id=invoice.company_id,
                    invoice_id=invoice.id,
                    transaction_id=txn.id,
                    amount=invoice.amount,
                    payment_method=gateway.name,
                )
            )

        record_audit(
            self.db,
            user.id,
            AuditAction.CREATE,
            "payment_transaction",
            txn.id,
            {"invoice_id": invoice.id, "amount": invoice.amount, "status": outcome.value},
        )
        await self.db.commit()
        logger.info(
            f"[PAYMENT] Invoice {invoice.invoice_number} via {gateway.name}: {outcome.value} ({txn.gateway_transaction_id})"
        )

        result = await self.db.execute(
            select(PaymentTransaction)
            .options(selectinload(PaymentTransaction.gateway), selectinload(PaymentTransaction.invoice))
            .filter(PaymentTransaction.id == txn.id)
            .execution_options(populate_existing=True)
        )
        return to_transaction_read(result.scalar_one())

    async def list_transactions(
        self, user: Profile, company_id: UUID | None = None
    ) -> list[schemas.PaymentTransactionRead]:
        scope = resolve_company_scope(user, company_id)
        stmt = (
            select(PaymentTransaction)
            .options(selectinload(PaymentTransaction.gateway), selectinload(PaymentTransaction.invoice))
            .order_by(PaymentTransaction.created_at.desc())
            .limit(TRANSACTIONS_LIMIT)
        )
        if scope is not None:
            stmt = stmt.filter(PaymentTransaction.company_id == scope)
        result = await self.db.execute(stmt)
        return [to_transaction_read(t) for t in result.scalars().all()]
