"""
payment/routes.py

Payment Routes
- Gateways (list, toggle)
- Payment methods (list, add, deactivate, set default)
- Pending invoices, paying an invoice, transaction history
"""

from uuid import UUID

from fastapi import APIRouter, Query, Request, status

from guardhub.billing.schemas import InvoiceRead
from guardhub.core.dependencies import AdminDep, CompanyAdminDep, DBDep, SuperAdminDep
from guardhub.core.limiter import limiter
from guardhub.database.enums import UserRole
from guardhub.payment import schemas
from guardhub.payment.services import PaymentService

router = APIRouter(prefix="/payments", tags=["Payments"])


# ---------------------------------------------------
# Gateways
# ---------------------------------------------------
@router.get(
    "/gateways",
    response_model=list[schemas.PaymentGatewayRead],
    status_code=status.HTTP_200_OK,
    summary="List Payment Gateways",
    description="Company admins see enabled gateways only; super admins see all with configuration.",
)
@limiter.limit("30/minute")
async def list_gateways(
    request: Request, db: DBDep, current_user: AdminDep
) -> list[schemas.PaymentGatewayRead]:
    gateways = [schemas.PaymentGatewayRead.model_validate(g) for g in await PaymentService(db).list_gateways(current_user)]
    if current_user.role != UserRole.SUPER_ADMIN:
        for gateway in gateways:
            gateway.configuration = None
    return gateways


@router.patch(
    "/gateways/{gateway_id}/toggle",
    response_model=schemas.PaymentGatewayRead,
    status_code=status.HTTP_200_OK,
    summary="Enable / Disable Gateway",
)
@limiter.limit("10/minute")
async def toggle_gateway(
    request: Request, gateway_id: UUID, db: DBDep, current_user: SuperAdminDep
) -> schemas.PaymentGatewayRead:
    gateway = await PaymentService(db).toggle_gateway(current_user, gateway_id)
    return schemas.PaymentGatewayRead.model_validate(gateway)


# ---------------------------------------------------
# Payment Methods
# ---------------------------------------------------
@router.get(
    "/methods",
    response_model=list[schemas.PaymentMethodRead],
    status_code=status.HTTP_200_OK,
    summary="List Payment Methods",
)
@limiter.limit("30/minute")
async def list_methods(request: Request, db: DBDep, current_user: CompanyAdminDep) -> list[schemas.PaymentMethodRead]:
    return await PaymentService(db).list_methods(current_user)


@router.post(
    "/methods",
    response_model=schemas.PaymentMethodRead,
    status_code=status.HTTP_201_CREATED,
    summary="Add Payment Method",
    description="Stores a card or bank account; only masked details are kept. The first method becomes default.",
)
@limiter.limit("10/minute")
async def add_method(
    request: Request, payload: schemas.PaymentMethodCreate, db: DBDep, current_user: CompanyAdminDep
) -> schemas.PaymentMethodRead:
    return await PaymentService(db).add_method(current_user, payload)


@router.patch(
    "/methods/{method_id}/deactivate",
    response_model=schemas.PaymentMethodRead,
    status_code=status.HTTP_200_OK,
    summary="Deactivate Payment Method",
)
@limiter.limit("10/minute")
async def deactivate_method(
    request: Request, method_id: UUID, db: DBDep, current_user: CompanyAdminDep
) -> schemas.PaymentMethodRead:
    return await PaymentService(db).deactivate_method(current_user, method_id)


@router.patch(
    "/methods/{method_id}/default",
    response_model=schemas.PaymentMethodRead,
    status_code=status.HTTP_200_OK,
    summary="Set Default Payment Method",
)
@limiter.limit("10/minute")
async def set_default_method(
    request: Request, method_id: UUID, db: DBDep, current_user: CompanyAdminDep
) -> schemas.PaymentMethodRead:
    return await PaymentService(db).set_default_method(current_user, method_id)


# ---------------------------------------------------
# Invoices & Transactions
# ---------------------------------------------------
@router.get(
    "/pending-invoices",
    response_model=list[InvoiceRead],
    status_code=status.HTTP_200_OK,
    summary="Pending Invoices",
)
@limiter.limit("30/minute")
async def pending_invoices(request: Request, db: DBDep, current_user: CompanyAdminDep) -> list[InvoiceRead]:
    return await PaymentService(db).pending_invoices(current_user)


@router.post(
    "/process",
    response_model=schemas.PaymentTransactionRead,
    status_code=status.HTTP_201_CREATED,
    summary="Pay Invoice",
    description="Manual payments stay pending; gateway payments complete and mark the invoice paid.",
)
@limiter.limit("5/minute")
async def process_payment(
    request: Request, payload: schemas.ProcessPaymentRequest, db: DBDep, current_user: CompanyAdminDep
) -> schemas.PaymentTransactionRead:
    return await PaymentService(db).process_payment(current_user, payload)


@router.get(
    "/transactions",
    response_model=list[schemas.PaymentTransactionRead],
    status_code=status.HTTP_200_OK,
    summary="Transaction History",
    description="The last 50 transactions, newest first.",
)
@limiter.limit("30/minute")
async def list_transactions(
    request: Request,
    db: DBDep,
    current_user: AdminDep,
    company_id: UUID | None = Query(None, description="Company filter (super admin only)"),
) -> list[schemas.PaymentTransactionRead]:
    return await PaymentService(db).list_transactions(current_user, company_id)
