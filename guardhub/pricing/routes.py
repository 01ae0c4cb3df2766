"""
pricing/routes.py

Pricing Routes
- Public: active plans and quotes
- Super admin: full plan management
"""

from uuid import UUID

from fastapi import APIRouter, Query, Request, status

from guardhub.core.dependencies import DBDep, SuperAdminDep
from guardhub.core.limiter import limiter
from guardhub.core.schemas import MessageResponse
from guardhub.pricing import schemas
from guardhub.pricing.services import PricingService

router = APIRouter(prefix="/pricing", tags=["Pricing"])


# ---------------------------------------------------
# Public
# ---------------------------------------------------
@router.get(
    "/plans",
    response_model=list[schemas.PricingPlanRead],
    status_code=status.HTTP_200_OK,
    summary="Public Pricing Plans",
)
@limiter.limit("60/minute")
async def public_plans(request: Request, db: DBDep) -> list[schemas.PricingPlanRead]:
    return await PricingService(db).list_plans(active_only=True)


@router.get(
    "/plans/{plan_id}/quote",
    response_model=schemas.PricingQuote,
    status_code=status.HTTP_200_OK,
    summary="Quote a Plan",
    description="Total for a billing cycle: license fee plus per-guard fee times guards.",
)
@limiter.limit("60/minute")
async def quote_plan(
    request: Request,
    plan_id: UUID,
    db: DBDep,
    cycle: schemas.BillingCycle = Query(schemas.BillingCycle.MONTHLY),
    guards: int = Query(1, ge=0, le=100000),
) -> schemas.PricingQuote:
    return await PricingService(db).quote(plan_id, cycle, guards)


# ---------------------------------------------------
# Super Admin
# ---------------------------------------------------
@router.get(
    "/admin/plans",
    response_model=list[schemas.PricingPlanRead],
    status_code=status.HTTP_200_OK,
    summary="All Pricing Plans",
)
@limiter.limit("30/minute")
async def all_plans(request: Request, db: DBDep, current_user: SuperAdminDep) -> list[schemas.PricingPlanRead]:
    return await PricingService(db).list_plans(active_only=False)


@router.post(
    "/admin/plans",
    response_model=schemas.PricingPlanRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Pricing Plan",
)
@limiter.limit("10/minute")
async def create_plan(
    request: Request, payload: schemas.PricingPlanCreate, db: DBDep, current_user: SuperAdminDep
) -> schemas.PricingPlanRead:
    return await PricingService(db).create_plan(current_user, payload)


@router.put(
    "/admin/plans/{plan_id}",
    response_model=schemas.PricingPlanRead,
    status_code=status.HTTP_200_OK,
    summary="Update Pricing Plan",
)
@limiter.limit("10/minute")
async def update_plan(
    request: Request, plan_id: UUID, payload: schemas.PricingPlanUpdate, db: DBDep, current_user: SuperAdminDep
) -> schemas.PricingPlanRead:
    return await PricingService(db).update_plan(current_user, plan_id, payload)


@router.delete(
    "/admin/plans/{plan_id}",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Delete Pricing Plan",
)
@limiter.limit("10/minute")
async def delete_plan(
    request: Request, plan_id: UUID, db: DBDep, current_user: SuperAdminDep
) -> MessageResponse:
    await PricingService(db).delete_plan(current_user, plan_id)
    return MessageResponse(detail="Pricing plan deleted")
