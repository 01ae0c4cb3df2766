"""
pricing/services.py

Pricing plans shown on the public site, managed by super admins.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from guardhub.audit.services import record_audit
from guardhub.database.enums import AuditAction
from guardhub.database.models import Profile
from guardhub.pricing import schemas
from guardhub.pricing.models import PricingPlan

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


def quote_plan(plan: PricingPlan, cycle: schemas.BillingCycle, guards: int) -> schemas.PricingQuote:
    """license + per_guard * guards for the chosen cycle."""
    if cycle == schemas.BillingCycle.YEARLY:
        license_fee, per_guard = plan.yearly_license_fee, plan.per_guard_yearly_fee
    else:
        license_fee, per_guard = plan.monthly_license_fee, plan.per_guard_monthly_fee
    total = (Decimal(license_fee) + Decimal(per_guard) * guards).quantize(CENTS, rounding=ROUND_HALF_UP)
    return schemas.PricingQuote(
        plan_id=plan.id,
        plan_name=plan.name,
        cycle=cycle,
        guards=guards,
        license_fee=license_fee,
        per_guard_fee=per_guard,
        total=total,
        currency=plan.currency,
    )


class PricingService:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_plan_or_404(self, plan_id: UUID) -> PricingPlan:
        plan = await self.db.get(PricingPlan, plan_id)
        if not plan:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Pricing plan not found")
        return plan

    async def list_plans(self, active_only: bool = True) -> list[PricingPlan]:
        stmt = select(PricingPlan).order_by(PricingPlan.display_order.asc(), PricingPlan.name.asc())
        if active_only:
            stmt = stmt.filter(PricingPlan.is_active.is_(True))
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def create_plan(self, user: Profile, payload: schemas.PricingPlanCreate) -> PricingPlan:
        plan = PricingPlan(**payload.model_dump())
        self.db.add(plan)
        await self.db.flush()
        record_audit(self.db, user.id, AuditAction.CREATE, "pricing_plan", plan.id, payload.model_dump())
        await self.db.commit()
        await self.db.refresh(plan)
        logger.info(f"[PRICING] Created plan {plan.name} ({plan.id})")
        return plan

    async def update_plan(self, user: Profile, plan_id: UUID, payload: schemas.PricingPlanUpdate) -> PricingPlan:
        plan = await self.get_plan_or_404(plan_id)
        changes = payload.model_dump(exclude_unset=True)
        for field, value in changes.items():
            setattr(plan, field, value)
        record_audit(self.db, user.id, AuditAction.UPDATE, "pricing_plan", plan.id, changes)
        await self.db.commit()
        await self.db.refresh(plan)
        logger.info(f"[PRICING] Updated plan {plan.id}: {list(changes)}")
        return plan

    async def delete_plan(self, user: Profile, plan_id: UUID) -> None:
        plan = await self.get_plan_or_404(plan_id)
        record_audit(self.db, user.id, AuditAction.DELETE, "pricing_plan", plan.id, {"name": plan.name})
        await self.db.delete(plan)
        await self.db.commit()
        logger.info(f"[PRICING] Deleted plan {plan_id}")

    async def quote(self, plan_id: UUID, cycle: schemas.BillingCycle, guards: int) -> schemas.PricingQuote:
        plan = await self.get_plan_or_404(plan_id)
        if not plan.is_active:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Pricing plan not found")
        return quote_plan(plan, cycle, guards)
