"""
site/routes.py

Site Routes
- List / create / get / update / delete sites (company scoped)
- Weekly schedule view
"""

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Query, Request, status

from guardhub.core.dependencies import CurrentUserDep, DBDep, ManagementDep
from guardhub.core.limiter import limiter
from guardhub.site import schemas
from guardhub.site.services import SiteService

router = APIRouter(prefix="/sites", tags=["Sites"])


@router.get(
    "",
    response_model=list[schemas.SiteRead],
    status_code=status.HTTP_200_OK,
    summary="List Sites",
)
@limiter.limit("60/minute")
async def list_sites(
    request: Request,
    db: DBDep,
    current_user: CurrentUserDep,
    company_id: UUID | None = Query(None, description="Company filter (super admin only)"),
) -> list[schemas.SiteRead]:
    sites = await SiteService(db).list_sites(current_user, company_id)
    return [schemas.SiteRead.model_validate(s) for s in sites]


@router.get(
    "/weekly",
    response_model=schemas.SiteWeeklyView,
    status_code=status.HTTP_200_OK,
    summary="Weekly Site Schedule",
    description="Sites in scope with their shifts for the Sunday-Saturday week containing `reference_date`.",
)
@limiter.limit("30/minute")
async def weekly_view(
    request: Request,
    db: DBDep,
    current_user: ManagementDep,
    reference_date: date | None = Query(None, description="Any day inside the week; defaults to today"),
    company_id: UUID | None = Query(None),
) -> schemas.SiteWeeklyView:
    return await SiteService(db).weekly_view(current_user, reference_date or date.today(), company_id)


@router.post(
    "",
    response_model=schemas.SiteRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Site",
)
@limiter.limit("20/minute")
async def create_site(
    request: Request, payload: schemas.SiteCreate, db: DBDep, current_user: ManagementDep
) -> schemas.SiteRead:
    site = await SiteService(db).create_site(current_user, payload)
    return schemas.SiteRead.model_validate(site)


@router.get(
    "/{site_id}",
    response_model=schemas.SiteRead,
    status_code=status.HTTP_200_OK,
    summary="Get Site",
)
@limiter.limit("60/minute")
async def get_site(request: Request, site_id: UUID, db: DBDep, current_user: CurrentUserDep) -> schemas.SiteRead:
    site = await SiteService(db).get_site_in_scope(current_user, site_id)
    return schemas.SiteRead.model_validate(site)


@router.put(
    "/{site_id}",
    response_model=schemas.SiteRead,
    status_code=status.HTTP_200_OK,
    summary="Update Site",
)
@limiter.limit("20/minute")
async def update_site(
    request: Request,
    site_id: UUID,
    payload: schemas.SiteUpdate,
    db: DBDep,
    current_user: ManagementDep,
) -> schemas.SiteRead:
    site = await SiteService(db).update_site(current_user, site_id, payload)
    return schemas.SiteRead.model_validate(site)


@router.delete(
    "/{site_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Site",
)
@limiter.limit("10/minute")
async def delete_site(request: Request, site_id: UUID, db: DBDep, current_user: ManagementDep) -> None:
    await SiteService(db).delete_site(current_user, site_id)
