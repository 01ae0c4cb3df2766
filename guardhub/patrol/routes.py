"""
patrol/routes.py

Patrol Routes
- Patrol routes: list / create / update / delete
- Checkpoints: list / add / update / delete, printable QR image
"""

from uuid import UUID

from fastapi import APIRouter, Query, Request, Response, status

from guardhub.core.dependencies import CurrentUserDep, DBDep, ManagementDep
from guardhub.core.limiter import limiter
from guardhub.patrol import schemas
from guardhub.patrol.services import PatrolService

router = APIRouter(prefix="/patrol", tags=["Patrol"])


# ---------------------------------------------------
# Patrol Routes
# ---------------------------------------------------
@router.get(
    "/routes",
    response_model=list[schemas.PatrolRouteRead],
    status_code=status.HTTP_200_OK,
    summary="List Patrol Routes",
)
@limiter.limit("60/minute")
async def list_routes(
    request: Request,
    db: DBDep,
    current_user: CurrentUserDep,
    site_id: UUID | None = Query(None),
    company_id: UUID | None = Query(None, description="Company filter (super admin only)"),
) -> list[schemas.PatrolRouteRead]:
    return await PatrolService(db).list_routes(current_user, site_id, company_id)


@router.post(
    "/routes",
    response_model=schemas.PatrolRouteRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Patrol Route",
)
@limiter.limit("20/minute")
async def create_route(
    request: Request, payload: schemas.PatrolRouteCreate, db: DBDep, current_user: ManagementDep
) -> schemas.PatrolRouteRead:
    return await PatrolService(db).create_route(current_user, payload)


@router.put(
    "/routes/{route_id}",
    response_model=schemas.PatrolRouteRead,
    status_code=status.HTTP_200_OK,
    summary="Update Patrol Route",
)
@limiter.limit("20/minute")
async def update_route(
    request: Request,
    route_id: UUID,
    payload: schemas.PatrolRouteUpdate,
    db: DBDep,
    current_user: ManagementDep,
) -> schemas.PatrolRouteRead:
    return await PatrolService(db).update_route(current_user, route_id, payload)


@router.delete(
    "/routes/{route_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Patrol Route",
)
@limiter.limit("10/minute")
async def delete_route(request: Request, route_id: UUID, db: DBDep, current_user: ManagementDep) -> None:
    await PatrolService(db).delete_route(current_user, route_id)


# ---------------------------------------------------
# Checkpoints
# ---------------------------------------------------
@router.get(
    "/routes/{route_id}/checkpoints",
    response_model=list[schemas.CheckpointRead],
    status_code=status.HTTP_200_OK,
    summary="List Checkpoints",
)
@limiter.limit("60/minute")
async def list_checkpoints(
    request: Request, route_id: UUID, db: DBDep, current_user: CurrentUserDep
) -> list[schemas.CheckpointRead]:
    checkpoints = await PatrolService(db).list_checkpoints(current_user, route_id)
    return [schemas.CheckpointRead.model_validate(c) for c in checkpoints]


@router.post(
    "/routes/{route_id}/checkpoints",
    response_model=schemas.CheckpointRead,
    status_code=status.HTTP_201_CREATED,
    summary="Add Checkpoint",
)
@limiter.limit("30/minute")
async def add_checkpoint(
    request: Request,
    route_id: UUID,
    payload: schemas.CheckpointCreate,
    db: DBDep,
    current_user: ManagementDep,
) -> schemas.CheckpointRead:
    checkpoint = await PatrolService(db).add_checkpoint(current_user, route_id, payload)
    return schemas.CheckpointRead.model_validate(checkpoint)


@router.put(
    "/checkpoints/{checkpoint_id}",
    response_model=schemas.CheckpointRead,
    status_code=status.HTTP_200_OK,
    summary="Update Checkpoint",
)
@limiter.limit("30/minute")
async def update_checkpoint(
    request: Request,
    checkpoint_id: UUID,
    payload: schemas.CheckpointUpdate,
    db: DBDep,
    current_user: ManagementDep,
) -> schemas.CheckpointRead:
    checkpoint = await PatrolService(db).update_checkpoint(current_user, checkpoint_id, payload)
    return schemas.CheckpointRead.model_validate(checkpoint)


@router.delete(
    "/checkpoints/{checkpoint_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Checkpoint",
)
@limiter.limit("20/minute")
async def delete_checkpoint(
    request: Request, checkpoint_id: UUID, db: DBDep, current_user: ManagementDep
) -> None:
    await PatrolService(db).delete_checkpoint(current_user, checkpoint_id)


@router.get(
    "/checkpoints/{checkpoint_id}/qr",
    response_class=Response,
    status_code=status.HTTP_200_OK,
    summary="Checkpoint QR Image",
    description="PNG rendering of the checkpoint's QR payload, for printing.",
    responses={200: {"content": {"image/png": {}}}},
)
@limiter.limit("30/minute")
async def checkpoint_qr(
    request: Request, checkpoint_id: UUID, db: DBDep, current_user: ManagementDep
) -> Response:
    png = await PatrolService(db).checkpoint_qr_png(current_user, checkpoint_id)
    return Response(content=png, media_type="image/png")
