"""
messaging/routes.py

Messaging Routes
- Contacts
- Send a message
- Conversation history and read receipts
"""

from uuid import UUID

from fastapi import APIRouter, Request, status

from guardhub.core.dependencies import CurrentUserDep, DBDep
from guardhub.core.limiter import limiter
from guardhub.messaging import schemas
from guardhub.messaging.services import MessagingService

router = APIRouter(prefix="/messages", tags=["Messaging"])


@router.get(
    "/contacts",
    response_model=list[schemas.ChatContact],
    status_code=status.HTTP_200_OK,
    summary="Chat Contacts",
    description="Members of the caller's company, with unread counts.",
)
@limiter.limit("30/minute")
async def list_contacts(request: Request, db: DBDep, current_user: CurrentUserDep) -> list[schemas.ChatContact]:
    return await MessagingService(db).list_contacts(current_user)


@router.post(
    "",
    response_model=schemas.ChatMessageRead,
    status_code=status.HTTP_201_CREATED,
    summary="Send Message",
)
@limiter.limit("60/minute")
async def send_message(
    request: Request, payload: schemas.ChatMessageCreate, db: DBDep, current_user: CurrentUserDep
) -> schemas.ChatMessageRead:
    return await MessagingService(db).send_message(current_user, payload)


@router.get(
    "/conversations/{user_id}",
    response_model=list[schemas.ChatMessageRead],
    status_code=status.HTTP_200_OK,
    summary="Conversation",
    description="Messages exchanged with a user, oldest first.",
)
@limiter.limit("60/minute")
async def get_conversation(
    request: Request, user_id: UUID, db: DBDep, current_user: CurrentUserDep
) -> list[schemas.ChatMessageRead]:
    return await MessagingService(db).conversation(current_user, user_id)


@router.patch(
    "/conversations/{user_id}/read",
    response_model=schemas.MarkReadResponse,
    status_code=status.HTTP_200_OK,
    summary="Mark Conversation Read",
)
@limiter.limit("60/minute")
async def mark_read(
    request: Request, user_id: UUID, db: DBDep, current_user: CurrentUserDep
) -> schemas.MarkReadResponse:
    updated = await MessagingService(db).mark_read(current_user, user_id)
    return schemas.MarkReadResponse(updated=updated)
