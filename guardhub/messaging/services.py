"""
messaging/services.py

Messaging Service Logic
- Contacts within the caller's company
- Sending, reading and acknowledging direct messages
- Pushing new messages to connected recipients
"""

import logging
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import and_, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from guardhub.database.enums import UserRole
from guardhub.database.models import Profile
from guardhub.messaging import schemas
from guardhub.messaging.manager import manager, profile_group
from guardhub.messaging.models import ChatMessage

logger = logging.getLogger(__name__)


def to_message_read(message: ChatMessage) -> schemas.ChatMessageRead:
    return schemas.ChatMessageRead(
        id=message.id,
        company_id=message.company_id,
        sender_id=message.sender_id,
        sender_name=message.sender.full_name if message.sender else None,
        recipient_id=message.recipient_id,
        message=message.message,
        is_read=message.is_read,
        created_at=message.created_at,
    )


def same_chat_scope(sender: Profile, recipient: Profile) -> bool:
    """Company members chat within their company; super admins chat among themselves."""
    if sender.role == UserRole.SUPER_ADMIN or recipient.role == UserRole.SUPER_ADMIN:
        return sender.role == recipient.role
    return sender.company_id is not None and sender.company_id == recipient.company_id


async def push_message(message: schemas.ChatMessageRead) -> None:
    event = schemas.ChatEvent(message=message).model_dump(mode="json")
    await manager.broadcast([profile_group(message.recipient_id), profile_group(message.sender_id)], event)


class MessagingService:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def list_contacts(self, user: Profile) -> list[schemas.ChatContact]:
        stmt = select(Profile).filter(Profile.id != user.id, Profile.is_active.is_(True)).order_by(Profile.full_name)
        if user.role == UserRole.SUPER_ADMIN:
            stmt = stmt.filter(Profile.role == UserRole.SUPER_ADMIN)
        elif user.company_id is None:
            return []
        else:
            stmt = stmt.filter(Profile.company_id == user.company_id)
        contacts = list((await self.db.execute(stmt)).scalars().all())

        unread_rows = await self.db.execute(
            select(ChatMessage.sender_id, func.count(ChatMessage.id))
            .filter(ChatMessage.recipient_id == user.id, ChatMessage.is_read.is_(False))
            .group_by(ChatMessage.sender_id)
        )
        unread = {sender_id: count for sender_id, count in unread_rows.all()}
        return [
            schemas.ChatContact(id=c.id, full_name=c.full_name, role=c.role, unread_count=unread.get(c.id, 0))
            for c in contacts
        ]

    async def send_message(self, user: Profile, payload: schemas.ChatMessageCreate) -> schemas.ChatMessageRead:
        if payload.recipient_id == user.id:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot message yourself")

        recipient = await self.db.get(Profile, payload.recipient_id)
        if not recipient or not same_chat_scope(user, recipient):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Recipient not found")

        message = ChatMessage(
            company_id=user.company_id,
            sender_id=user.id,
            recipient_id=recipient.id,
            message=payload.message.strip(),
        )
        self.db.add(message)
        await self.db.commit()

        result = await self.db.execute(
            select(ChatMessage)
            .options(selectinload(ChatMessage.sender))
            .filter(ChatMessage.id == message.id)
            .execution_options(populate_existing=True)
        )
        message_read = to_message_read(result.scalar_one())
        logger.info(f"[CHAT] Message {message_read.id} from {user.id} to {recipient.id}")

        await push_message(message_read)
        return message_read

    async def conversation(self, user: Profile, other_id: UUID) -> list[schemas.ChatMessageRead]:
        stmt = (
            select(ChatMessage)
            .options(selectinload(ChatMessage.sender))
            .filter(
                or_(
                    and_(ChatMessage.sender_id == user.id, ChatMessage.recipient_id == other_id),
                    and_(ChatMessage.sender_id == other_id, ChatMessage.recipient_id == user.id),
                )
            )
            .order_by(ChatMessage.created_at.asc())
        )
        result = await self.db.execute(stmt)
        return [to_message_read(m) for m in result.scalars().all()]

    async def mark_read(self, user: Profile, other_id: UUID) -> int:
        result = await self.db.execute(
            update(ChatMessage)
            .where(
                ChatMessage.sender_id == other_id,
                ChatMessage.recipient_id == user.id,
                ChatMessage.is_read.is_(False),
            )
            .values(is_read=True)
        )
        await self.db.commit()
        logger.debug(f"[CHAT] {user.id} read {result.rowcount} messages from {other_id}")
        return result.rowcount or 0
