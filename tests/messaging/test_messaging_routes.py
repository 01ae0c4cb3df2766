# tests/messaging/test_messaging_routes.py
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest
from fastapi import HTTPException, status
from httpx import AsyncClient

from guardhub.database.enums import UserRole
from guardhub.database.models import Profile
from guardhub.messaging import schemas as messaging_schemas
from guardhub.messaging import services as messaging_services
from guardhub.messaging.manager import profile_group
from guardhub.messaging.models import ChatMessage
from guardhub.messaging.services import MessagingService, same_chat_scope

# --- Routes ---


@pytest.mark.asyncio
@patch.object(MessagingService, "list_contacts", new_callable=AsyncMock)
async def test_list_contacts(
    mock_list: AsyncMock, mock_current_officer: Profile, async_client: AsyncClient, override_get_db: None
) -> None:
    mock_list.return_value = [
        messaging_schemas.ChatContact(
            id=uuid4(), full_name="Site Manager", role=UserRole.SITE_MANAGER, unread_count=2
        )
    ]

    response = await async_client.get("/messages/contacts")

    assert response.status_code == status.HTTP_200_OK
    assert response.json()[0]["unread_count"] == 2


@pytest.mark.asyncio
@patch.object(MessagingService, "send_message", new_callable=AsyncMock)
async def test_send_message(
    mock_send: AsyncMock, mock_current_officer: Profile, async_client: AsyncClient, override_get_db: None
) -> None:
    recipient_id = uuid4()
    mock_send.return_value = messaging_schemas.ChatMessageRead(
        id=uuid4(),
        company_id=mock_current_officer.company_id,
        sender_id=mock_current_officer.id,
        sender_name=mock_current_officer.full_name,
        recipient_id=recipient_id,
        message="On my way",
        is_read=False,
        created_at=datetime.now(timezone.utc),
    )

    response = await async_client.post(
        "/messages", json={"recipient_id": str(recipient_id), "message": "On my way"}
    )

    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["recipient_id"] == str(recipient_id)


@pytest.mark.asyncio
async def test_empty_message_rejected(
    mock_current_officer: Profile, async_client: AsyncClient, override_get_db: None
) -> None:
    response = await async_client.post("/messages", json={"recipient_id": str(uuid4()), "message": ""})
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


@pytest.mark.asyncio
@patch.object(MessagingService, "mark_read", new_callable=AsyncMock)
async def test_mark_conversation_read(
    mock_mark: AsyncMock, mock_current_officer: Profile, async_client: AsyncClient, override_get_db: None
) -> None:
    mock_mark.return_value = 3
    response = await async_client.patch(f"/messages/conversations/{uuid4()}/read")
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"updated": 3}


# --- Service Rules ---


def test_chat_scope(profile_factory, fake_officer: Profile, fake_site_manager: Profile, fake_super_admin: Profile) -> None:
    outsider = profile_factory(UserRole.SECURITY_OFFICER, company_id=uuid4())
    other_admin = profile_factory(UserRole.SUPER_ADMIN, company_id=None)

    assert same_chat_scope(fake_officer, fake_site_manager)
    assert not same_chat_scope(fake_officer, outsider)
    assert not same_chat_scope(fake_site_manager, fake_super_admin)
    assert same_chat_scope(fake_super_admin, other_admin)


@pytest.mark.asyncio
async def test_cannot_message_yourself(mock_db: AsyncMock, fake_officer: Profile) -> None:
    with pytest.raises(HTTPException) as exc:
        await MessagingService(mock_db).send_message(
            fake_officer, messaging_schemas.ChatMessageCreate(recipient_id=fake_officer.id, message="hi")
        )
    assert exc.value.status_code == 400


@pytest.mark.asyncio
async def test_recipient_outside_company_is_not_found(
    mock_db: AsyncMock, fake_officer: Profile, profile_factory
) -> None:
    mock_db.get.return_value = profile_factory(UserRole.SECURITY_OFFICER, company_id=uuid4())

    with pytest.raises(HTTPException) as exc:
        await MessagingService(mock_db).send_message(
            fake_officer, messaging_schemas.ChatMessageCreate(recipient_id=uuid4(), message="hi")
        )
    assert exc.value.status_code == 404
    mock_db.add.assert_not_called()


@pytest.mark.asyncio
@patch.object(messaging_services, "manager")
async def test_send_message_pushes_to_both_parties(
    mock_manager: MagicMock, mock_db: AsyncMock, fake_officer: Profile, fake_site_manager: Profile
) -> None:
    mock_manager.broadcast = AsyncMock()
    stored: list[ChatMessage] = []

    def _add(obj: ChatMessage) -> None:
        obj.id = uuid4()
        obj.is_read = False
        obj.created_at = datetime.now(timezone.utc)
        stored.append(obj)

    mock_db.add.side_effect = _add
    mock_db.get.return_value = fake_site_manager
    reload = MagicMock()
    reload.scalar_one.side_effect = lambda: stored[0]
    mock_db.execute.return_value = reload

    message = await MessagingService(mock_db).send_message(
        fake_officer,
        messaging_schemas.ChatMessageCreate(recipient_id=fake_site_manager.id, message="  Gate 3 is open  "),
    )

    assert message.message == "Gate 3 is open"
    assert message.company_id == fake_officer.company_id
    groups, event = mock_manager.broadcast.await_args.args
    assert groups == [profile_group(fake_site_manager.id), profile_group(fake_officer.id)]
    assert event["event"] == "chat_message"
    assert event["message"]["id"] == str(message.id)
