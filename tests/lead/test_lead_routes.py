# tests/lead/test_lead_routes.py
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest
from fastapi import status
from httpx import AsyncClient

from guardhub.database.models import Profile
from guardhub.lead import services as lead_services
from guardhub.lead.models import Lead, LeadStatus
from guardhub.lead.schemas import LeadCreate
from guardhub.lead.services import LeadService

LEAD_PAYLOAD = {
    "name": "Grace Buyer",
    "email": "grace@prospect.example.com",
    "company": "Prospect Holdings",
    "product_interest": "patrol",
    "message": "We run 40 guards across 6 sites.",
}


def create_db_lead(status_: LeadStatus = LeadStatus.NEW) -> Lead:
    now = datetime.now(timezone.utc)
    return Lead(
        id=uuid4(),
        **LEAD_PAYLOAD,
        phone=None,
        source="contact_form",
        status=status_,
        created_at=now,
        updated_at=now,
    )


# --- Routes ---


@pytest.mark.asyncio
@patch.object(LeadService, "submit_lead", new_callable=AsyncMock)
async def test_public_lead_submission(
    mock_submit: AsyncMock, async_client: AsyncClient, override_get_db: None
) -> None:
    mock_submit.return_value = create_db_lead()

    response = await async_client.post("/leads", json=LEAD_PAYLOAD)

    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["status"] == "new"
    assert response.json()["source"] == "contact_form"


@pytest.mark.asyncio
async def test_lead_requires_message(async_client: AsyncClient, override_get_db: None) -> None:
    payload = {k: v for k, v in LEAD_PAYLOAD.items() if k != "message"}
    response = await async_client.post("/leads", json=payload)
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


@pytest.mark.asyncio
@patch.object(LeadService, "list_leads", new_callable=AsyncMock)
async def test_list_leads_with_filters(
    mock_list: AsyncMock, mock_current_super_admin: Profile, async_client: AsyncClient, override_get_db: None
) -> None:
    mock_list.return_value = ([create_db_lead(LeadStatus.CONTACTED)], 3)

    response = await async_client.get(
        "/leads", params={"status": "contacted", "search": "grace", "skip": 0, "limit": 1}
    )

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["total_count"] == 3
    assert body["has_next_page"] is True
    assert body["items"][0]["status"] == "contacted"
    mock_list.assert_awaited_once_with(LeadStatus.CONTACTED, "grace", skip=0, limit=1)


@pytest.mark.asyncio
async def test_company_admin_cannot_list_leads(
    mock_current_company_admin: Profile, async_client: AsyncClient, override_get_db: None
) -> None:
    response = await async_client.get("/leads")
    assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.asyncio
@patch.object(LeadService, "update_status", new_callable=AsyncMock)
async def test_update_lead_status(
    mock_update: AsyncMock, mock_current_super_admin: Profile, async_client: AsyncClient, override_get_db: None
) -> None:
    lead = create_db_lead(LeadStatus.QUALIFIED)
    mock_update.return_value = lead

    response = await async_client.patch(f"/leads/{lead.id}/status", json={"status": "qualified"})

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "qualified"


# --- Service Rules ---


@pytest.mark.asyncio
@patch.object(lead_services, "send_lead_notification", new_callable=AsyncMock)
async def test_notification_failure_does_not_lose_lead(mock_notify: AsyncMock, mock_db: AsyncMock) -> None:
    mock_notify.side_effect = RuntimeError("mail provider down")

    lead = await LeadService(mock_db).submit_lead(LeadCreate(**LEAD_PAYLOAD))

    assert lead.status == LeadStatus.NEW
    assert lead.source == "contact_form"
    mock_db.commit.assert_awaited_once()
    mock_notify.assert_awaited_once()


@pytest.mark.asyncio
async def test_status_change_is_audited(mock_db: AsyncMock, fake_super_admin: Profile) -> None:
    lead = create_db_lead()
    mock_db.get.return_value = lead

    await LeadService(mock_db).update_status(fake_super_admin, lead.id, LeadStatus.CONVERTED)

    assert lead.status == LeadStatus.CONVERTED
    audit_row = mock_db.add.call_args.args[0]
    assert audit_row.changes == {"status": {"old": "new", "new": "converted"}}


@pytest.mark.asyncio
async def test_search_treats_wildcards_literally(mock_db: AsyncMock) -> None:
    count_result, page_result = MagicMock(), MagicMock()
    count_result.scalar_one.return_value = 0
    page_result.scalars.return_value.all.return_value = []
    mock_db.execute.side_effect = [count_result, page_result]

    leads, total = await LeadService(mock_db).list_leads(search=" 50%_off ")

    assert (leads, total) == ([], 0)
    stmt = mock_db.execute.await_args_list[1].args[0]
    sql = str(stmt.compile(compile_kwargs={"literal_binds": True}))
    assert "50/%/_off" in sql
    assert "ESCAPE '/'" in sql
