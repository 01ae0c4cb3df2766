# tests/billing/test_billing_routes.py
from datetime import date, datetime, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import UUID, uuid4

import pytest
from fastapi import status
from httpx import AsyncClient

from guardhub.billing import schemas as billing_schemas
from guardhub.billing.models import DEFAULT_LICENSE_FEE, DEFAULT_PER_GUARD_FEE, BillingSettings, Invoice, InvoiceStatus
from guardhub.billing.services import SETTINGS_ROW_ID, BillingService
from guardhub.company.models import Company
from guardhub.database.models import Profile


def create_invoice_read(company_id: UUID, status_: InvoiceStatus = InvoiceStatus.PENDING) -> billing_schemas.InvoiceRead:
    return billing_schemas.InvoiceRead(
        id=uuid4(),
        company_id=company_id,
        company_name="Acme Security",
        invoice_number="INV-1700000000000",
        amount=Decimal("300.00"),
        currency="USD",
        guard_count=10,
        status=status_,
        due_date=date(2024, 4, 1),
        created_at=datetime.now(timezone.utc),
    )


# --- Routes ---


@pytest.mark.asyncio
@patch.object(BillingService, "update_settings", new_callable=AsyncMock)
async def test_update_billing_settings(
    mock_update: AsyncMock, mock_current_super_admin: Profile, async_client: AsyncClient, override_get_db: None
) -> None:
    mock_update.return_value = BillingSettings(
        id=SETTINGS_ROW_ID, license_fee=Decimal("120.00"), per_guard_fee=Decimal("15.00")
    )

    response = await async_client.put("/billing/settings", json={"license_fee": "120.00", "per_guard_fee": "15.00"})

    assert response.status_code == status.HTTP_200_OK
    assert Decimal(response.json()["license_fee"]) == Decimal("120.00")


@pytest.mark.asyncio
async def test_negative_fee_rejected(
    mock_current_super_admin: Profile, async_client: AsyncClient, override_get_db: None
) -> None:
    response = await async_client.put("/billing/settings", json={"license_fee": "-1", "per_guard_fee": "15"})
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


@pytest.mark.asyncio
async def test_company_admin_cannot_see_overview(
    mock_current_company_admin: Profile, async_client: AsyncClient, override_get_db: None
) -> None:
    response = await async_client.get("/billing/overview")
    assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.asyncio
@patch.object(BillingService, "generate_invoice", new_callable=AsyncMock)
async def test_generate_invoice(
    mock_generate: AsyncMock, mock_current_super_admin: Profile, async_client: AsyncClient, override_get_db: None
) -> None:
    company_id = uuid4()
    mock_generate.return_value = create_invoice_read(company_id)

    response = await async_client.post("/billing/invoices", json={"company_id": str(company_id)})

    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["invoice_number"].startswith("INV-")
    assert response.json()["status"] == "pending"


@pytest.mark.asyncio
async def test_generate_invoice_rejects_reversed_period(
    mock_current_super_admin: Profile, async_client: AsyncClient, override_get_db: None
) -> None:
    response = await async_client.post(
        "/billing/invoices",
        json={
            "company_id": str(uuid4()),
            "billing_period_start": "2024-03-31",
            "billing_period_end": "2024-03-01",
        },
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


@pytest.mark.asyncio
@patch.object(BillingService, "list_invoices", new_callable=AsyncMock)
async def test_company_admin_lists_own_invoices(
    mock_list: AsyncMock, mock_current_company_admin: Profile, async_client: AsyncClient, override_get_db: None
) -> None:
    mock_list.return_value = [create_invoice_read(mock_current_company_admin.company_id)]

    response = await async_client.get("/billing/invoices")

    assert response.status_code == status.HTTP_200_OK
    mock_list.assert_awaited_once_with(mock_current_company_admin.company_id)


@pytest.mark.asyncio
async def test_company_admin_cannot_list_foreign_invoices(
    mock_current_company_admin: Profile, async_client: AsyncClient, override_get_db: None
) -> None:
    response = await async_client.get("/billing/invoices", params={"company_id": str(uuid4())})
    assert response.status_code == status.HTTP_403_FORBIDDEN


# --- Service Rules ---


@pytest.mark.asyncio
async def test_settings_row_created_with_defaults(mock_db: AsyncMock) -> None:
    mock_db.get.return_value = None

    settings_row = await BillingService(mock_db).get_settings()

    assert settings_row.id == SETTINGS_ROW_ID
    assert settings_row.license_fee == DEFAULT_LICENSE_FEE
    assert settings_row.per_guard_fee == DEFAULT_PER_GUARD_FEE
    mock_db.add.assert_called_once_with(settings_row)
    mock_db.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_marking_invoice_paid_stamps_paid_at(mock_db: AsyncMock, fake_super_admin: Profile) -> None:
    company = Company(id=uuid4(), name="Acme Security", company_code="AB12CD")
    invoice = Invoice(
        id=uuid4(),
        company_id=company.id,
        company=company,
        invoice_number="INV-1700000000000",
        amount=Decimal("300.00"),
        currency="USD",
        guard_count=10,
        status=InvoiceStatus.PENDING,
        due_date=date(2024, 4, 1),
        created_at=datetime.now(timezone.utc),
    )
    result = MagicMock()
    result.scalar_one_or_none.return_value = invoice
    mock_db.execute.return_value = result

    paid = await BillingService(mock_db).update_invoice_status(
        fake_super_admin, invoice.id, billing_schemas.InvoiceStatusUpdate(status=InvoiceStatus.PAID)
    )
    assert paid.status == InvoiceStatus.PAID
    assert paid.paid_at is not None

    reopened = await BillingService(mock_db).update_invoice_status(
        fake_super_admin, invoice.id, billing_schemas.InvoiceStatusUpdate(status=InvoiceStatus.OVERDUE)
    )
    assert reopened.paid_at is None
