"""
GuardHub Seeder Script

- Truncates all tables (alembic_version excluded)
- Seeds a super admin, companies with admins, site managers and officers,
  sites, a week of shifts, incidents, patrol routes, equipment, gateways,
  pricing plans and billing defaults using Faker
- All users have the same password: String@123

Run with: python -m guardhub.database.seed
"""

import asyncio
import random
from datetime import timedelta
from decimal import Decimal

from faker import Faker
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from guardhub.auth.services import get_password_hash
from guardhub.billing.models import DEFAULT_LICENSE_FEE, DEFAULT_PER_GUARD_FEE, BillingSettings
from guardhub.company.models import Company
from guardhub.company.services import generate_company_code
from guardhub.core.config import settings
from guardhub.database.enums import UserRole
from guardhub.database.models import Profile
from guardhub.database.session import AsyncSessionLocal, engine
from guardhub.equipment.models import Equipment, EquipmentStatus, EquipmentType
from guardhub.incident.models import Incident, IncidentSeverity, IncidentStatus
from guardhub.patrol.models import Checkpoint, PatrolRoute
from guardhub.patrol.qr import generate_checkpoint_code
from guardhub.payment.models import MANUAL_GATEWAY, PaymentGateway
from guardhub.pricing.models import UNLIMITED, PricingPlan
from guardhub.shift.models import Shift, ShiftStatus
from guardhub.site.models import Site
from guardhub.staff.models import EmploymentHistory
from guardhub.staff.services import format_staff_code
from guardhub.utils.dates import utcnow

# -------------------------------------------------------
# Number of records to seed
# -------------------------------------------------------
NUM_COMPANIES = 3
SITES_PER_COMPANY = 3
MANAGERS_PER_COMPANY = 2
OFFICERS_PER_COMPANY = 8
INCIDENTS_PER_COMPANY = 6
DEFAULT_PASSWORD = "String@123"

GATEWAYS = [
    ("stripe", "Stripe", True),
    ("paypal", "PayPal", False),
    (MANUAL_GATEWAY, "Manual / Bank Transfer", True),
]

PLANS = [
    ("Starter", "For small teams getting started", "199.00", "1990.00", "15.00", "150.00", 10, 3, 25, False),
    ("Professional", "For growing security firms", "499.00", "4990.00", "12.00", "120.00", 50, 20, 200, True),
    ("Enterprise", "Unlimited scale and priority support", "999.00", "9990.00", "10.00", "100.00",
     UNLIMITED, UNLIMITED, UNLIMITED, False),
]


class Seeder:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db
        self.faker = Faker()
        self.password_hash = get_password_hash(DEFAULT_PASSWORD)

    async def truncate_all_tables(self) -> None:
        print("Truncating all tables...")
        result = await self.db.execute(
            text(
                """
                SELECT table_name FROM information_schema.tables
                WHERE table_schema = 'public' AND table_type = 'BASE TABLE'
                AND table_name != 'alembic_version'
                """
            )
        )
        for (table_name,) in result.all():
            await self.db.execute(text(f'TRUNCATE TABLE "{table_name}" RESTART IDENTITY CASCADE;'))
        await self.db.commit()
        print("All tables truncated.\n")

    def _profile(self, role: UserRole, email: str, company: Company | None = None, staff_code: str | None = None):
        return Profile(
            email=email,
            hashed_password=self.password_hash,
            full_name=self.faker.name(),
            phone=self.faker.msisdn()[:11],
            role=role,
            company_id=company.id if company else None,
            staff_code=staff_code,
        )

    async def seed_platform(self) -> None:
        print("Seeding super admin, gateways, pricing and billing defaults...")
        self.db.add(self._profile(UserRole.SUPER_ADMIN, "admin@guardhub.io"))
        self.db.add(BillingSettings(id=1, license_fee=DEFAULT_LICENSE_FEE, per_guard_fee=DEFAULT_PER_GUARD_FEE))
        for name, display_name, enabled in GATEWAYS:
            self.db.add(PaymentGateway(name=name, display_name=display_name, is_enabled=enabled, configuration={}))
        for order, plan in enumerate(PLANS):
            name, description, monthly, yearly, guard_monthly, guard_yearly, users, sites, guards, featured = plan
            self.db.add(
                PricingPlan(
                    name=name,
                    description=description,
                    monthly_license_fee=Decimal(monthly),
                    yearly_license_fee=Decimal(yearly),
                    per_guard_monthly_fee=Decimal(guard_monthly),
                    per_guard_yearly_fee=Decimal(guard_yearly),
                    features=["Shift scheduling", "Incident reporting", "SOS alerts", "Patrol check-ins"],
                    max_users=users,
                    max_sites=sites,
                    max_guards=guards,
                    is_featured=featured,
                    display_order=order,
                )
            )
        await self.db.commit()

    async def seed_company(self, index: int) -> None:
        company = Company(
            name=self.faker.company(),
            company_code=generate_company_code(),
            address=self.faker.address().replace("\n", ", "),
            phone=self.faker.msisdn()[:11],
            email=self.faker.company_email(),
        )
        self.db.add(company)
        await self.db.flush()
        print(f"Seeding company {company.name} ({company.company_code})")

        self.db.add(self._profile(UserRole.COMPANY_ADMIN, f"admin{index}@example.com", company))
        staff: list[Profile] = []
        for n in range(1, MANAGERS_PER_COMPANY + 1):
            staff.append(
                self._profile(UserRole.SITE_MANAGER, f"manager{index}.{n}@example.com", company, format_staff_code("SM", n))
            )
        for n in range(1, OFFICERS_PER_COMPANY + 1):
            staff.append(
                self._profile(
                    UserRole.SECURITY_OFFICER, f"officer{index}.{n}@example.com", company, format_staff_code("SO", n)
                )
            )
        self.db.add_all(staff)
        await self.db.flush()
        today = utcnow().date()
        for member in staff:
            self.db.add(EmploymentHistory(guard_id=member.id, company_id=company.id, start_date=today))

        sites = [
            Site(
                company_id=company.id,
                name=f"{self.faker.street_name()} {random.choice(['Plaza', 'Tower', 'Warehouse', 'Mall'])}",
                address=self.faker.street_address(),
                latitude=float(self.faker.latitude()),
                longitude=float(self.faker.longitude()),
                contact_name=self.faker.name(),
                contact_phone=self.faker.msisdn()[:11],
            )
            for _ in range(SITES_PER_COMPANY)
        ]
        self.db.add_all(sites)
        await self.db.flush()

        officers = [s for s in staff if s.role == UserRole.SECURITY_OFFICER]
        now = utcnow().replace(minute=0, second=0, microsecond=0)
        for day in range(-3, 4):
            for officer in random.sample(officers, k=min(4, len(officers))):
                start = now + timedelta(days=day, hours=random.choice([-6, 0, 6]))
                if day < 0:
                    shift_status = ShiftStatus.COMPLETED
                elif day == 0:
                    shift_status = ShiftStatus.ACTIVE
                else:
                    shift_status = ShiftStatus.SCHEDULED
                self.db.add(
                    Shift(
                        site_id=random.choice(sites).id,
                        guard_id=officer.id,
                        start_time=start,
                        end_time=start + timedelta(hours=8),
                        status=shift_status,
                    )
                )

        for _ in range(INCIDENTS_PER_COMPANY):
            self.db.add(
                Incident(
                    site_id=random.choice(sites).id,
                    reported_by=random.choice(officers).id,
                    title=self.faker.sentence(nb_words=5).rstrip("."),
                    description=self.faker.paragraph(),
                    severity=random.choice(list(IncidentSeverity)),
                    status=random.choice(list(IncidentStatus)),
                    occurred_at=utcnow() - timedelta(hours=random.randint(1, 72)),
                )
            )

        for site in sites:
            route = PatrolRoute(company_id=company.id, site_id=site.id, name=f"{site.name} perimeter")
            self.db.add(route)
            await self.db.flush()
            for order in range(4):
                self.db.add(
                    Checkpoint(
                        route_id=route.id,
                        name=f"Checkpoint {order + 1}",
                        qr_code=generate_checkpoint_code(),
                        order_index=order,
                    )
                )
            self.db.add(
                Equipment(
                    company_id=company.id,
                    site_id=site.id,
                    name=f"Radio {self.faker.bothify('??-###').upper()}",
                    type=EquipmentType.RADIO,
                    serial_number=self.faker.uuid4()[:12],
                    status=EquipmentStatus.AVAILABLE,
                )
            )

        await self.db.commit()

    async def run(self) -> None:
        await self.truncate_all_tables()
        await self.seed_platform()
        for index in range(1, NUM_COMPANIES + 1):
            await self.seed_company(index)
        print(f"\nDone. Every account uses the password {DEFAULT_PASSWORD}")


async def main() -> None:
    print(f"Using DATABASE URL: {settings.DATABASE_URL}")
    async with AsyncSessionLocal() as db:
        await Seeder(db).run()
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
