"""
Demo data for local development.

Every record goes through the LedgerCoordinator, so the seeded ledger obeys the same
rules as data entered from the dashboard.

Usage:
    python -m clinica.db.seed
"""

import asyncio
from datetime import datetime, timedelta
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from clinica.db.base import Base
from clinica.db.session import SessionAsync, engine
from clinica.logging import get_logger
from clinica.models.client_package import PackageStatus
from clinica.models.session_record import SessionStatus
from clinica.schemas.result import MutationResult
from clinica.services.coordinator import LedgerCoordinator

logger = get_logger(__name__)


def _expect(result: MutationResult):
    if not result.success:
        raise RuntimeError(f"Seed step failed: {result.code} {result.error}")
    return result.data


async def _package_with_history(
    coordinator: LedgerCoordinator,
    client_id: int,
    package_type: str,
    total_price: Decimal,
    start_date: datetime,
    sessions: list,
    payments: list,
):
    package = _expect(await coordinator.create_package({
        "client_id": client_id,
        "package_type": package_type,
        "total_price": total_price,
        "start_date": start_date,
    }))
    for status, session_date in sessions:
        _expect(await coordinator.create_session({
            "package_id": package.id,
            "status": status,
            "session_date": session_date,
        }))
    for amount, payment_date in payments:
        _expect(await coordinator.create_payment({
            "package_id": package.id,
            "amount": amount,
            "payment_date": payment_date,
        }))
    return package


async def seed(db: AsyncSession) -> dict:
    """Create the demo clients; returns their ids keyed by first name."""
    coordinator = LedgerCoordinator(db)

    # Package in progress with an outstanding balance
    maria = _expect(await coordinator.create_client({
        "name": "María López",
        "age": 34,
        "pathology": "Lumbalgia crónica",
        "email": "maria@email.com",
        "phone": "5551234567",
        "notes": "Dolor recurrente zona lumbar",
    }))
    await _package_with_history(
        coordinator, maria.id, "S5", Decimal("1250"), datetime(2025, 9, 22),
        sessions=[
            (SessionStatus.COMPLETED, datetime(2025, 9, 22, 12, 0)),
            (SessionStatus.COMPLETED, datetime(2025, 9, 24, 12, 0)),
            (SessionStatus.PENDING, None),
            (SessionStatus.PENDING, None),
            (SessionStatus.PENDING, None),
        ],
        payments=[(Decimal("1000"), datetime(2025, 9, 22))],
    )

    # Finished and fully paid package
    juan = _expect(await coordinator.create_client({
        "name": "Juan Pérez",
        "age": 41,
        "pathology": "Lesión de rodilla",
        "email": "juan@email.com",
        "phone": "5559876543",
    }))
    first_day = datetime(2025, 7, 1, 10, 0)
    package = await _package_with_history(
        coordinator, juan.id, "S10", Decimal("2500"), datetime(2025, 7, 1),
        sessions=[(SessionStatus.COMPLETED, first_day + timedelta(days=i)) for i in range(10)],
        payments=[
            (Decimal("1500"), datetime(2025, 7, 1)),
            (Decimal("1000"), datetime(2025, 7, 10)),
        ],
    )
    _expect(await coordinator.update_package(package.id, {
        "package_type": "S10",
        "total_price": Decimal("2500"),
        "status": PackageStatus.FINISHED,
    }))

    # Single session, paid up front
    ana = _expect(await coordinator.create_client({
        "name": "Ana Torres",
        "age": 28,
        "pathology": "Contractura cervical",
    }))
    await _package_with_history(
        coordinator, ana.id, "S1", Decimal("350"), datetime(2025, 10, 10),
        sessions=[(SessionStatus.COMPLETED, datetime(2025, 10, 10, 10, 0))],
        payments=[(Decimal("350"), datetime(2025, 10, 10))],
    )

    _expect(await coordinator.create_appointment({
        "client_id": maria.id,
        "start_time": datetime(2025, 10, 28, 18, 0),
        "end_time": datetime(2025, 10, 28, 19, 0),
        "cal_event_id": "cal_evt_001",
    }))
    _expect(await coordinator.create_appointment({
        "client_id": juan.id,
        "start_time": datetime(2025, 10, 29, 10, 0),
        "end_time": datetime(2025, 10, 29, 11, 0),
        "cal_event_id": "cal_evt_002",
    }))

    logger.great("Seeding completed", clients=3)
    return {"maria": maria.id, "juan": juan.id, "ana": ana.id}


async def main():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    async with SessionAsync() as db:
        await seed(db)
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
