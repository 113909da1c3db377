"""
Integration test for the demo data script.
"""

import pytest
from decimal import Decimal
from sqlalchemy.ext.asyncio import AsyncSession

from clinica.db.seed import seed
from clinica.db.store import RecordStore
from clinica.models.appointment import Appointment
from clinica.services import queries


@pytest.mark.asyncio
async def test_seed_builds_consistent_ledger(db_session: AsyncSession):
    ids = await seed(db_session)

    rows = {row.id: row for row in await queries.dashboard_clients(db_session)}

    maria = rows[ids["maria"]]
    assert maria.sessions_label == "2 / 5"
    assert maria.package_badge == "Activo/Adeudo"
    assert maria.debt == Decimal("250")

    juan = rows[ids["juan"]]
    assert juan.sessions_label == "10 / 10"
    assert juan.package_badge == "Concluido"
    assert juan.debt == Decimal("0")

    ana = rows[ids["ana"]]
    assert ana.sessions_label == "1 / 1"
    assert ana.package_badge == "Activo/Pagado"

    assert await RecordStore(db_session, Appointment).count() == 2
