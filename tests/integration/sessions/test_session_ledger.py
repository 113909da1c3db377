"""
Integration tests for session logging.

Covers session numbering, the per-tier session ceiling and session edits.
"""

import pytest
from datetime import datetime, timezone
from sqlalchemy.ext.asyncio import AsyncSession

from clinica.db.store import RecordStore
from clinica.models.client_package import ClientPackage
from clinica.models.session_record import SessionRecord, SessionStatus
from clinica.services import queries
from clinica.services.coordinator import LedgerCoordinator


async def new_package(coordinator: LedgerCoordinator, client_id: int, package_type="S5", total_price="1250") -> int:
    result = await coordinator.create_package({
        "client_id": client_id,
        "package_type": package_type,
        "total_price": total_price,
        "start_date": "2025-09-22T10:00:00",
    })
    assert result.success is True
    return result.data.id


@pytest.mark.asyncio
class TestSessionNumbering:

    async def test_numbers_follow_count(self, coordinator: LedgerCoordinator, ledger_client):
        package_id = await new_package(coordinator, ledger_client.id)

        numbers = []
        for _ in range(3):
            result = await coordinator.create_session({"package_id": package_id})
            assert result.success is True
            numbers.append(result.data.session_number)

        assert numbers == [1, 2, 3]

    async def test_numbers_never_reused_after_delete(
        self, coordinator: LedgerCoordinator, ledger_client, db_session: AsyncSession
    ):
        package_id = await new_package(coordinator, ledger_client.id)
        ids = [
            (await coordinator.create_session({"package_id": package_id})).data.id
            for _ in range(3)
        ]

        await coordinator.delete_session(ids[1])
        fourth = await coordinator.create_session({"package_id": package_id})
        await coordinator.delete_session(fourth.data.id)
        fifth = await coordinator.create_session({"package_id": package_id})

        assert fourth.data.session_number == 4
        assert fifth.data.session_number == 5

        sessions = await RecordStore(db_session, SessionRecord).find_many(
            SessionRecord.package_id == package_id,
            order_by=SessionRecord.session_number,
        )
        assert [s.session_number for s in sessions] == [1, 3, 5]

    async def test_session_date_stored_in_utc(self, coordinator: LedgerCoordinator, ledger_client):
        package_id = await new_package(coordinator, ledger_client.id)

        result = await coordinator.create_session({
            "package_id": package_id,
            "session_date": "2025-09-24T12:00:00",
            "status": "Completada",
        })

        assert result.data.session_date == datetime(2025, 9, 24, 12, 0, tzinfo=timezone.utc)
        assert result.data.status == SessionStatus.COMPLETED.value


@pytest.mark.asyncio
class TestSessionCeiling:

    async def test_single_session_package_full(
        self, coordinator: LedgerCoordinator, ledger_client, db_session: AsyncSession
    ):
        """S1 with one completed session: nothing remaining, next session refused."""
        client_id = ledger_client.id
        package_id = await new_package(coordinator, client_id, "S1", "350")
        first = await coordinator.create_session({"package_id": package_id, "status": "Completada"})
        assert first.success is True

        detail = await queries.client_detail(db_session, client_id)
        assert detail.active_package.sessions_remaining == 0

        result = await coordinator.create_session({"package_id": package_id})

        assert result.success is False
        assert result.code == "CAPACITY_EXCEEDED"
        assert result.http_status == 409
        assert "máximo de 1 sesión(es)" in result.error
        assert await RecordStore(db_session, SessionRecord).count(SessionRecord.package_id == package_id) == 1

    async def test_cancelled_sessions_count_towards_ceiling(
        self, coordinator: LedgerCoordinator, ledger_client
    ):
        package_id = await new_package(coordinator, ledger_client.id, "S1", "350")
        await coordinator.create_session({"package_id": package_id, "status": "Cancelada"})

        result = await coordinator.create_session({"package_id": package_id})

        assert result.success is False
        assert result.code == "CAPACITY_EXCEEDED"

    async def test_delete_frees_a_slot(self, coordinator: LedgerCoordinator, ledger_client):
        package_id = await new_package(coordinator, ledger_client.id, "S1", "350")
        session_id = (await coordinator.create_session({"package_id": package_id})).data.id

        await coordinator.delete_session(session_id)
        result = await coordinator.create_session({"package_id": package_id})

        assert result.success is True
        assert result.data.session_number == 2

    async def test_unknown_package(self, coordinator: LedgerCoordinator):
        result = await coordinator.create_session({"package_id": 77})

        assert result.success is False
        assert result.code == "NOT_FOUND"
        assert result.error == "Paquete no encontrado"


@pytest.mark.asyncio
class TestSessionEdits:

    async def test_complete_a_pending_session(
        self, coordinator: LedgerCoordinator, ledger_client, db_session: AsyncSession
    ):
        client_id = ledger_client.id
        package_id = await new_package(coordinator, client_id)
        session_id = (await coordinator.create_session({"package_id": package_id})).data.id

        result = await coordinator.update_session(session_id, {
            "status": "Completada",
            "session_date": "2025-09-25T09:00:00",
        })

        assert result.success is True
        assert result.data.session_number == 1
        detail = await queries.client_detail(db_session, client_id)
        assert detail.active_package.sessions_remaining == 4

    async def test_update_missing_session(self, coordinator: LedgerCoordinator):
        result = await coordinator.update_session(999, {"status": "Completada"})

        assert result.success is False
        assert result.error == "Sesión no encontrada"

    async def test_delete_returns_package(self, coordinator: LedgerCoordinator, ledger_client):
        package_id = await new_package(coordinator, ledger_client.id)
        session_id = (await coordinator.create_session({"package_id": package_id})).data.id

        result = await coordinator.delete_session(session_id)

        assert result.success is True
        assert result.data == {"id": session_id, "package_id": package_id}

    async def test_session_ops_keep_package_balance(
        self, coordinator: LedgerCoordinator, ledger_client, db_session: AsyncSession
    ):
        package_id = await new_package(coordinator, ledger_client.id)
        await coordinator.create_session({"package_id": package_id, "status": "Completada"})

        package = await RecordStore(db_session, ClientPackage).get(package_id)
        assert package.payment_status == "Adeudo"
        assert package.last_session_number == 1


@pytest.mark.asyncio
class TestNextSession:

    async def test_earliest_pending_in_active_package(
        self, coordinator: LedgerCoordinator, ledger_client, db_session: AsyncSession
    ):
        client_id = ledger_client.id
        package_id = await new_package(coordinator, client_id)
        for status, date in [
            ("Completada", "2025-09-22T10:00:00"),
            ("Pendiente", "2025-10-05T10:00:00"),
            ("Pendiente", "2025-09-30T10:00:00"),
            ("Pendiente", None),
        ]:
            await coordinator.create_session({"package_id": package_id, "status": status, "session_date": date})

        upcoming = await queries.next_session(db_session, client_id)

        assert upcoming.session_number == 3

    async def test_none_without_packages(self, ledger_client, db_session: AsyncSession):
        assert await queries.next_session(db_session, ledger_client.id) is None
