"""
Integration tests for client CRUD.

Tests:
- GET/POST /api/clients/
- GET/PUT/DELETE /api/clients/{client_id}
- GET /api/clients/{client_id}/packages|payments|sessions|next-session|appointments
"""

import pytest
from decimal import Decimal
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from clinica.db.store import RecordStore
from clinica.models.appointment import Appointment
from clinica.models.client import Client
from clinica.models.client_package import ClientPackage
from clinica.models.payment import Payment
from clinica.models.session_record import SessionRecord
from clinica.services.coordinator import LedgerCoordinator

CLIENT_FORM = {
    "name": "María López",
    "age": 34,
    "pathology": "Lumbalgia crónica",
    "email": "maria@email.com",
    "phone": "5551234567",
    "notes": "Dolor recurrente zona lumbar",
}


@pytest.mark.asyncio
class TestCreateClient:

    async def test_create_client_success(self, client: AsyncClient, auth_headers):
        response = await client.post("/api/clients/", json=CLIENT_FORM, headers=auth_headers)

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["data"]["name"] == "María López"
        assert body["data"]["status"] == "Activo"
        assert body["data"]["active_package_id"] is None

    async def test_blank_optional_fields(self, client: AsyncClient, auth_headers):
        response = await client.post(
            "/api/clients/",
            json={"name": "Ana Torres", "age": 28, "pathology": "Contractura cervical", "email": "", "phone": ""},
            headers=auth_headers,
        )

        assert response.status_code == 201
        assert response.json()["data"]["email"] is None

    async def test_invalid_form_uses_failure_shape(self, client: AsyncClient, auth_headers):
        response = await client.post(
            "/api/clients/",
            json={**CLIENT_FORM, "age": 0, "email": "no-es-email"},
            headers=auth_headers,
        )

        assert response.status_code == 422
        body = response.json()
        assert body["success"] is False
        assert body["code"] == "VALIDATION_ERROR"
        assert body["error"] == "Datos inválidos"
        fields = {f["field"] for f in body["details"]["fields"]}
        assert "body.age" in fields
        assert "body.email" in fields

    async def test_create_without_auth(self, client: AsyncClient):
        response = await client.post("/api/clients/", json=CLIENT_FORM)

        assert response.status_code == 401


@pytest.mark.asyncio
class TestUpdateClient:

    async def test_update_is_idempotent(
        self, client: AsyncClient, auth_headers, ledger_client, db_session: AsyncSession
    ):
        client_id = ledger_client.id
        form = {**CLIENT_FORM, "status": "Inactivo"}

        first = await client.put(f"/api/clients/{client_id}", json=form, headers=auth_headers)
        second = await client.put(f"/api/clients/{client_id}", json=form, headers=auth_headers)

        assert first.status_code == 200
        assert second.status_code == 200
        for key in ("name", "age", "pathology", "email", "phone", "notes", "status"):
            assert first.json()["data"][key] == second.json()["data"][key]
        assert await RecordStore(db_session, Client).count() == 1

    async def test_update_missing_client(self, client: AsyncClient, auth_headers):
        response = await client.put(
            "/api/clients/999", json={**CLIENT_FORM, "status": "Activo"}, headers=auth_headers
        )

        assert response.status_code == 404
        assert response.json() == {
            "success": False,
            "error": "Cliente no encontrado",
            "code": "NOT_FOUND",
            "details": {"resource": "Cliente", "id": 999},
        }


@pytest.mark.asyncio
class TestDeleteClient:

    async def test_delete_removes_whole_history(
        self,
        client: AsyncClient,
        auth_headers,
        coordinator: LedgerCoordinator,
        ledger_client,
        db_session: AsyncSession,
    ):
        client_id = ledger_client.id
        for package_type in ("S5", "S10"):
            package_id = (await coordinator.create_package({
                "client_id": client_id,
                "package_type": package_type,
                "total_price": "1000",
                "start_date": "2025-09-22T10:00:00",
            })).data.id
            await coordinator.create_session({"package_id": package_id, "status": "Completada"})
            await coordinator.create_payment({
                "package_id": package_id, "amount": "500", "payment_date": "2025-09-22T10:00:00",
            })
        await coordinator.create_appointment({
            "client_id": client_id,
            "start_time": "2025-10-28T18:00:00",
            "end_time": "2025-10-28T19:00:00",
        })

        response = await client.delete(f"/api/clients/{client_id}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"success": True, "data": {"id": client_id}}
        for model in (Client, ClientPackage, SessionRecord, Payment, Appointment):
            assert await RecordStore(db_session, model).count() == 0

    async def test_delete_missing_client(self, client: AsyncClient, auth_headers):
        response = await client.delete("/api/clients/999", headers=auth_headers)

        assert response.status_code == 404
        assert response.json()["success"] is False


@pytest.mark.asyncio
class TestClientReads:

    async def test_detail_with_active_package(
        self, client: AsyncClient, auth_headers, coordinator: LedgerCoordinator, ledger_client
    ):
        client_id = ledger_client.id
        package_id = (await coordinator.create_package({
            "client_id": client_id, "package_type": "S5", "total_price": "1250",
            "start_date": "2025-09-22T10:00:00",
        })).data.id
        await coordinator.create_session({"package_id": package_id, "status": "Completada"})
        await coordinator.create_session({
            "package_id": package_id, "status": "Pendiente", "session_date": "2025-09-29T10:00:00",
        })
        await coordinator.create_payment({
            "package_id": package_id, "amount": "1000", "payment_date": "2025-09-22T10:00:00",
        })

        response = await client.get(f"/api/clients/{client_id}", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "María López"
        assert Decimal(data["total_debt"]) == Decimal("250")
        active = data["active_package"]
        assert active["id"] == package_id
        assert active["type"] == "S5"
        assert active["display_name"] == "5 sesiones"
        assert active["sessions_remaining"] == 4
        assert active["sessions_total"] == 5
        assert active["badge"] == "Activo/Adeudo"
        assert active["next_session_date"].startswith("2025-09-29T10:00:00")

    async def test_detail_without_packages(self, client: AsyncClient, auth_headers, ledger_client):
        response = await client.get(f"/api/clients/{ledger_client.id}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["active_package"] is None
        assert Decimal(response.json()["total_debt"]) == Decimal("0")

    async def test_detail_missing_client(self, client: AsyncClient, auth_headers):
        response = await client.get("/api/clients/999", headers=auth_headers)

        assert response.status_code == 404

    async def test_history_lists(
        self, client: AsyncClient, auth_headers, coordinator: LedgerCoordinator, ledger_client
    ):
        client_id = ledger_client.id
        first_id = (await coordinator.create_package({
            "client_id": client_id, "package_type": "S1", "total_price": "350",
            "start_date": "2025-08-01T10:00:00",
        })).data.id
        await coordinator.create_session({"package_id": first_id, "status": "Completada"})
        await coordinator.create_payment({
            "package_id": first_id, "amount": "350", "payment_date": "2025-08-01T10:00:00",
        })
        second_id = (await coordinator.create_package({
            "client_id": client_id, "package_type": "S5", "total_price": "1250",
            "start_date": "2025-09-01T10:00:00",
        })).data.id
        await coordinator.create_session({
            "package_id": second_id, "session_date": "2025-09-03T10:00:00",
        })

        packages = (await client.get(f"/api/clients/{client_id}/packages", headers=auth_headers)).json()
        assert [p["id"] for p in packages] == [second_id, first_id]
        assert packages[1]["status"] == "Terminado"
        assert packages[1]["payment_status"] == "Pagado"
        assert packages[1]["badge"] == "Concluido"
        assert packages[0]["sessions_completed"] == 0

        payments = (await client.get(f"/api/clients/{client_id}/payments", headers=auth_headers)).json()
        assert len(payments) == 1
        assert payments[0]["package_type"] == "S1"

        sessions = (await client.get(f"/api/clients/{client_id}/sessions", headers=auth_headers)).json()
        assert [(s["package_type"], s["session_number"]) for s in sessions] == [("S5", 1), ("S1", 1)]

        upcoming = (await client.get(f"/api/clients/{client_id}/next-session", headers=auth_headers)).json()
        assert upcoming["package_id"] == second_id

    async def test_history_of_missing_client(self, client: AsyncClient, auth_headers):
        response = await client.get("/api/clients/999/packages", headers=auth_headers)

        assert response.status_code == 404
