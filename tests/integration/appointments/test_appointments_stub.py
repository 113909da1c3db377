"""
Integration tests for the appointments stub.

Tests:
- POST /api/appointments/
- GET /api/appointments/
- DELETE /api/appointments/{appointment_id}
- GET /api/clients/{client_id}/appointments
"""

import pytest
from httpx import AsyncClient


def appointment(client_id, start="2025-10-28T18:00:00", end="2025-10-28T19:00:00", **extra):
    return {"client_id": client_id, "start_time": start, "end_time": end, **extra}


@pytest.mark.asyncio
class TestAppointments:

    async def test_create_and_list(self, client: AsyncClient, auth_headers, ledger_client):
        client_id = ledger_client.id

        created = await client.post(
            "/api/appointments/",
            json=appointment(client_id, cal_event_id="cal_evt_001"),
            headers=auth_headers,
        )

        assert created.status_code == 201
        assert created.json()["data"]["cal_event_id"] == "cal_evt_001"

        listed = (await client.get(f"/api/clients/{client_id}/appointments", headers=auth_headers)).json()
        assert [a["cal_event_id"] for a in listed] == ["cal_evt_001"]

    async def test_filter_by_range(self, client: AsyncClient, auth_headers, ledger_client):
        client_id = ledger_client.id
        for start, end in [
            ("2025-10-28T18:00:00", "2025-10-28T19:00:00"),
            ("2025-11-03T10:00:00", "2025-11-03T11:00:00"),
        ]:
            await client.post("/api/appointments/", json=appointment(client_id, start, end), headers=auth_headers)

        response = await client.get(
            "/api/appointments/",
            params={"start": "2025-11-01T00:00:00", "end": "2025-11-30T23:59:59"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert [a["start_time"][:10] for a in response.json()] == ["2025-11-03"]

    async def test_end_must_follow_start(self, client: AsyncClient, auth_headers, ledger_client):
        response = await client.post(
            "/api/appointments/",
            json=appointment(ledger_client.id, "2025-10-28T19:00:00", "2025-10-28T18:00:00"),
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["details"] == {"fields": ["end_time"]}

    async def test_unknown_client(self, client: AsyncClient, auth_headers):
        response = await client.post("/api/appointments/", json=appointment(999), headers=auth_headers)

        assert response.status_code == 404
        assert response.json()["error"] == "Cliente no encontrado"

    async def test_delete(self, client: AsyncClient, auth_headers, ledger_client):
        created = await client.post("/api/appointments/", json=appointment(ledger_client.id), headers=auth_headers)
        appointment_id = created.json()["data"]["id"]

        deleted = await client.delete(f"/api/appointments/{appointment_id}", headers=auth_headers)
        again = await client.delete(f"/api/appointments/{appointment_id}", headers=auth_headers)

        assert deleted.status_code == 200
        assert again.status_code == 404
        assert again.json()["error"] == "Cita no encontrada"
