"""
Clients API Endpoints

Dashboard list, client detail and the client's ledger history, plus client
create/update/delete. Mutations answer with the uniform success/failure body.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from clinica.api.dependencies import get_coordinator, get_current_user, get_db
from clinica.api.responses import mutation_response
from clinica.db.store import RecordStore
from clinica.models.appointment import Appointment
from clinica.models.client import Client
from clinica.schemas.appointment import AppointmentOut
from clinica.schemas.client import ClientCreate, ClientUpdate, ClientOut
from clinica.schemas.client_package import PackageSummary
from clinica.schemas.dashboard import ClientDetail, DashboardClientRow
from clinica.schemas.payment import PaymentHistoryItem
from clinica.schemas.session_record import SessionHistoryItem, SessionOut
from clinica.services import queries
from clinica.services.coordinator import LedgerCoordinator

router = APIRouter(dependencies=[Depends(get_current_user)])


async def _require_client(db: AsyncSession, client_id: int) -> None:
    if await RecordStore(db, Client).find_by_id(client_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Cliente no encontrado")


@router.get("/", response_model=List[DashboardClientRow])
async def list_clients(db: AsyncSession = Depends(get_db)):
    """Clients table with the package in progress, sessions, debt and next session."""
    return await queries.dashboard_clients(db)


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_client(
    client_data: ClientCreate,
    coordinator: LedgerCoordinator = Depends(get_coordinator),
):
    result = await coordinator.create_client(client_data)
    return mutation_response(result, ClientOut, status.HTTP_201_CREATED)


@router.get("/{client_id}", response_model=ClientDetail)
async def get_client(client_id: int, db: AsyncSession = Depends(get_db)):
    detail = await queries.client_detail(db, client_id)
    if detail is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Cliente no encontrado")
    return detail


@router.put("/{client_id}")
async def update_client(
    client_id: int,
    client_data: ClientUpdate,
    coordinator: LedgerCoordinator = Depends(get_coordinator),
):
    result = await coordinator.update_client(client_id, client_data)
    return mutation_response(result, ClientOut)


@router.delete("/{client_id}")
async def delete_client(
    client_id: int,
    coordinator: LedgerCoordinator = Depends(get_coordinator),
):
    """
    Delete a client with all packages, sessions, payments and appointments.

    Irreversible; the dashboard asks for confirmation before calling it.
    """
    result = await coordinator.delete_client(client_id)
    return mutation_response(result)


@router.get("/{client_id}/packages", response_model=List[PackageSummary])
async def list_client_packages(client_id: int, db: AsyncSession = Depends(get_db)):
    await _require_client(db, client_id)
    return await queries.client_packages(db, client_id)


@router.get("/{client_id}/payments", response_model=List[PaymentHistoryItem])
async def list_client_payments(client_id: int, db: AsyncSession = Depends(get_db)):
    await _require_client(db, client_id)
    return await queries.client_payments(db, client_id)


@router.get("/{client_id}/sessions", response_model=List[SessionHistoryItem])
async def list_client_sessions(client_id: int, db: AsyncSession = Depends(get_db)):
    await _require_client(db, client_id)
    return await queries.client_sessions(db, client_id)


@router.get("/{client_id}/next-session", response_model=Optional[SessionOut])
async def get_next_session(client_id: int, db: AsyncSession = Depends(get_db)):
    await _require_client(db, client_id)
    return await queries.next_session(db, client_id)


@router.get("/{client_id}/appointments", response_model=List[AppointmentOut])
async def list_client_appointments(client_id: int, db: AsyncSession = Depends(get_db)):
    await _require_client(db, client_id)
    return await RecordStore(db, Appointment).find_many(
        Appointment.client_id == client_id,
        order_by=Appointment.start_time.asc(),
    )
