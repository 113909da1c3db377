"""
Appointments API Endpoints

Stub for a future calendar integration: appointments are stored and listed only.
"""

from datetime import datetime
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from clinica.api.dependencies import get_coordinator, get_current_user, get_db
from clinica.api.responses import mutation_response
from clinica.db.store import RecordStore
from clinica.helpers.dates import to_utc
from clinica.models.appointment import Appointment
from clinica.schemas.appointment import AppointmentCreate, AppointmentOut
from clinica.services.coordinator import LedgerCoordinator

router = APIRouter(dependencies=[Depends(get_current_user)])


@router.get("/", response_model=List[AppointmentOut])
async def list_appointments(
    start: Optional[datetime] = Query(None),
    end: Optional[datetime] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """List appointments, optionally within [start, end]."""
    filters = []
    if start:
        filters.append(Appointment.start_time >= to_utc(start))
    if end:
        filters.append(Appointment.start_time <= to_utc(end))
    return await RecordStore(db, Appointment).find_many(
        *filters,
        order_by=Appointment.start_time.asc(),
    )


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_appointment(
    appointment_data: AppointmentCreate,
    coordinator: LedgerCoordinator = Depends(get_coordinator),
):
    result = await coordinator.create_appointment(appointment_data)
    return mutation_response(result, AppointmentOut, status.HTTP_201_CREATED)


@router.delete("/{appointment_id}")
async def delete_appointment(
    appointment_id: int,
    coordinator: LedgerCoordinator = Depends(get_coordinator),
):
    result = await coordinator.delete_appointment(appointment_id)
    return mutation_response(result)
