"""
Session Records API Endpoints
"""

from fastapi import APIRouter, Depends, status

from clinica.api.dependencies import get_coordinator, get_current_user
from clinica.api.responses import mutation_response
from clinica.schemas.session_record import SessionCreate, SessionUpdate, SessionOut
from clinica.services.coordinator import LedgerCoordinator

router = APIRouter(dependencies=[Depends(get_current_user)])


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_session(
    session_data: SessionCreate,
    coordinator: LedgerCoordinator = Depends(get_coordinator),
):
    """
    Log a session for a package.

    Fails with 409 when the package already holds as many sessions as its tier allows.
    """
    result = await coordinator.create_session(session_data)
    return mutation_response(result, SessionOut, status.HTTP_201_CREATED)


@router.put("/{session_id}")
async def update_session(
    session_id: int,
    session_data: SessionUpdate,
    coordinator: LedgerCoordinator = Depends(get_coordinator),
):
    result = await coordinator.update_session(session_id, session_data)
    return mutation_response(result, SessionOut)


@router.delete("/{session_id}")
async def delete_session(
    session_id: int,
    coordinator: LedgerCoordinator = Depends(get_coordinator),
):
    result = await coordinator.delete_session(session_id)
    return mutation_response(result)
