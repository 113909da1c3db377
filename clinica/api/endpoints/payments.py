"""
Payments API Endpoints
"""

from fastapi import APIRouter, Depends, status

from clinica.api.dependencies import get_coordinator, get_current_user
from clinica.api.responses import mutation_response
from clinica.schemas.payment import PaymentCreate, PaymentUpdate, PaymentOut
from clinica.services.coordinator import LedgerCoordinator

router = APIRouter(dependencies=[Depends(get_current_user)])


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_payment(
    payment_data: PaymentCreate,
    coordinator: LedgerCoordinator = Depends(get_coordinator),
):
    result = await coordinator.create_payment(payment_data)
    return mutation_response(result, PaymentOut, status.HTTP_201_CREATED)


@router.put("/{payment_id}")
async def update_payment(
    payment_id: int,
    payment_data: PaymentUpdate,
    coordinator: LedgerCoordinator = Depends(get_coordinator),
):
    result = await coordinator.update_payment(payment_id, payment_data)
    return mutation_response(result, PaymentOut)


@router.delete("/{payment_id}")
async def delete_payment(
    payment_id: int,
    coordinator: LedgerCoordinator = Depends(get_coordinator),
):
    result = await coordinator.delete_payment(payment_id)
    return mutation_response(result)
