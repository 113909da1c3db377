"""
Packages API Endpoints

Creating a package, or promoting one to 'Activo', closes the client's previous
package in the same transaction.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from clinica.api.dependencies import get_coordinator, get_current_user, get_db
from clinica.api.responses import mutation_response
from clinica.db.store import RecordStore
from clinica.models.client_package import ClientPackage
from clinica.schemas.client_package import PackageCreate, PackageUpdate, PackageOut
from clinica.services.coordinator import LedgerCoordinator

router = APIRouter(dependencies=[Depends(get_current_user)])


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_package(
    package_data: PackageCreate,
    coordinator: LedgerCoordinator = Depends(get_coordinator),
):
    result = await coordinator.create_package(package_data)
    return mutation_response(result, PackageOut, status.HTTP_201_CREATED)


@router.get("/{package_id}", response_model=PackageOut)
async def get_package(package_id: int, db: AsyncSession = Depends(get_db)):
    package = await RecordStore(db, ClientPackage).find_by_id(package_id)
    if package is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Paquete no encontrado")
    return package


@router.put("/{package_id}")
async def update_package(
    package_id: int,
    package_data: PackageUpdate,
    coordinator: LedgerCoordinator = Depends(get_coordinator),
):
    result = await coordinator.update_package(package_id, package_data)
    return mutation_response(result, PackageOut)


@router.delete("/{package_id}")
async def delete_package(
    package_id: int,
    coordinator: LedgerCoordinator = Depends(get_coordinator),
):
    """Delete a package with its sessions and payments."""
    result = await coordinator.delete_package(package_id)
    return mutation_response(result)
