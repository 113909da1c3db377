from typing import List
from fastapi import APIRouter, Depends

from clinica.api.dependencies import get_current_user
from clinica.core.catalog import catalog_entries
from clinica.schemas.dashboard import CatalogEntry

router = APIRouter(dependencies=[Depends(get_current_user)])


@router.get("/", response_model=List[CatalogEntry])
async def list_catalog():
    """Package tiers with session count and suggested price."""
    return catalog_entries()
