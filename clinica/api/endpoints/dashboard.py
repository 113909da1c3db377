from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from clinica.api.dependencies import get_current_user, get_db
from clinica.schemas.dashboard import DashboardStats
from clinica.services import queries

router = APIRouter(dependencies=[Depends(get_current_user)])


@router.get("/stats", response_model=DashboardStats)
async def get_stats(db: AsyncSession = Depends(get_db)):
    """
    Headline cards: active clients, total clients, earnings this month and
    sessions scheduled today (clinic local time).
    """
    return await queries.dashboard_stats(db)
