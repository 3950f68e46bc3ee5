"""Statistics shown on the admin dashboard and the public ticker."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth import require_admin
from app.crud import (
    get_age_group_split,
    get_department_stats,
    get_gender_split,
    get_top_donors,
    get_underperforming_group,
)
from app.database import get_session
from app.models import User
from app.schemas import (
    AgeGroupSplit,
    DepartmentStat,
    GenderSplit,
    TopDonor,
    UnderperformingGroup,
)

router = APIRouter(prefix="/stats", tags=["stats"])


@router.get("/gender-split", response_model=GenderSplit)
async def gender_split(
    db: AsyncSession = Depends(get_session),
    current_user: User = Depends(require_admin),
):
    return await get_gender_split(db)


@router.get("/age-groups", response_model=AgeGroupSplit)
async def age_groups(
    db: AsyncSession = Depends(get_session),
    current_user: User = Depends(require_admin),
):
    return await get_age_group_split(db)


@router.get("/departments", response_model=list[DepartmentStat])
async def department_stats(
    db: AsyncSession = Depends(get_session),
    current_user: User = Depends(require_admin),
):
    return await get_department_stats(db)


@router.get("/top-donors", response_model=list[TopDonor])
async def top_donors(
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_session),
    current_user: User = Depends(require_admin),
):
    return await get_top_donors(db, limit)


@router.get("/underperforming", response_model=UnderperformingGroup)
async def underperforming(db: AsyncSession = Depends(get_session)):
    """Public call to action naming the group donors have overlooked."""
    return await get_underperforming_group(db)
