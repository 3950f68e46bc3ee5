from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth import require_admin
from app.crud import (
    create_department,
    get_department_leaderboard,
    get_departments,
    get_top_departments,
    set_department_active,
)
from app.database import get_session
from app.models import Department, User
from app.schemas import (
    DepartmentCreate,
    DepartmentLeaderboardEntry,
    DepartmentRead,
    TopDepartment,
)

router = APIRouter(prefix="/departments", tags=["departments"])


@router.get("/", response_model=list[DepartmentRead])
async def active_departments(db: AsyncSession = Depends(get_session)):
    return await get_departments(db)


@router.get("/all", response_model=list[DepartmentRead])
async def all_departments(
    db: AsyncSession = Depends(get_session),
    current_user: User = Depends(require_admin),
):
    return await get_departments(db, active_only=False)


@router.get("/leaderboard", response_model=list[DepartmentLeaderboardEntry])
async def department_leaderboard(db: AsyncSession = Depends(get_session)):
    return await get_department_leaderboard(db)


@router.get("/top", response_model=list[TopDepartment])
async def top_departments(
    limit: int = Query(3, ge=1, le=50),
    db: AsyncSession = Depends(get_session),
):
    return await get_top_departments(db, limit)


@router.post("/", response_model=DepartmentRead, status_code=status.HTTP_201_CREATED)
async def add_department(
    data: DepartmentCreate,
    db: AsyncSession = Depends(get_session),
    current_user: User = Depends(require_admin),
):
    return await create_department(db, Department(name=data.name.strip(), active=data.active))


@router.post("/{department_id}/deactivate", response_model=DepartmentRead)
async def deactivate_department(
    department_id: str,
    db: AsyncSession = Depends(get_session),
    current_user: User = Depends(require_admin),
):
    return await set_department_active(db, department_id, False)


@router.post("/{department_id}/activate", response_model=DepartmentRead)
async def activate_department(
    department_id: str,
    db: AsyncSession = Depends(get_session),
    current_user: User = Depends(require_admin),
):
    return await set_department_active(db, department_id, True)
