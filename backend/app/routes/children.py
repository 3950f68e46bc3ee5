"""Routes for finding a child to donate to and managing child records."""

from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth import require_admin
from app.crud import (
    count_unassigned_children,
    create_child,
    get_child,
    get_children,
    get_children_progress,
    pick_random_child,
    save_child,
)
from app.database import get_session
from app.errors import ValidationError
from app.models import Child, User
from app.schemas import (
    ChildCreate,
    ChildRead,
    ChildrenProgress,
    ChildUpdate,
    UnassignedCount,
)

router = APIRouter(prefix="/children", tags=["children"])


@router.get("/random", response_model=ChildRead)
async def random_child(db: AsyncSession = Depends(get_session)):
    """Offer any unassigned child, priority children first."""
    child = await pick_random_child(db)
    if not child:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={
                "code": "no_children_available",
                "message": "No children available at this time. Please try again later.",
            },
        )
    return child


@router.get("/search", response_model=ChildRead)
async def search_child(
    gender: Literal["male", "female"] | None = None,
    age: int | None = None,
    db: AsyncSession = Depends(get_session),
):
    """Offer an unassigned child matching gender and/or age."""
    if not gender and age is None:
        raise ValidationError("missing_criteria", "Please select at least gender or age.")
    if age is not None and not 1 <= age <= 16:
        raise ValidationError("invalid_age", "Age must be between 1 and 16.")
    child = await pick_random_child(db, gender=gender, age=age)
    if not child:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={
                "code": "no_matching_children",
                "message": "No children match your search criteria. Please try different options.",
            },
        )
    return child


@router.get("/progress", response_model=ChildrenProgress)
async def children_progress(db: AsyncSession = Depends(get_session)):
    return await get_children_progress(db)


@router.get("/unassigned-count", response_model=UnassignedCount)
async def unassigned_count(db: AsyncSession = Depends(get_session)):
    return UnassignedCount(count=await count_unassigned_children(db))


@router.get("/", response_model=list[ChildRead])
async def list_children(
    assigned: bool | None = None,
    priority: bool | None = None,
    db: AsyncSession = Depends(get_session),
    current_user: User = Depends(require_admin),
):
    return await get_children(db, assigned=assigned, priority=priority)


@router.post("/", response_model=ChildRead, status_code=status.HTTP_201_CREATED)
async def add_child(
    data: ChildCreate,
    db: AsyncSession = Depends(get_session),
    current_user: User = Depends(require_admin),
):
    fields = data.model_dump(exclude_none=True)
    return await create_child(db, Child(**fields))


@router.get("/{child_id}", response_model=ChildRead)
async def read_child(
    child_id: str,
    db: AsyncSession = Depends(get_session),
    current_user: User = Depends(require_admin),
):
    child = await get_child(db, child_id)
    if not child:
        raise HTTPException(status_code=404, detail="Child not found")
    return child


@router.put("/{child_id}", response_model=ChildRead)
async def update_child(
    child_id: str,
    data: ChildUpdate,
    db: AsyncSession = Depends(get_session),
    current_user: User = Depends(require_admin),
):
    child = await get_child(db, child_id)
    if not child:
        raise HTTPException(status_code=404, detail="Child not found")
    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(child, field, value)
    return await save_child(db, child)
