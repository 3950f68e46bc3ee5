from typing import Literal

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.crud import find_gift_ideas, get_gift_ideas
from app.database import get_session
from app.schemas import GiftIdeaRead, GiftIdeaSuggestion

router = APIRouter(prefix="/gift-ideas", tags=["gift ideas"])


@router.get("/", response_model=list[GiftIdeaRead])
async def list_gift_ideas(
    age: int | None = Query(None, ge=1, le=16),
    db: AsyncSession = Depends(get_session),
):
    return await get_gift_ideas(db, age)


@router.get("/suggest", response_model=GiftIdeaSuggestion)
async def suggest_gift_ideas(
    age: int = Query(..., ge=1, le=16),
    gender: Literal["male", "female"] = Query(...),
    category: str | None = None,
    db: AsyncSession = Depends(get_session),
):
    """Suggestions for a child of the given age and gender."""
    ideas = await find_gift_ideas(db, age, gender, category)
    return GiftIdeaSuggestion(age=age, gender=gender, category=category, gift_ideas=ideas)
