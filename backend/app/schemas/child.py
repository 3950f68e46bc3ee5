from pydantic import BaseModel, Field
from typing import Literal, Optional
from datetime import datetime

Gender = Literal["male", "female"]


class ChildCreate(BaseModel):
    id: Optional[str] = None
    recipient: str = Field(min_length=1)
    age: int = Field(ge=1, le=16)
    gender: Gender
    gift_ideas: str = ""
    category: Optional[str] = None
    priority: bool = False


class ChildRead(BaseModel):
    id: str
    recipient: str
    age: int
    gender: str
    gift_ideas: str
    category: Optional[str] = None
    priority: bool
    assigned: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class ChildUpdate(BaseModel):
    recipient: str | None = None
    age: int | None = Field(default=None, ge=1, le=16)
    gender: Gender | None = None
    gift_ideas: str | None = None
    category: str | None = None
    priority: bool | None = None


class ChildrenProgress(BaseModel):
    assigned: int
    total: int
    percentage: int


class UnassignedCount(BaseModel):
    count: int
