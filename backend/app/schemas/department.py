from pydantic import BaseModel, Field
from datetime import datetime


class DepartmentCreate(BaseModel):
    name: str = Field(min_length=1)
    active: bool = True


class DepartmentRead(BaseModel):
    id: str
    name: str
    active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class DepartmentLeaderboardEntry(DepartmentRead):
    donation_count: int
    total_amount: float
