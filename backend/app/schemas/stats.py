"""Response models for the admin statistics endpoints."""

from typing import Optional
from pydantic import BaseModel


class GenderSplit(BaseModel):
    male: int
    female: int
    total: int


class AgeGroup(BaseModel):
    age: int
    label: str
    count: int
    percentage: int


class AgeGroupSplit(BaseModel):
    age_groups: list[AgeGroup]
    total: int


class DepartmentStat(BaseModel):
    id: str
    name: str
    gift_count: int
    cash_count: int
    donation_count: int
    total_amount: float


class TopDonor(BaseModel):
    donor_name: str
    department_name: str
    total_cash_amount: float
    total_donations: int
    cash_donations: int


class TopDepartment(BaseModel):
    name: str
    total_donations: int
    total_cash_amount: float


class UnderperformingGroup(BaseModel):
    message: Optional[str] = None
    group: Optional[str] = None
    percentage: Optional[int] = None
