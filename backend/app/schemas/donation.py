"""Donation request and response models."""

from typing import Literal, Optional
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field, field_validator


class DonationCreate(BaseModel):
    child_id: str
    donor_name: str
    donor_email: Optional[EmailStr] = None
    department_id: str
    donation_type: str
    amount: Optional[float] = None

    @field_validator("donor_email", mode="before")
    @classmethod
    def blank_email_is_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class DonationRead(BaseModel):
    id: str
    child_id: str
    child_name: str
    donor_name: str
    donor_email: Optional[str] = None
    department_id: str
    department_name: str
    donation_type: str
    amount: Optional[float] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class DonationAmountUpdate(BaseModel):
    amount: float


class DonationDetail(DonationRead):
    """Ledger row joined with the child's demographics."""

    child_age: Optional[int] = None
    child_gender: Optional[str] = None
    gift_ideas: str = ""


class DonationPage(BaseModel):
    donations: list[DonationDetail]
    total: int
    page: int
    page_size: int
    total_pages: int


class DonationTotals(BaseModel):
    total_donations: int
    total_cash_amount: float
    total_gift_donations: int
    total_cash_donations: int


class LatestDonation(BaseModel):
    donor_name: str
    department_name: str
    donation_type: Literal["gift", "cash"]
    amount: Optional[float] = None
    created_at: datetime
    minutes_ago: int = Field(ge=0)
