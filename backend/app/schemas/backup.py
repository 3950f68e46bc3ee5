"""Shapes used by the donation backup files and the backup endpoints."""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class BackupChild(BaseModel):
    id: str
    recipient: str
    age: int
    gender: str
    gift_ideas: str = ""


class BackupDepartment(BaseModel):
    id: str
    name: str


class BackupDonation(BaseModel):
    """One donation as written to a backup file."""

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
    child: Optional[BackupChild] = None
    department: Optional[BackupDepartment] = None


class BackupInfo(BaseModel):
    filename: str
    created_at: datetime
    size: int
    donations: int


class BackupList(BaseModel):
    count: int
    backups: list[BackupInfo]


class BackupResult(BaseModel):
    filename: str
    donations: int
    gift_donations: int
    cash_donations: int
    total_cash_value: float
    deleted_old_backups: int
    retention_days: int


class RestoreResult(BaseModel):
    filename: str
    restored: int
    skipped: int
    total: int
