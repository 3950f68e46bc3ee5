"""Database models used by the Giving Tree service.

The models are defined with SQLModel (built on SQLAlchemy and Pydantic)
and represent the children waiting for a present, the departments donors
belong to and the donations pledged against each child.
"""

import uuid
from typing import Optional, List
from datetime import datetime
from sqlmodel import SQLModel, Field, Relationship
from sqlalchemy import Column, JSON, UniqueConstraint


def new_id() -> str:
    return uuid.uuid4().hex


class Child(SQLModel, table=True):
    """Beneficiary waiting for a single gift or cash donation."""

    id: str = Field(default_factory=new_id, primary_key=True)
    recipient: str
    age: int = Field(index=True)
    gender: str = Field(index=True)  # "male" or "female"
    gift_ideas: str = ""
    category: Optional[str] = None
    priority: bool = False  # curated real children are offered first
    assigned: bool = Field(default=False, index=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)

    donation: Optional["Donation"] = Relationship(
        back_populates="child", sa_relationship_kwargs={"uselist": False}
    )


class Department(SQLModel, table=True):
    """Organisational group a donor pledges on behalf of."""

    id: str = Field(default_factory=new_id, primary_key=True)
    name: str = Field(unique=True, index=True)
    active: bool = True
    created_at: datetime = Field(default_factory=datetime.utcnow)

    donations: List["Donation"] = Relationship(back_populates="department")


class Donation(SQLModel, table=True):
    """Pledge recorded against exactly one child.

    ``child_name`` and ``department_name`` are snapshots taken when the
    donation is created so the ledger survives later renames.
    """

    id: str = Field(default_factory=new_id, primary_key=True)
    child_id: str = Field(foreign_key="child.id", unique=True)
    child_name: str
    donor_name: str = Field(index=True)
    donor_email: Optional[str] = None
    department_id: str = Field(foreign_key="department.id", index=True)
    department_name: str
    donation_type: str  # "gift" or "cash"
    amount: Optional[float] = None  # only set for cash donations
    created_at: datetime = Field(default_factory=datetime.utcnow, index=True)

    child: Child = Relationship(back_populates="donation")
    department: Department = Relationship(back_populates="donations")


class GiftIdea(SQLModel, table=True):
    """Template of gift suggestions for an age and gender."""

    __table_args__ = (UniqueConstraint("age", "gender", "category"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    age: int
    gender: str  # "male", "female" or "any"
    category: Optional[str] = None
    gift_ideas: List[str] = Field(sa_column=Column(JSON), default_factory=list)


class User(SQLModel, table=True):
    """Admin credential gating the statistics views."""

    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(unique=True, index=True)
    password_hash: str
    created_at: datetime = Field(default_factory=datetime.utcnow)


class Settings(SQLModel, table=True):
    """Singleton table storing site‑wide configuration values."""

    id: Optional[int] = Field(default=1, primary_key=True)
    site_name: str = "Giving Tree"
    currency_symbol: str = "£"
    backup_retention_days: int = 30
