"""Asynchronous CRUD helpers for the application's data models.

Each function in this module encapsulates a specific database operation
using SQLModel and SQLAlchemy.  Centralizing the logic keeps route
handlers light and makes behavior easier to test.  Business rule
violations are raised as the typed errors from ``app.errors``.
"""

import logging
import math
import random
from datetime import datetime

from sqlalchemy import func, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app import stats
from app.auth import get_password_hash, get_user_by_username
from app.errors import ConflictError, NotFoundError, TransientError, ValidationError
from app.models import Child, Department, Donation, GiftIdea, Settings, User
from app.schemas.child import ChildrenProgress
from app.schemas.department import DepartmentLeaderboardEntry
from app.schemas.donation import (
    DonationCreate,
    DonationDetail,
    DonationPage,
    DonationRead,
    DonationTotals,
    LatestDonation,
)
from app.schemas.stats import (
    AgeGroupSplit,
    DepartmentStat,
    GenderSplit,
    TopDepartment,
    TopDonor,
    UnderperformingGroup,
)

logger = logging.getLogger(__name__)

DONATION_TYPES = ("gift", "cash")
MINIMUM_DONATION_AMOUNT = 5.0


async def get_settings(db: AsyncSession) -> Settings:
    """Fetch the singleton settings record, creating it if necessary."""
    result = await db.execute(select(Settings).where(Settings.id == 1))
    settings = result.scalar_one_or_none()
    if not settings:
        settings = Settings()
        db.add(settings)
        await db.commit()
        await db.refresh(settings)
    return settings


async def save_settings(db: AsyncSession, settings: Settings) -> Settings:
    """Persist settings changes and return the refreshed object."""

    db.add(settings)
    await db.commit()
    await db.refresh(settings)
    return settings


async def create_admin_user(db: AsyncSession, username: str, password: str) -> User:
    """Create the admin account or reset its password if it already exists."""

    user = await get_user_by_username(db, username)
    if user is None:
        user = User(username=username, password_hash=get_password_hash(password))
    else:
        user.password_hash = get_password_hash(password)
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


# --- children ---------------------------------------------------------------


async def get_child(db: AsyncSession, child_id: str) -> Child | None:
    """Fetch a child by id or ``None`` if not found."""
    result = await db.execute(select(Child).where(Child.id == child_id))
    return result.scalar_one_or_none()


async def get_children(
    db: AsyncSession,
    assigned: bool | None = None,
    priority: bool | None = None,
) -> list[Child]:
    """Return children, priority children first then oldest records first."""

    query = select(Child)
    if assigned is not None:
        query = query.where(Child.assigned == assigned)
    if priority is not None:
        query = query.where(Child.priority == priority)
    result = await db.execute(
        query.order_by(Child.priority.desc(), Child.created_at, Child.id)
    )
    return result.scalars().all()


async def create_child(db: AsyncSession, child: Child) -> Child:
    """Persist a new child record."""

    if child.id and await get_child(db, child.id):
        raise ConflictError("child_exists", f"A child with id {child.id} already exists")
    db.add(child)
    await db.commit()
    await db.refresh(child)
    return child


async def save_child(db: AsyncSession, child: Child) -> Child:
    """Persist changes to a child record."""

    db.add(child)
    await db.commit()
    await db.refresh(child)
    return child


async def pick_random_child(
    db: AsyncSession,
    gender: str | None = None,
    age: int | None = None,
    rng=None,
) -> Child | None:
    """Pick an unassigned child matching the optional filters.

    Priority children are exhausted before any filler record is offered.
    ``rng`` defaults to the ``random`` module and only needs ``randrange``.
    """
    rng = rng or random
    query = select(Child).where(Child.assigned == False)  # noqa: E712
    if gender:
        query = query.where(Child.gender == gender)
    if age is not None:
        query = query.where(Child.age == age)

    for priority in (True, False):
        result = await db.execute(query.where(Child.priority == priority))
        candidates = result.scalars().all()
        if candidates:
            return candidates[rng.randrange(len(candidates))]
    return None


async def count_unassigned_children(db: AsyncSession) -> int:
    result = await db.execute(
        select(func.count()).select_from(Child).where(Child.assigned == False)  # noqa: E712
    )
    return result.scalar_one()


async def get_children_progress(db: AsyncSession) -> ChildrenProgress:
    total = (await db.execute(select(func.count()).select_from(Child))).scalar_one()
    assigned = (
        await db.execute(
            select(func.count()).select_from(Child).where(Child.assigned == True)  # noqa: E712
        )
    ).scalar_one()
    return stats.children_progress(assigned, total)


async def mark_child_assigned(db: AsyncSession, child_id: str) -> bool:
    """Flip ``assigned`` only if it is still false.

    Returns ``False`` when no row changed, meaning another donor got there
    first.
    """
    result = await db.execute(
        update(Child)
        .where(Child.id == child_id, Child.assigned == False)  # noqa: E712
        .values(assigned=True)
    )
    return result.rowcount == 1


# --- departments ------------------------------------------------------------


async def get_department(db: AsyncSession, department_id: str) -> Department | None:
    result = await db.execute(select(Department).where(Department.id == department_id))
    return result.scalar_one_or_none()


async def get_department_by_name(db: AsyncSession, name: str) -> Department | None:
    result = await db.execute(select(Department).where(Department.name == name))
    return result.scalar_one_or_none()


async def get_departments(db: AsyncSession, active_only: bool = True) -> list[Department]:
    """Return departments ordered alphabetically."""

    query = select(Department)
    if active_only:
        query = query.where(Department.active == True)  # noqa: E712
    result = await db.execute(query.order_by(Department.name))
    return result.scalars().all()


async def create_department(db: AsyncSession, department: Department) -> Department:
    if await get_department_by_name(db, department.name):
        raise ConflictError(
            "department_exists", f'Department "{department.name}" already exists'
        )
    db.add(department)
    await db.commit()
    await db.refresh(department)
    return department


async def set_department_active(
    db: AsyncSession, department_id: str, active: bool
) -> Department:
    """Soft delete or restore a department."""
    department = await get_department(db, department_id)
    if not department:
        raise NotFoundError("department_not_found", "Department not found")
    department.active = active
    db.add(department)
    await db.commit()
    await db.refresh(department)
    return department


async def ensure_departments(db: AsyncSession, names: list[str]) -> list[Department]:
    """Create any of the named departments that do not exist yet."""

    created = []
    for name in names:
        if not await get_department_by_name(db, name):
            department = Department(name=name)
            db.add(department)
            created.append(department)
    await db.commit()
    return created


# --- donations --------------------------------------------------------------


def _already_assigned() -> ConflictError:
    return ConflictError(
        "child_already_assigned",
        "This child has already been assigned to another donor. "
        "Please start over and choose another child.",
    )


def validate_donation(data: DonationCreate) -> None:
    """Check the donation request before touching the database."""

    if not (
        data.child_id
        and data.donor_name
        and data.donor_name.strip()
        and data.department_id
        and data.donation_type
    ):
        raise ValidationError("missing_fields", "Please fill in all required fields.")
    if data.donation_type not in DONATION_TYPES:
        raise ValidationError("invalid_donation_type", "Invalid donation type.")
    if data.donation_type == "cash":
        if data.amount is None:
            raise ValidationError(
                "amount_required", "Please enter a donation amount for cash donations."
            )
        # checked after rounding to pence, as stored
        if not math.isfinite(data.amount) or round(data.amount, 2) <= 0:
            raise ValidationError(
                "amount_not_positive", "Donation amount must be greater than zero."
            )
    elif data.amount is not None:
        raise ValidationError(
            "gift_amount_not_allowed", "Gift donations should not include an amount."
        )


async def create_donation(db: AsyncSession, data: DonationCreate) -> Donation:
    """Record a donation and mark its child as assigned in one transaction."""

    validate_donation(data)

    child = await get_child(db, data.child_id)
    if not child:
        raise NotFoundError(
            "child_not_found",
            "The selected child could not be found. Please start over.",
        )
    department = await get_department(db, data.department_id)
    if not department:
        raise NotFoundError(
            "department_not_found",
            "The selected department could not be found. Please try again.",
        )
    if child.assigned:
        raise _already_assigned()

    donation = Donation(
        child_id=child.id,
        child_name=child.recipient,
        donor_name=data.donor_name.strip(),
        donor_email=data.donor_email,
        department_id=department.id,
        department_name=department.name,
        donation_type=data.donation_type,
        amount=round(data.amount, 2) if data.donation_type == "cash" else None,
    )
    try:
        db.add(donation)
        await db.flush()
        if not await mark_child_assigned(db, child.id):
            raise _already_assigned()
        await db.commit()
    except IntegrityError:
        # unique donation.child_id: a concurrent donation committed first
        await db.rollback()
        raise _already_assigned() from None
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.exception("Failed to record donation for child %s", data.child_id)
        raise TransientError() from exc
    except BaseException:
        await db.rollback()
        raise

    await db.refresh(donation)
    logger.info(
        "Donation %s (%s) recorded for child %s by %s",
        donation.id,
        donation.donation_type,
        donation.child_id,
        donation.department_name,
    )
    return donation


async def get_donation(db: AsyncSession, donation_id: str) -> Donation | None:
    result = await db.execute(select(Donation).where(Donation.id == donation_id))
    return result.scalar_one_or_none()


async def get_all_donations(db: AsyncSession) -> list[Donation]:
    """Return every donation, oldest first."""

    result = await db.execute(select(Donation).order_by(Donation.created_at, Donation.id))
    return result.scalars().all()


async def update_donation_amount(
    db: AsyncSession, donation_id: str, new_amount: float
) -> Donation:
    """Correct the amount of a cash donation; nothing else changes."""

    donation = await get_donation(db, donation_id)
    if not donation:
        raise NotFoundError("donation_not_found", "Donation not found.")
    if donation.donation_type != "cash":
        raise ValidationError(
            "donation_not_cash", "Only cash donations have an amount that can be changed."
        )
    if (
        not math.isfinite(new_amount)
        or new_amount <= 0
        or new_amount < MINIMUM_DONATION_AMOUNT
    ):
        raise ValidationError(
            "amount_below_minimum",
            f"The minimum donation amount is £{MINIMUM_DONATION_AMOUNT:.0f}.",
        )
    previous = donation.amount
    donation.amount = round(new_amount, 2)
    db.add(donation)
    await db.commit()
    await db.refresh(donation)
    logger.info(
        "Donation %s amount changed from %s to %s", donation.id, previous, donation.amount
    )
    return donation


def _detail(donation: Donation, child: Child | None) -> DonationDetail:
    return DonationDetail(
        **DonationRead.model_validate(donation).model_dump(),
        child_age=child.age if child else None,
        child_gender=child.gender if child else None,
        gift_ideas=child.gift_ideas if child else "",
    )


async def get_donation_page(
    db: AsyncSession, page: int = 1, page_size: int = 25, sort_by: str = "date"
) -> DonationPage:
    """Return one page of the donation ledger with child demographics."""

    total = (await db.execute(select(func.count()).select_from(Donation))).scalar_one()
    if sort_by == "department":
        order = (Donation.department_name, Donation.created_at.desc(), Donation.id)
    else:
        order = (Donation.created_at.desc(), Donation.id)
    result = await db.execute(
        select(Donation, Child)
        .outerjoin(Child, Child.id == Donation.child_id)
        .order_by(*order)
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    return DonationPage(
        donations=[_detail(donation, child) for donation, child in result.all()],
        total=total,
        page=page,
        page_size=page_size,
        total_pages=math.ceil(total / page_size),
    )


async def get_donation_details(
    db: AsyncSession, donation_type: str | None = None
) -> list[DonationDetail]:
    """Return every donation joined with its child, newest first."""

    query = select(Donation, Child).outerjoin(Child, Child.id == Donation.child_id)
    if donation_type:
        query = query.where(Donation.donation_type == donation_type)
    result = await db.execute(query.order_by(Donation.created_at.desc(), Donation.id))
    return [_detail(donation, child) for donation, child in result.all()]


async def get_latest_donation(
    db: AsyncSession, now: datetime | None = None
) -> LatestDonation | None:
    result = await db.execute(
        select(Donation).order_by(Donation.created_at.desc()).limit(1)
    )
    donation = result.scalar_one_or_none()
    if not donation:
        return None
    now = now or datetime.utcnow()
    minutes_ago = max(0, int((now - donation.created_at).total_seconds() // 60))
    return LatestDonation(
        donor_name=donation.donor_name,
        department_name=donation.department_name,
        donation_type=donation.donation_type,
        amount=donation.amount,
        created_at=donation.created_at,
        minutes_ago=minutes_ago,
    )


# --- statistics -------------------------------------------------------------


async def get_donation_demographics(db: AsyncSession) -> list[tuple[str, int]]:
    """Return ``(gender, age)`` of the child behind every donation."""
    result = await db.execute(
        select(Child.gender, Child.age).join(Donation, Donation.child_id == Child.id)
    )
    return [(gender, age) for gender, age in result.all()]


async def get_donation_totals(db: AsyncSession) -> DonationTotals:
    return stats.donation_totals(await get_all_donations(db))


async def get_gender_split(db: AsyncSession) -> GenderSplit:
    demographics = await get_donation_demographics(db)
    return stats.gender_split(gender for gender, _ in demographics)


async def get_age_group_split(db: AsyncSession) -> AgeGroupSplit:
    demographics = await get_donation_demographics(db)
    return stats.age_group_split(age for _, age in demographics)


async def get_department_stats(db: AsyncSession) -> list[DepartmentStat]:
    return stats.department_stats(
        await get_departments(db), await get_all_donations(db)
    )


async def get_department_leaderboard(db: AsyncSession) -> list[DepartmentLeaderboardEntry]:
    """Active departments sorted by number of donations."""

    departments = {d.id: d for d in await get_departments(db)}
    ranked = sorted(
        stats.department_stats(list(departments.values()), await get_all_donations(db)),
        key=lambda s: (-s.donation_count, s.name),
    )
    return [
        DepartmentLeaderboardEntry(
            id=s.id,
            name=s.name,
            active=departments[s.id].active,
            created_at=departments[s.id].created_at,
            donation_count=s.donation_count,
            total_amount=s.total_amount,
        )
        for s in ranked
    ]


async def get_top_departments(db: AsyncSession, limit: int = 3) -> list[TopDepartment]:
    return stats.top_departments(
        await get_departments(db), await get_all_donations(db), limit
    )


async def get_top_donors(db: AsyncSession, limit: int = 10) -> list[TopDonor]:
    return stats.top_donors(await get_all_donations(db), limit)


async def get_underperforming_group(db: AsyncSession) -> UnderperformingGroup:
    return stats.underperforming_group(await get_donation_demographics(db))


# --- gift ideas -------------------------------------------------------------


async def ensure_gift_ideas(db: AsyncSession) -> int:
    """Seed the built-in gift idea templates that are missing."""

    from app.seed_content import GIFT_IDEA_TEMPLATES

    created = 0
    for data in GIFT_IDEA_TEMPLATES:
        result = await db.execute(
            select(GiftIdea).where(
                GiftIdea.age == data["age"],
                GiftIdea.gender == data["gender"],
                GiftIdea.category == None,  # noqa: E711
            )
        )
        if result.scalar_one_or_none() is None:
            db.add(GiftIdea(**data))
            created += 1
    await db.commit()
    return created


async def get_gift_ideas(db: AsyncSession, age: int | None = None) -> list[GiftIdea]:
    query = select(GiftIdea)
    if age is not None:
        query = query.where(GiftIdea.age == age)
    result = await db.execute(query.order_by(GiftIdea.age, GiftIdea.gender))
    return result.scalars().all()


async def find_gift_ideas(
    db: AsyncSession, age: int, gender: str, category: str | None = None
) -> list[str]:
    """Find suggestions for a child, falling back to any-gender templates."""

    lookups = []
    if category:
        lookups.append((gender, category))
    lookups += [(gender, None), ("any", None)]
    for lookup_gender, lookup_category in lookups:
        query = select(GiftIdea).where(
            GiftIdea.age == age, GiftIdea.gender == lookup_gender
        )
        if lookup_category is None:
            query = query.where(GiftIdea.category == None)  # noqa: E711
        else:
            query = query.where(GiftIdea.category == lookup_category)
        result = await db.execute(query.limit(1))
        match = result.scalar_one_or_none()
        if match:
            return list(match.gift_ideas)
    return []


async def create_filler_children(
    db: AsyncSession, per_group: int = 5, rng=None
) -> list[Child]:
    """Create non-priority children for every age and gender.

    Gift ideas are three or four suggestions drawn from the matching
    template, so :func:`ensure_gift_ideas` should run first.
    """
    from app.seed_content import BOYS_NAMES, GIRLS_NAMES

    rng = rng or random
    children = []
    for age in range(1, 17):
        for gender, names in (("male", BOYS_NAMES), ("female", GIRLS_NAMES)):
            ideas = await find_gift_ideas(db, age, gender)
            for _ in range(per_group):
                picks = rng.sample(ideas, min(len(ideas), rng.choice((3, 4))))
                child = Child(
                    recipient=rng.choice(names),
                    age=age,
                    gender=gender,
                    gift_ideas=", ".join(picks),
                    priority=False,
                )
                db.add(child)
                children.append(child)
    await db.commit()
    return children
