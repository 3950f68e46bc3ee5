"""Read-side aggregations over the donation ledger.

The functions here are pure: they take rows already loaded by
``app.crud`` and recompute every figure from scratch on each call. A
season produces a few hundred donations at most so there is nothing to
cache.
"""

import math
from collections import Counter
from typing import Iterable, Sequence

from app.models import Department, Donation
from app.schemas.donation import DonationTotals
from app.schemas.stats import (
    AgeGroup,
    AgeGroupSplit,
    DepartmentStat,
    GenderSplit,
    TopDepartment,
    TopDonor,
    UnderperformingGroup,
)
from app.schemas.child import ChildrenProgress

# Percentage points a group may trail by before a call to action is shown.
GENDER_GAP_THRESHOLD = 15
AGE_BUCKET_THRESHOLD = 15

AGE_BUCKETS = [
    ("1-5", 1, 5),
    ("6-10", 6, 10),
    ("11-15", 11, 15),
    ("16+", 16, None),
]


def percent(part: int | float, total: int | float) -> float:
    return part / total * 100 if total else 0.0


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def gender_split(genders: Iterable[str]) -> GenderSplit:
    """Count donations by the gender of the child they went to."""
    genders = list(genders)
    counts = Counter(genders)
    return GenderSplit(male=counts["male"], female=counts["female"], total=len(genders))


def age_group_split(ages: Iterable[int]) -> AgeGroupSplit:
    """Count donations per exact child age, youngest first."""
    ages = list(ages)
    total = len(ages)
    groups = [
        AgeGroup(
            age=age,
            label=f"Age {age}",
            count=count,
            percentage=round_half_up(percent(count, total)),
        )
        for age, count in sorted(Counter(ages).items())
    ]
    return AgeGroupSplit(age_groups=groups, total=total)


def department_stats(
    departments: Sequence[Department], donations: Sequence[Donation]
) -> list[DepartmentStat]:
    """Gift count, cash count and cash total for each department given."""
    stats = {
        d.id: DepartmentStat(
            id=d.id,
            name=d.name,
            gift_count=0,
            cash_count=0,
            donation_count=0,
            total_amount=0.0,
        )
        for d in departments
    }
    for donation in donations:
        stat = stats.get(donation.department_id)
        if stat is None:
            continue
        stat.donation_count += 1
        if donation.donation_type == "cash":
            stat.cash_count += 1
            stat.total_amount += donation.amount or 0.0
        else:
            stat.gift_count += 1
    for stat in stats.values():
        stat.total_amount = round(stat.total_amount, 2)
    return list(stats.values())


def top_departments(
    departments: Sequence[Department], donations: Sequence[Donation], limit: int = 3
) -> list[TopDepartment]:
    ranked = sorted(
        department_stats(departments, donations),
        key=lambda s: (-s.donation_count, s.name),
    )
    return [
        TopDepartment(
            name=s.name,
            total_donations=s.donation_count,
            total_cash_amount=s.total_amount,
        )
        for s in ranked[:limit]
    ]


def top_donors(donations: Sequence[Donation], limit: int = 10) -> list[TopDonor]:
    """Rank donors by the cash they have given.

    Donors are grouped on the exact name they typed. The department shown is
    the one used for their earliest donation. Donors who only gave presents
    are left out.
    """
    donors: dict[str, TopDonor] = {}
    for donation in sorted(donations, key=lambda d: d.created_at):
        donor = donors.get(donation.donor_name)
        if donor is None:
            donor = donors[donation.donor_name] = TopDonor(
                donor_name=donation.donor_name,
                department_name=donation.department_name,
                total_cash_amount=0.0,
                total_donations=0,
                cash_donations=0,
            )
        donor.total_donations += 1
        if donation.donation_type == "cash" and donation.amount:
            donor.cash_donations += 1
            donor.total_cash_amount += donation.amount

    ranked = [d for d in donors.values() if d.total_cash_amount > 0]
    for donor in ranked:
        donor.total_cash_amount = round(donor.total_cash_amount, 2)
    ranked.sort(key=lambda d: d.total_cash_amount, reverse=True)
    return ranked[:limit]


def underperforming_group(
    demographics: Iterable[tuple[str, int]]
) -> UnderperformingGroup:
    """Suggest the group of children donors should pick next.

    ``demographics`` holds the ``(gender, age)`` of the child behind each
    donation. A gender gap wider than the threshold wins over age buckets.
    """
    demographics = list(demographics)
    total = len(demographics)
    if not total:
        return UnderperformingGroup()

    genders = Counter(gender for gender, _ in demographics)
    male_pct = percent(genders["male"], total)
    female_pct = percent(genders["female"], total)
    if abs(male_pct - female_pct) > GENDER_GAP_THRESHOLD:
        group, pct = ("female", female_pct) if female_pct < male_pct else ("male", male_pct)
        shown = round_half_up(pct)
        return UnderperformingGroup(
            message=(
                f"{group.capitalize()} children have received only {shown}% of "
                f"donations so far. Could you help a {group} child this Christmas?"
            ),
            group=group,
            percentage=shown,
        )

    for label, low, high in AGE_BUCKETS:
        count = sum(
            1 for _, age in demographics if age >= low and (high is None or age <= high)
        )
        pct = percent(count, total)
        if pct < AGE_BUCKET_THRESHOLD:
            shown = round_half_up(pct)
            return UnderperformingGroup(
                message=(
                    f"Children aged {label} have received only {shown}% of "
                    "donations so far. Could you help one of them?"
                ),
                group=label,
                percentage=shown,
            )
    return UnderperformingGroup()


def children_progress(assigned: int, total: int) -> ChildrenProgress:
    return ChildrenProgress(
        assigned=assigned,
        total=total,
        percentage=round_half_up(percent(assigned, total)),
    )


def donation_totals(donations: Sequence[Donation]) -> DonationTotals:
    cash = [d for d in donations if d.donation_type == "cash"]
    return DonationTotals(
        total_donations=len(donations),
        total_cash_amount=round(sum(d.amount or 0.0 for d in cash), 2),
        total_gift_donations=sum(1 for d in donations if d.donation_type == "gift"),
        total_cash_donations=len(cash),
    )
