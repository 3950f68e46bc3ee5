"""CSV rendering of the donation ledger for the admin export."""

import csv
import io
from typing import Iterable

from app.schemas.donation import DonationDetail

CSV_HEADERS = [
    "Child Name",
    "Donor Name",
    "Donor Email",
    "Department",
    "Donation Type",
    "Amount",
    "Age",
    "Gender",
    "Gift Ideas",
    "Date",
]


def donation_row(donation: DonationDetail, currency_symbol: str = "£") -> list[str]:
    amount = f"{donation.amount:.2f}" if donation.amount is not None else "N/A"
    return [
        donation.child_name,
        donation.donor_name,
        donation.donor_email or "N/A",
        donation.department_name,
        f"{currency_symbol}{amount}" if donation.donation_type == "cash" else "Gift",
        amount,
        "" if donation.child_age is None else str(donation.child_age),
        donation.child_gender or "",
        donation.gift_ideas,
        donation.created_at.strftime("%d/%m/%Y"),
    ]


def donations_to_csv(
    donations: Iterable[DonationDetail], currency_symbol: str = "£"
) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for donation in donations:
        writer.writerow(donation_row(donation, currency_symbol))
    return buffer.getvalue()


def export_filename(donation_type: str | None, today) -> str:
    return f"donations-{donation_type or 'all'}-{today.isoformat()}.csv"
