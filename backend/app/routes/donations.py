"""Donation endpoints: pledging, the public ticker figures and the admin ledger."""

from datetime import date
from typing import Literal

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth import require_admin
from app.crud import (
    create_donation,
    get_donation_details,
    get_donation_page,
    get_donation_totals,
    get_latest_donation,
    get_settings,
    update_donation_amount,
)
from app.database import get_session
from app.export import donations_to_csv, export_filename
from app.models import User
from app.schemas import (
    DonationAmountUpdate,
    DonationCreate,
    DonationPage,
    DonationRead,
    DonationTotals,
    LatestDonation,
)

router = APIRouter(prefix="/donations", tags=["donations"])


@router.post("/", response_model=DonationRead, status_code=status.HTTP_201_CREATED)
async def pledge_donation(data: DonationCreate, db: AsyncSession = Depends(get_session)):
    """Record a gift or cash pledge and assign the child to the donor."""
    return await create_donation(db, data)


@router.get("/latest", response_model=LatestDonation | None)
async def latest_donation(db: AsyncSession = Depends(get_session)):
    return await get_latest_donation(db)


@router.get("/totals", response_model=DonationTotals)
async def donation_totals(db: AsyncSession = Depends(get_session)):
    return await get_donation_totals(db)


@router.get("/", response_model=DonationPage)
async def list_donations(
    page: int = Query(1, ge=1),
    page_size: int = Query(25, ge=1, le=100),
    sort_by: Literal["date", "department"] = "date",
    db: AsyncSession = Depends(get_session),
    current_user: User = Depends(require_admin),
):
    return await get_donation_page(db, page=page, page_size=page_size, sort_by=sort_by)


@router.get("/export")
async def export_donations(
    donation_type: Literal["gift", "cash"] | None = None,
    db: AsyncSession = Depends(get_session),
    current_user: User = Depends(require_admin),
):
    """Download the ledger as CSV, optionally limited to one donation type."""
    settings = await get_settings(db)
    donations = await get_donation_details(db, donation_type)
    filename = export_filename(donation_type, date.today())
    return Response(
        content=donations_to_csv(donations, settings.currency_symbol),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.patch("/{donation_id}/amount", response_model=DonationRead)
async def correct_donation_amount(
    donation_id: str,
    data: DonationAmountUpdate,
    db: AsyncSession = Depends(get_session),
    current_user: User = Depends(require_admin),
):
    return await update_donation_amount(db, donation_id, data.amount)
