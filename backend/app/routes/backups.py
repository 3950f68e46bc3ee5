"""Admin backup endpoints and the scheduled backup hook."""

import logging
import os

from fastapi import APIRouter, Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth import require_admin
from app.backups import create_backup, list_backups, restore_from_backup
from app.database import get_session
from app.models import User
from app.schemas import BackupList, BackupResult, RestoreResult

logger = logging.getLogger(__name__)
router = APIRouter(tags=["backups"])

CRON_SECRET = os.getenv("CRON_SECRET")


@router.get("/backups", response_model=BackupList)
async def available_backups(current_user: User = Depends(require_admin)):
    backups = list_backups()
    return BackupList(count=len(backups), backups=backups)


@router.post("/backups", response_model=BackupResult)
async def backup_now(
    db: AsyncSession = Depends(get_session),
    current_user: User = Depends(require_admin),
):
    return await create_backup(db)


@router.post("/backups/{filename}/restore", response_model=RestoreResult)
async def restore_backup(
    filename: str,
    db: AsyncSession = Depends(get_session),
    current_user: User = Depends(require_admin),
):
    logger.warning("Admin %s is restoring donations from %s", current_user.username, filename)
    return await restore_from_backup(db, filename)


@router.get("/cron/backup", response_model=BackupResult)
async def cron_backup(
    authorization: str | None = Header(default=None),
    db: AsyncSession = Depends(get_session),
):
    """Entry point for an external scheduler; requires ``CRON_SECRET``."""
    if not CRON_SECRET or authorization != f"Bearer {CRON_SECRET}":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized - Invalid cron secret",
        )
    return await create_backup(db)
