"""Donation backups stored as JSON files.

A backup holds every donation together with a snapshot of its child and
department.  Files are named ``donations-backup-<UTC timestamp>.json`` so
that sorting by name sorts by age.  Restoring replaces the whole donation
table in a single transaction.
"""

import logging
import os
from datetime import datetime, timedelta, timezone
from pathlib import Path

from pydantic import TypeAdapter
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.crud import get_child, get_department, get_settings
from app.errors import NotFoundError
from app.models import Child, Department, Donation
from app.schemas.backup import (
    BackupChild,
    BackupDepartment,
    BackupDonation,
    BackupInfo,
    BackupResult,
    RestoreResult,
)

logger = logging.getLogger(__name__)

BACKUP_DIR = Path(os.getenv("BACKUP_DIR", "./backups"))
BACKUP_PREFIX = "donations-backup-"

_backup_records = TypeAdapter(list[BackupDonation])


def backup_filename(now: datetime) -> str:
    return f"{BACKUP_PREFIX}{now.strftime('%Y-%m-%dT%H-%M-%S-%f')}Z.json"


def _backup_files(backup_dir: Path) -> list[Path]:
    if not backup_dir.is_dir():
        return []
    files = [
        p
        for p in backup_dir.iterdir()
        if p.is_file() and p.name.startswith(BACKUP_PREFIX) and p.suffix == ".json"
    ]
    return sorted(files, key=lambda p: p.name, reverse=True)


def _modified_at(path: Path) -> datetime:
    return datetime.fromtimestamp(path.stat().st_mtime, timezone.utc).replace(tzinfo=None)


def read_backup(path: Path) -> list[BackupDonation]:
    return _backup_records.validate_json(path.read_bytes())


def list_backups(backup_dir: Path | None = None) -> list[BackupInfo]:
    """Return the available backups, newest first."""
    backup_dir = backup_dir or BACKUP_DIR
    return [
        BackupInfo(
            filename=path.name,
            created_at=_modified_at(path),
            size=path.stat().st_size,
            donations=len(read_backup(path)),
        )
        for path in _backup_files(backup_dir)
    ]


async def create_backup(
    db: AsyncSession,
    backup_dir: Path | None = None,
    retention_days: int | None = None,
    now: datetime | None = None,
) -> BackupResult:
    """Write every donation to a new backup file and prune old backups."""

    backup_dir = backup_dir or BACKUP_DIR
    now = now or datetime.utcnow()
    if retention_days is None:
        retention_days = (await get_settings(db)).backup_retention_days

    result = await db.execute(
        select(Donation, Child, Department)
        .outerjoin(Child, Child.id == Donation.child_id)
        .outerjoin(Department, Department.id == Donation.department_id)
        .order_by(Donation.created_at, Donation.id)
    )
    records = []
    for donation, child, department in result.all():
        records.append(
            BackupDonation(
                **donation.model_dump(),
                child=BackupChild(**child.model_dump()) if child else None,
                department=(
                    BackupDepartment(id=department.id, name=department.name)
                    if department
                    else None
                ),
            )
        )

    backup_dir.mkdir(parents=True, exist_ok=True)
    filename = backup_filename(now)
    (backup_dir / filename).write_bytes(_backup_records.dump_json(records, indent=2))

    cutoff = now - timedelta(days=retention_days)
    deleted = 0
    for path in _backup_files(backup_dir):
        if path.name != filename and _modified_at(path) < cutoff:
            path.unlink()
            deleted += 1
            logger.info("Deleted old backup %s", path.name)

    cash = [r for r in records if r.donation_type == "cash"]
    backup = BackupResult(
        filename=filename,
        donations=len(records),
        gift_donations=sum(1 for r in records if r.donation_type == "gift"),
        cash_donations=len(cash),
        total_cash_value=round(sum(r.amount or 0.0 for r in cash), 2),
        deleted_old_backups=deleted,
        retention_days=retention_days,
    )
    logger.info(
        "Backup %s written with %d donations (%d old backups deleted)",
        filename,
        backup.donations,
        deleted,
    )
    return backup


async def restore_from_backup(
    db: AsyncSession, filename: str, backup_dir: Path | None = None
) -> RestoreResult:
    """Replace all donations with the contents of ``filename``.

    Donations whose child or department no longer exists are skipped.
    Restored children are marked as assigned.
    """
    backup_dir = backup_dir or BACKUP_DIR
    path = next((p for p in _backup_files(backup_dir) if p.name == filename), None)
    if path is None:
        raise NotFoundError("backup_not_found", f"Backup {filename} not found")
    records = read_backup(path)

    restored = skipped = 0
    seen_children: set[str] = set()
    try:
        await db.execute(delete(Donation))
        for record in records:
            child = await get_child(db, record.child_id)
            if not child:
                logger.warning(
                    "Skipping donation %s: child %s no longer exists",
                    record.id,
                    record.child_name,
                )
                skipped += 1
                continue
            if not await get_department(db, record.department_id):
                logger.warning(
                    "Skipping donation %s: department %s no longer exists",
                    record.id,
                    record.department_name,
                )
                skipped += 1
                continue
            if record.child_id in seen_children:
                logger.warning(
                    "Skipping donation %s: child %s already has a donation",
                    record.id,
                    record.child_name,
                )
                skipped += 1
                continue
            seen_children.add(record.child_id)
            db.add(
                Donation(
                    **record.model_dump(exclude={"child", "department"}),
                )
            )
            child.assigned = True
            db.add(child)
            restored += 1
        await db.commit()
    except BaseException:
        await db.rollback()
        raise

    logger.info(
        "Restored %d donations from %s (%d skipped)", restored, filename, skipped
    )
    return RestoreResult(
        filename=filename, restored=restored, skipped=skipped, total=len(records)
    )
