"""Tests for writing, pruning and restoring donation backups."""

import asyncio
import os
import pathlib
import sys
import time
from datetime import datetime

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy import delete, update
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker
from sqlmodel import SQLModel, select

# Allow importing the app package
sys.path.append(str(pathlib.Path(__file__).resolve().parents[2]))

from app import backups as backups_module
from app.main import app
from app.database import get_session
from app.auth import get_password_hash
from app.backups import create_backup, list_backups, read_backup, restore_from_backup
from app.errors import NotFoundError
from app.models import Child, Department, Donation, User
from app.routes import backups as backup_routes


async def _setup_test_db():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    TestSession = async_sessionmaker(engine, expire_on_commit=False)

    async def override_get_session():
        async with TestSession() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session

    async with TestSession() as session:
        session.add(User(username="admin", password_hash=get_password_hash("admin123")))
        session.add(Department(id="tech", name="Technology"))
        session.add(Child(id="c1", recipient="Amelia", age=8, gender="female", assigned=True))
        session.add(Child(id="c2", recipient="Oscar", age=10, gender="male", assigned=True))
        session.add(
            Donation(
                id="d1",
                child_id="c1",
                child_name="Amelia",
                donor_name="Jane",
                donor_email="jane@example.com",
                department_id="tech",
                department_name="Technology",
                donation_type="cash",
                amount=25.0,
                created_at=datetime(2025, 12, 1, 10, 0),
            )
        )
        session.add(
            Donation(
                id="d2",
                child_id="c2",
                child_name="Oscar",
                donor_name="Bob",
                department_id="tech",
                department_name="Technology",
                donation_type="gift",
                created_at=datetime(2025, 12, 2, 10, 0),
            )
        )
        await session.commit()
    return TestSession


def test_backup_writes_every_donation_and_prunes_old_files(tmp_path):
    async def run():
        TestSession = await _setup_test_db()
        old = tmp_path / "donations-backup-2024-01-01T00-00-00-000000Z.json"
        old.write_text("[]")
        forty_days_ago = time.time() - 40 * 24 * 60 * 60
        os.utime(old, (forty_days_ago, forty_days_ago))
        unrelated = tmp_path / "notes.txt"
        unrelated.write_text("keep me")
        os.utime(unrelated, (forty_days_ago, forty_days_ago))

        async with TestSession() as session:
            result = await create_backup(session, backup_dir=tmp_path)

        assert result.donations == 2
        assert result.gift_donations == 1
        assert result.cash_donations == 1
        assert result.total_cash_value == 25.0
        assert result.deleted_old_backups == 1
        assert result.retention_days == 30
        assert not old.exists()
        assert unrelated.exists()

        records = read_backup(tmp_path / result.filename)
        assert [r.id for r in records] == ["d1", "d2"]
        assert records[0].donor_email == "jane@example.com"
        assert records[0].child.recipient == "Amelia"
        assert records[1].department.name == "Technology"

        listed = list_backups(tmp_path)
        assert [b.filename for b in listed] == [result.filename]
        assert listed[0].donations == 2

    asyncio.run(run())


def test_restore_replaces_donations_and_skips_missing_children(tmp_path):
    async def run():
        TestSession = await _setup_test_db()
        async with TestSession() as session:
            result = await create_backup(session, backup_dir=tmp_path)

        # wipe the ledger and drop one of the children
        async with TestSession() as session:
            await session.execute(delete(Donation))
            await session.execute(delete(Child).where(Child.id == "c2"))
            await session.execute(update(Child).values(assigned=False))
            await session.commit()

        async with TestSession() as session:
            restored = await restore_from_backup(session, result.filename, backup_dir=tmp_path)
            assert restored.restored == 1
            assert restored.skipped == 1
            assert restored.total == 2

        async with TestSession() as session:
            donations = (await session.execute(select(Donation))).scalars().all()
            assert [d.id for d in donations] == ["d1"]
            assert donations[0].amount == 25.0
            assert donations[0].created_at == datetime(2025, 12, 1, 10, 0)
            assert (await session.get(Child, "c1")).assigned is True

            with pytest.raises(NotFoundError) as exc:
                await restore_from_backup(session, "donations-backup-missing.json", backup_dir=tmp_path)
            assert exc.value.code == "backup_not_found"

    asyncio.run(run())


def test_backup_endpoints(tmp_path, monkeypatch):
    monkeypatch.setattr(backups_module, "BACKUP_DIR", tmp_path)
    monkeypatch.setattr(backup_routes, "CRON_SECRET", "s3cret")

    async def run():
        await _setup_test_db()
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            resp = await client.get("/cron/backup", headers={"Authorization": "Bearer wrong"})
            assert resp.status_code == 401

            resp = await client.get("/cron/backup", headers={"Authorization": "Bearer s3cret"})
            assert resp.status_code == 200
            filename = resp.json()["filename"]

            resp = await client.post(
                "/auth/login", json={"username": "admin", "password": "admin123"}
            )
            headers = {"Authorization": f"Bearer {resp.json()['access_token']}"}

            resp = await client.get("/backups", headers=headers)
            assert resp.status_code == 200
            assert resp.json()["count"] == 1
            assert resp.json()["backups"][0]["filename"] == filename

            resp = await client.post(f"/backups/{filename}/restore", headers=headers)
            assert resp.status_code == 200
            assert resp.json() == {"filename": filename, "restored": 2, "skipped": 0, "total": 2}

            resp = await client.post("/backups/nope.json/restore", headers=headers)
            assert resp.status_code == 404
            assert resp.json()["detail"]["code"] == "backup_not_found"

    asyncio.run(run())
