"""Tests for viewing and updating site settings."""

import asyncio
import pathlib
import sys

from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker
from sqlmodel import SQLModel

# Allow importing the app package
sys.path.append(str(pathlib.Path(__file__).resolve().parents[2]))

from app.main import app
from app.database import get_session
from app.models import User
from app.auth import get_password_hash


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
        session.add(User(username="admin", password_hash=get_password_hash("adminpass")))
        await session.commit()

    return TestSession


def test_settings_endpoints():
    async def run():
        await _setup_test_db()
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            # Defaults are created on first read
            resp = await client.get("/settings/")
            assert resp.status_code == 200
            assert resp.json() == {
                "site_name": "Giving Tree",
                "currency_symbol": "£",
                "backup_retention_days": 30,
            }

            # Anonymous visitors cannot change anything
            resp = await client.put("/settings/", json={"site_name": "Hacked"})
            assert resp.status_code == 401

            resp = await client.post(
                "/auth/login", json={"username": "admin", "password": "adminpass"}
            )
            assert resp.status_code == 200
            headers = {"Authorization": f"Bearer {resp.json()['access_token']}"}

            resp = await client.put(
                "/settings/", headers=headers, json={"backup_retention_days": 0}
            )
            assert resp.status_code == 422

            # Required values cannot be cleared
            for field in ("site_name", "currency_symbol", "backup_retention_days"):
                resp = await client.put("/settings/", headers=headers, json={field: None})
                assert resp.status_code == 422

            resp = await client.put(
                "/settings/",
                headers=headers,
                json={"site_name": "Winter Appeal", "backup_retention_days": 14},
            )
            assert resp.status_code == 200
            data = resp.json()
            assert data["site_name"] == "Winter Appeal"
            assert data["currency_symbol"] == "£"
            assert data["backup_retention_days"] == 14

            # Updated values persist on subsequent read
            resp = await client.get("/settings/")
            assert resp.json()["site_name"] == "Winter Appeal"

    asyncio.run(run())
