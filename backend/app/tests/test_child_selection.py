"""Tests for picking a child: priority first, filters and search validation."""

import asyncio
import pathlib
import random
import sys

from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker
from sqlmodel import SQLModel

# Allow importing the app package
sys.path.append(str(pathlib.Path(__file__).resolve().parents[2]))

from app.main import app
from app.database import get_session
from app.models import Child
from app.crud import pick_random_child, count_unassigned_children, get_children_progress


async def _setup_test_db():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    TestSession = async_sessionmaker(engine, expire_on_commit=False)

    async def override_get_session():
        async with TestSession() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    return TestSession


def _child(id, age=8, gender="male", priority=False, assigned=False):
    return Child(
        id=id,
        recipient=f"Child {id}",
        age=age,
        gender=gender,
        gift_ideas="Books",
        priority=priority,
        assigned=assigned,
    )


def test_priority_child_is_chosen_over_filler():
    async def run():
        TestSession = await _setup_test_db()
        async with TestSession() as session:
            session.add(_child("c1", priority=True))
            session.add(_child("c2", priority=False))
            await session.commit()

            for seed in range(20):
                child = await pick_random_child(
                    session, gender="male", age=8, rng=random.Random(seed)
                )
                assert child.id == "c1"

    asyncio.run(run())


def test_filler_children_offered_once_priority_exhausted():
    async def run():
        TestSession = await _setup_test_db()
        async with TestSession() as session:
            session.add(_child("p1", priority=True, assigned=True))
            session.add(_child("f1"))
            session.add(_child("f2"))
            await session.commit()

            seen = set()
            for seed in range(30):
                child = await pick_random_child(session, rng=random.Random(seed))
                seen.add(child.id)
            assert seen == {"f1", "f2"}

    asyncio.run(run())


def test_filters_apply_to_both_pools():
    async def run():
        TestSession = await _setup_test_db()
        async with TestSession() as session:
            session.add(_child("boy-priority", age=10, gender="male", priority=True))
            session.add(_child("girl-filler", age=10, gender="female"))
            session.add(_child("girl-other-age", age=4, gender="female", priority=True))
            await session.commit()

            child = await pick_random_child(session, gender="female", age=10)
            assert child.id == "girl-filler"
            child = await pick_random_child(session, age=4)
            assert child.id == "girl-other-age"
            child = await pick_random_child(session, gender="male")
            assert child.id == "boy-priority"
            assert await pick_random_child(session, gender="male", age=4) is None

    asyncio.run(run())


def test_no_unassigned_children_returns_none():
    async def run():
        TestSession = await _setup_test_db()
        async with TestSession() as session:
            session.add(_child("c1", priority=True, assigned=True))
            session.add(_child("c2", assigned=True))
            await session.commit()

            assert await pick_random_child(session) is None
            assert await count_unassigned_children(session) == 0
            progress = await get_children_progress(session)
            assert progress.assigned == 2
            assert progress.total == 2
            assert progress.percentage == 100

    asyncio.run(run())


def test_random_and_search_endpoints():
    async def run():
        TestSession = await _setup_test_db()
        async with TestSession() as session:
            session.add(_child("c1", age=8, gender="male", priority=True))
            session.add(_child("c2", age=8, gender="male"))
            session.add(_child("c3", age=12, gender="female", assigned=True))
            await session.commit()

        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            resp = await client.get("/children/random")
            assert resp.status_code == 200
            assert resp.json()["id"] == "c1"

            resp = await client.get("/children/search", params={"gender": "male", "age": 8})
            assert resp.status_code == 200
            data = resp.json()
            assert data["id"] == "c1"
            assert data["recipient"] == "Child c1"
            assert data["gift_ideas"] == "Books"

            resp = await client.get("/children/search")
            assert resp.status_code == 400
            assert resp.json()["detail"]["code"] == "missing_criteria"

            resp = await client.get("/children/search", params={"age": 17})
            assert resp.status_code == 400
            assert resp.json()["detail"]["message"] == "Age must be between 1 and 16."

            resp = await client.get("/children/search", params={"gender": "female"})
            assert resp.status_code == 404
            assert resp.json()["detail"]["code"] == "no_matching_children"

            resp = await client.get("/children/unassigned-count")
            assert resp.json() == {"count": 2}

            resp = await client.get("/children/progress")
            assert resp.json() == {"assigned": 1, "total": 3, "percentage": 33}

    asyncio.run(run())
