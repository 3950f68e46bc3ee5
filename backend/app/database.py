import os
import logging
from sqlmodel import SQLModel
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    create_async_engine,
    AsyncSession,
    async_sessionmaker,
)

DATABASE_URL = os.getenv(
    "DATABASE_URL", "sqlite+aiosqlite:///./giving_tree.db"
)  # swap with a Postgres URL (postgresql+asyncpg://...) if needed


# Control SQL echo via environment variable and route output through logging
SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() == "true"
if SQL_ECHO:
    logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)

engine = create_async_engine(DATABASE_URL, echo=SQL_ECHO)

async_session = async_sessionmaker(engine, expire_on_commit=False)


async def create_db_and_tables() -> None:
    from .models import (
        Child,
        Department,
        Donation,
        GiftIdea,
        User,
        Settings,
    )

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

        if conn.dialect.name != "sqlite":
            return

        # --- simple schema migration for existing installs ---
        # donor email and the priority flag were added after the first season
        pragma = "PRAGMA table_info('{table}')"
        async def has_column(table: str, column: str) -> bool:
            result = await conn.execute(text(pragma.format(table=table)))
            cols = [row[1] for row in result.fetchall()]
            return column in cols

        if not await has_column("donation", "donor_email"):
            await conn.execute(
                text("ALTER TABLE donation ADD COLUMN donor_email VARCHAR")
            )
        if not await has_column("child", "priority"):
            await conn.execute(
                text("ALTER TABLE child ADD COLUMN priority BOOLEAN DEFAULT 0")
            )
        if not await has_column("child", "category"):
            await conn.execute(
                text("ALTER TABLE child ADD COLUMN category VARCHAR")
            )


async def get_session() -> AsyncSession:
    async with async_session() as session:
        yield session
