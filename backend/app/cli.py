"""Maintenance commands: seeding, priority-child import and backups.

Run with ``python -m app.cli <command>`` from the ``backend`` directory.
"""

import asyncio
import csv
import logging
from pathlib import Path

import click

from app import crud
from app.backups import create_backup, list_backups, restore_from_backup
from app.database import async_session, create_db_and_tables
from app.models import Child
from app.seed_content import DEPARTMENT_NAMES

logger = logging.getLogger(__name__)


def run(coro):
    """Create the tables if needed, then run ``coro(session)``."""

    async def main():
        await create_db_and_tables()
        async with async_session() as session:
            return await coro(session)

    return asyncio.run(main())


@click.group()
@click.option("--log-level", default="INFO", show_default=True)
def cli(log_level):
    logging.basicConfig(level=getattr(logging, log_level.upper(), logging.INFO))


@cli.command("init-db")
def init_db():
    """Create missing tables and columns."""
    asyncio.run(create_db_and_tables())
    click.echo("Database ready")


@cli.command("seed-departments")
def seed_departments():
    created = run(lambda db: crud.ensure_departments(db, DEPARTMENT_NAMES))
    click.echo(f"Created {len(created)} departments")


@cli.command("seed-gift-ideas")
def seed_gift_ideas():
    created = run(crud.ensure_gift_ideas)
    click.echo(f"Created {created} gift idea templates")


@cli.command("seed-children")
@click.option("--per-group", default=5, show_default=True, help="Children per age and gender.")
def seed_children(per_group):
    """Create filler (non-priority) children for ages 1-16."""

    async def seed(db):
        await crud.ensure_gift_ideas(db)
        return await crud.create_filler_children(db, per_group=per_group)

    children = run(seed)
    click.echo(f"Created {len(children)} filler children")


@cli.command("seed-user")
@click.option("--username", default="admin", show_default=True)
@click.password_option()
def seed_user(username, password):
    """Create the admin account, or reset its password."""
    user = run(lambda db: crud.create_admin_user(db, username, password))
    click.echo(f"Admin user {user.username} ready")


@cli.command("import-children")
@click.argument("csv_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def import_children(csv_file):
    """Import priority children from a CSV with name, age, gender, gift_ideas."""

    with csv_file.open(newline="", encoding="utf-8") as handle:
        rows = list(csv.DictReader(handle))

    children = []
    for line, row in enumerate(rows, start=2):
        age = int(row["age"])
        gender = row["gender"].strip().lower()
        if not 1 <= age <= 16 or gender not in ("male", "female"):
            raise click.BadParameter(f"line {line}: invalid age or gender", param_hint="csv_file")
        children.append(
            Child(
                recipient=row["name"].strip(),
                age=age,
                gender=gender,
                gift_ideas=row.get("gift_ideas", "").strip(),
                priority=True,
            )
        )

    async def save(db):
        for child in children:
            db.add(child)
        await db.commit()

    run(save)
    click.echo(f"Imported {len(children)} priority children")


@cli.command("backup")
def backup():
    result = run(create_backup)
    click.echo(
        f"Wrote {result.filename}: {result.donations} donations "
        f"({result.gift_donations} gifts, {result.cash_donations} cash, "
        f"£{result.total_cash_value:.2f}); deleted {result.deleted_old_backups} old backups"
    )


@cli.command("list-backups")
def list_backups_command():
    backups = list_backups()
    if not backups:
        click.echo("No backups found")
    for index, info in enumerate(backups, start=1):
        click.echo(f"{index}. {info.filename} ({info.donations} donations, {info.created_at:%Y-%m-%d %H:%M})")


@cli.command("restore")
@click.argument("filename", required=False)
@click.confirmation_option(prompt="Existing donations will be DELETED first. Continue?")
def restore(filename):
    """Restore donations from FILENAME, or from the newest backup."""
    if filename is None:
        backups = list_backups()
        if not backups:
            raise click.ClickException("No backup files found")
        filename = backups[0].filename
    result = run(lambda db: restore_from_backup(db, filename))
    click.echo(
        f"Restored {result.restored} donations from {result.filename} "
        f"({result.skipped} skipped, {result.total} in backup)"
    )


if __name__ == "__main__":
    cli()
