"""Aggregate import for all API route modules."""

from . import (
    auth,
    children,
    donations,
    departments,
    stats,
    gift_ideas,
    settings,
    backups,
)

__all__ = [
    "auth",
    "children",
    "donations",
    "departments",
    "stats",
    "gift_ideas",
    "settings",
    "backups",
]
