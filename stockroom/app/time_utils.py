from __future__ import annotations

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Horodatage serveur en UTC (aware)."""
    return datetime.now(timezone.utc)


def as_utc(dt: datetime | None) -> datetime | None:
    # naive = déjà UTC (SQLite ne stocke pas le fuseau)
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)
