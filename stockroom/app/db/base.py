from __future__ import annotations

from sqlalchemy import BigInteger, DateTime, Integer
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.types import TypeDecorator

from stockroom.app.time_utils import as_utc

# SQLite n'auto-incrémente que les colonnes "INTEGER PRIMARY KEY"
BigIntPK = BigInteger().with_variant(Integer(), "sqlite")


class UTCDateTime(TypeDecorator):
    """
    DateTime(timezone=True) qui relit toujours un datetime aware UTC.

    PostgreSQL rend déjà un timestamptz ; SQLite rend un naive, on y
    rattache UTC à la lecture.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return as_utc(value)

    def process_result_value(self, value, dialect):
        return as_utc(value)


class Base(DeclarativeBase):
    pass
