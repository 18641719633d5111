# wealthvault/models.py
from datetime import datetime, timezone

from sqlalchemy import JSON, DateTime, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


class HoldingsRecord(Base):
    """
    One record per user: the full list of lots as a JSON snapshot.

    Writes overwrite the whole list; there is no per-lot row. Decimal
    fields are stored as strings inside the JSON to keep exact values.
    """
    __tablename__ = "holdings_records"

    user_id: Mapped[str] = mapped_column(String, primary_key=True)
    holdings: Mapped[list] = mapped_column(JSON, default=list)
    last_updated: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)


class UserPreference(Base):
    __tablename__ = "user_preferences"

    user_id: Mapped[str] = mapped_column(String, primary_key=True)
    display_currency: Mapped[str] = mapped_column(String(3))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)


class CachedPayload(Base):
    """
    Opaque text payloads cached by key (e.g. the ticker catalog).

    Entries never expire; readers must tolerate unreadable payloads.
    """
    __tablename__ = "cached_payloads"

    key: Mapped[str] = mapped_column(String, primary_key=True)
    payload: Mapped[str] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
