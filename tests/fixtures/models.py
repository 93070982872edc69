"""Seed data and SQLAlchemy models shared by the test suite."""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# Ascending en_US order: 40oz, Abba, another, bar, Bar, foo, Foo, some
NAMES = [
    {"name": "foo", "deleted": False},
    {"name": "Foo", "deleted": False},
    {"name": "bar", "deleted": False},
    {"name": "Bar", "deleted": False},
    {"name": "Abba", "deleted": False},
    {"name": "40oz", "deleted": False},
    {"name": "some", "deleted": True},
    {"name": "another", "deleted": True},
]


class Base(DeclarativeBase):
    pass


class Item(Base):
    __tablename__ = "items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str | None] = mapped_column(String(50))
    rank: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=lambda: datetime.now(UTC))
