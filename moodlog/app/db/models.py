from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import Date, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from ..core.tags import split_tags


class Base(DeclarativeBase):
    """Base declarative model."""


class JournalEntry(Base):
    """One dated diary record."""

    __tablename__ = "journal_entries"
    __table_args__ = (
        Index("ix_journal_entries_entry_date", "entry_date"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    entry_date: Mapped[date] = mapped_column(Date, nullable=False, default=date.today)
    title: Mapped[str] = mapped_column(String(255), default="")
    content: Mapped[str] = mapped_column(Text, default="")
    primary_mood: Mapped[str] = mapped_column(String(50), nullable=False, default="Neutral")
    secondary_mood1: Mapped[str | None] = mapped_column(String(50), nullable=True)
    secondary_mood2: Mapped[str | None] = mapped_column(String(50), nullable=True)
    category: Mapped[str] = mapped_column(String(20), nullable=False, default="General")
    wake_up_time: Mapped[str | None] = mapped_column(String(5), nullable=True)
    sleep_time: Mapped[str | None] = mapped_column(String(5), nullable=True)
    all_moods: Mapped[str] = mapped_column(Text, default="")
    word_count: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.now,
        onupdate=datetime.now,
    )

    @property
    def tags(self) -> list[str]:
        return split_tags(self.all_moods)


class SettingEntry(Base):
    """Key-value configuration stored in DB."""

    __tablename__ = "settings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    key: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.now,
        onupdate=datetime.now,
    )


__all__ = [
    "Base",
    "JournalEntry",
    "SettingEntry",
]
