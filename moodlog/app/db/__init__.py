"""Database models for moodlog."""

from .models import (
    Base,
    JournalEntry,
    SettingEntry,
)

__all__ = [
    "Base",
    "JournalEntry",
    "SettingEntry",
]
