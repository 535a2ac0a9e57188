"""Conversion between tag lists and their comma-joined storage form."""

from __future__ import annotations

from collections.abc import Iterable

TAG_SEPARATOR = ","


def split_tags(raw: str | None) -> list[str]:
    if not raw or not raw.strip():
        return []
    return [item.strip() for item in raw.split(TAG_SEPARATOR) if item.strip()]


def join_tags(tags: Iterable[str] | None) -> str:
    if not tags:
        return ""
    return TAG_SEPARATOR.join(tag.strip() for tag in tags if tag and tag.strip())


def count_words(text: str | None) -> int:
    """Number of whitespace-separated tokens."""

    if not text:
        return 0
    return len(text.split())


__all__ = ["TAG_SEPARATOR", "count_words", "join_tags", "split_tags"]
