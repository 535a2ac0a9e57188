from __future__ import annotations

ALL_MOODS: tuple[str, ...] = (
    "Happy",
    "Sad",
    "Angry",
    "Anxious",
    "Excited",
    "Calm",
    "Stressed",
    "Grateful",
    "Tired",
    "Energetic",
    "Confused",
    "Confident",
    "Lonely",
    "Content",
    "Frustrated",
)

MOOD_CATEGORIES: dict[str, tuple[str, ...]] = {
    "Positive": ("Happy", "Excited", "Grateful", "Content", "Confident", "Energetic"),
    "Negative": ("Sad", "Angry", "Anxious", "Stressed", "Lonely", "Frustrated"),
    "Neutral": ("Calm", "Tired", "Confused"),
}

DEFAULT_CATEGORY = "General"

SUGGESTED_TAGS: tuple[str, ...] = (
    "Work",
    "Family",
    "Friends",
    "Health",
    "Exercise",
    "Travel",
    "Food",
    "Hobby",
    "Goals",
    "Gratitude",
    "Reflection",
    "Ideas",
    "Dreams",
    "Memories",
    "Plans",
)

_MOOD_EMOJI = {
    "Happy": "😊",
    "Sad": "😢",
    "Angry": "😠",
    "Anxious": "😰",
    "Excited": "🤩",
    "Calm": "😌",
    "Stressed": "😫",
    "Grateful": "🙏",
    "Tired": "😴",
    "Energetic": "⚡",
    "Confused": "😕",
    "Confident": "😎",
    "Lonely": "😔",
    "Content": "😊",
    "Frustrated": "😤",
}

_CATEGORY_BY_MOOD = {
    mood: category for category, moods in MOOD_CATEGORIES.items() for mood in moods
}


def category_of(mood: str | None) -> str:
    """Map a mood label to its coarse category; unknown labels are General."""

    if not mood:
        return DEFAULT_CATEGORY
    return _CATEGORY_BY_MOOD.get(mood.strip(), DEFAULT_CATEGORY)


def emoji_for(mood: str | None) -> str:
    if not mood:
        return "😐"
    return _MOOD_EMOJI.get(mood.strip(), "😐")


__all__ = [
    "ALL_MOODS",
    "DEFAULT_CATEGORY",
    "MOOD_CATEGORIES",
    "SUGGESTED_TAGS",
    "category_of",
    "emoji_for",
]
