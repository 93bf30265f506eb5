"""Data models for Playmates."""

from playmates.models.profile import (
    AchievementComparison,
    AchievementEntry,
    AchievementSchema,
    Game,
    PlayerProgress,
    SchemaLookup,
    UserProfile,
)

__all__ = [
    "AchievementComparison",
    "AchievementEntry",
    "AchievementSchema",
    "Game",
    "PlayerProgress",
    "SchemaLookup",
    "UserProfile",
]
