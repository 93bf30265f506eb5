"""Core data models for players, games and achievement progress."""

from pydantic import BaseModel, ConfigDict, Field


class UserProfile(BaseModel):
    """A Steam player as returned by the identity provider or the Web API."""

    model_config = ConfigDict(frozen=True)

    steam_id: str = Field(description="Stable 64-bit Steam ID")
    display_name: str = ""
    # Ascending resolution: small, medium, full
    avatars: list[str] = Field(default_factory=list)

    @property
    def avatar(self) -> str:
        """Highest-resolution avatar URL, or empty string if none."""
        return self.avatars[-1] if self.avatars else ""


class Game(BaseModel):
    """A game in a player's library."""

    model_config = ConfigDict(frozen=True)

    app_id: int
    name: str


# =============================================================================
# Achievements
# =============================================================================


class AchievementSchema(BaseModel):
    """Game-global achievement definitions."""

    app_id: int
    achievements: list[str] = Field(default_factory=list)

    @property
    def has_achievements(self) -> bool:
        return len(self.achievements) > 0


class AchievementEntry(BaseModel):
    """One row of a player's raw achievement progress."""

    api_name: str
    unlocked: bool = False


class PlayerProgress(BaseModel):
    """Unlocked count and rounded completion percentage for one player."""

    unlocked: int = 0
    percentage: int = 0


class AchievementComparison(BaseModel):
    """Side-by-side achievement progress for a single game."""

    total: int
    user: PlayerProgress
    friend: PlayerProgress


class SchemaLookup(BaseModel):
    """Outcome of fetching the achievement schema for one common game.

    Exactly one of ``achievement_schema`` and ``error`` is set.
    """

    game: Game
    achievement_schema: AchievementSchema | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.achievement_schema is not None
