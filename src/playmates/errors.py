"""Errors raised by the comparison engine and the web layer."""


class PlaymatesError(Exception):
    """Base class for errors with a user-facing message."""

    pass


class Unauthorized(PlaymatesError):
    """No valid session."""

    pass


class MissingParameter(PlaymatesError):
    """A required query parameter is missing or malformed."""

    pass


class AchievementDataUnavailable(PlaymatesError):
    """One side of an achievement comparison has no data."""

    MESSAGES = {
        "user": (
            "Could not fetch your achievements. Your game details may be private "
            "or you don't own this game"
        ),
        "friend": (
            "Could not fetch friend's achievements. Their game details may be private "
            "or your friend does not own this game."
        ),
    }

    def __init__(self, which: str):
        if which not in self.MESSAGES:
            raise ValueError(f"which must be 'user' or 'friend', got {which!r}")
        self.which = which
        super().__init__(self.MESSAGES[which])


class NoAchievements(PlaymatesError):
    """The game defines no achievements."""

    def __init__(self, message: str = "This game has no achievements."):
        super().__init__(message)
