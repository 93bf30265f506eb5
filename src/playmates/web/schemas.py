"""JSON response shapes of the /api routes."""

from pydantic import BaseModel

from playmates.models import Game, UserProfile


class PlayerResponse(BaseModel):
    username: str
    steamid: str
    avatar: str

    @classmethod
    def from_profile(cls, profile: UserProfile) -> "PlayerResponse":
        return cls(username=profile.display_name, steamid=profile.steam_id, avatar=profile.avatar)


class GameResponse(BaseModel):
    appid: int
    name: str

    @classmethod
    def from_game(cls, game: Game) -> "GameResponse":
        return cls(appid=game.app_id, name=game.name)


class ErrorResponse(BaseModel):
    error: str
