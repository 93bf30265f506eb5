"""JSON API routes - profile, friends, games and comparisons."""

import logging

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from playmates.compare import compare_achievements, find_common_achievable_games
from playmates.errors import MissingParameter
from playmates.models import AchievementComparison
from playmates.steam import SteamAPIError
from playmates.web.deps import require_user
from playmates.web.schemas import ErrorResponse, GameResponse, PlayerResponse
from playmates.web.session import AuthenticatedContext

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api",
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)


def _provider_failure(message: str) -> JSONResponse:
    return JSONResponse(status_code=500, content=ErrorResponse(error=message).model_dump())


def _parse_app_id(raw: str) -> int:
    # str.isdigit() also accepts characters like "²" that int() rejects
    if not (raw.isascii() and raw.isdigit()) or int(raw) <= 0:
        raise MissingParameter("App ID must be a positive number")
    return int(raw)


@router.get("/me", response_model=PlayerResponse)
async def me(ctx: AuthenticatedContext = Depends(require_user)):
    """The signed-in user's profile."""
    return PlayerResponse.from_profile(ctx.user)


@router.get("/friends", response_model=list[PlayerResponse])
async def friends(request: Request, ctx: AuthenticatedContext = Depends(require_user)):
    """The signed-in user's friends."""
    steam = request.app.state.steam
    try:
        profiles = await steam.get_friends(ctx.user.steam_id)
    except SteamAPIError:
        logger.exception("Error fetching friends for %s", ctx.user.steam_id)
        return _provider_failure("Failed to get friends")
    return [PlayerResponse.from_profile(p) for p in profiles]


@router.get("/games", response_model=list[GameResponse])
async def games(request: Request, ctx: AuthenticatedContext = Depends(require_user)):
    """The signed-in user's owned games."""
    steam = request.app.state.steam
    try:
        owned = await steam.get_owned_games(ctx.user.steam_id)
    except SteamAPIError:
        logger.exception("Error fetching games for %s", ctx.user.steam_id)
        return _provider_failure("Failed to get games")
    return [GameResponse.from_game(g) for g in owned]


@router.get("/common-games", response_model=list[GameResponse])
async def common_games(
    request: Request,
    ctx: AuthenticatedContext = Depends(require_user),
    friend_id: str | None = Query(None, alias="friendId", description="Friend's Steam ID"),
):
    """Games both players own that have achievements."""
    if not friend_id:
        raise MissingParameter("Friend ID required")

    steam = request.app.state.steam
    try:
        common = await find_common_achievable_games(steam, ctx.user.steam_id, friend_id)
    except SteamAPIError:
        logger.exception("Error fetching common games with %s", friend_id)
        return _provider_failure("Failed to get common games")
    return [GameResponse.from_game(g) for g in common]


@router.get("/achievements", response_model=AchievementComparison)
async def achievements(
    request: Request,
    ctx: AuthenticatedContext = Depends(require_user),
    friend_id: str | None = Query(None, alias="friendId", description="Friend's Steam ID"),
    app_id: str | None = Query(None, alias="appId", description="Steam app ID of the game"),
):
    """Compare achievement progress with a friend for one game."""
    if not friend_id or not app_id:
        raise MissingParameter("Friend ID and App ID required")

    steam = request.app.state.steam
    try:
        return await compare_achievements(steam, ctx.user.steam_id, friend_id, _parse_app_id(app_id))
    except SteamAPIError:
        logger.exception("Achievement fetch error for app %s", app_id)
        return _provider_failure("Failed to get achievements")
