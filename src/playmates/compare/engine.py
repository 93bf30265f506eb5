"""Compare two players' game libraries and achievement progress."""

import asyncio
import logging
from typing import Protocol

from playmates.errors import AchievementDataUnavailable, NoAchievements
from playmates.models import (
    AchievementComparison,
    AchievementEntry,
    AchievementSchema,
    Game,
    PlayerProgress,
    SchemaLookup,
)
from playmates.steam import SteamAPIError

logger = logging.getLogger(__name__)

# Upper bound on concurrent schema requests per comparison
DEFAULT_SCHEMA_CONCURRENCY = 8


class GameProvider(Protocol):
    """The provider calls the engine needs. ``SteamClient`` satisfies it."""

    async def get_owned_games(self, steam_id: str) -> list[Game]: ...

    async def get_achievement_schema(self, app_id: int) -> AchievementSchema: ...

    async def get_achievement_progress(self, steam_id: str, app_id: int) -> list[AchievementEntry]: ...


def percent_of(part: int, whole: int) -> int:
    """Integer percentage of part in whole, halves rounded up (12.5 -> 13).

    Integer arithmetic keeps exact halves exact.
    """
    return (part * 200 + whole) // (2 * whole)


def intersect_games(user_games: list[Game], friend_games: list[Game]) -> list[Game]:
    """Games owned by both players, in the user's library order."""
    friend_ids = {g.app_id for g in friend_games}
    seen: set[int] = set()
    common = []
    for game in user_games:
        if game.app_id in friend_ids and game.app_id not in seen:
            seen.add(game.app_id)
            common.append(game)
    return common


async def lookup_schemas(
    provider: GameProvider,
    games: list[Game],
    concurrency: int = DEFAULT_SCHEMA_CONCURRENCY,
) -> list[SchemaLookup]:
    """Fetch the achievement schema of every game.

    A failed lookup is recorded on its ``SchemaLookup`` instead of raised, so
    one broken game cannot fail the whole batch.
    """
    semaphore = asyncio.Semaphore(concurrency)

    async def lookup(game: Game) -> SchemaLookup:
        async with semaphore:
            try:
                schema = await provider.get_achievement_schema(game.app_id)
            except SteamAPIError as e:
                logger.warning("Could not fetch %s (%s): %s", game.name, game.app_id, e)
                return SchemaLookup(game=game, error=str(e))
        return SchemaLookup(game=game, achievement_schema=schema)

    return list(await asyncio.gather(*(lookup(g) for g in games)))


def select_achievable(lookups: list[SchemaLookup]) -> list[Game]:
    """Keep games whose schema was fetched and lists at least one achievement."""
    return [
        lookup.game
        for lookup in lookups
        if lookup.ok and lookup.achievement_schema.has_achievements
    ]


async def find_common_achievable_games(
    provider: GameProvider,
    user_id: str,
    friend_id: str,
    concurrency: int = DEFAULT_SCHEMA_CONCURRENCY,
) -> list[Game]:
    """Games both players own that have achievements.

    Args:
        provider: Source of owned games and achievement schemas.
        user_id: Steam ID of the signed-in user.
        friend_id: Steam ID of the friend to compare against.
        concurrency: Maximum schema requests in flight at once.

    Returns:
        Common games with achievements, in the user's library order.

    Raises:
        SteamAPIError: If either owned-games list cannot be fetched.
    """
    user_games, friend_games = await asyncio.gather(
        provider.get_owned_games(user_id),
        provider.get_owned_games(friend_id),
    )
    common = intersect_games(user_games, friend_games)
    logger.debug(
        "%s owns %d games, %s owns %d, %d in common",
        user_id, len(user_games), friend_id, len(friend_games), len(common),
    )

    lookups = await lookup_schemas(provider, common, concurrency)
    achievable = select_achievable(lookups)
    logger.info("%d of %d common games have achievements", len(achievable), len(common))
    return achievable


def summarize_progress(entries: list[AchievementEntry], total: int) -> PlayerProgress:
    """Count unlocked achievements and the rounded completion percentage."""
    unlocked = sum(1 for e in entries if e.unlocked)
    return PlayerProgress(unlocked=unlocked, percentage=percent_of(unlocked, total))


async def compare_achievements(
    provider: GameProvider,
    user_id: str,
    friend_id: str,
    app_id: int,
) -> AchievementComparison:
    """Compare two players' achievement progress for one game.

    The total is the length of the user's achievement list; the friend's
    list is assumed to be the same length.

    Raises:
        AchievementDataUnavailable: If either player's progress cannot be fetched.
        NoAchievements: If the game has no achievements.
    """
    user_result, friend_result = await asyncio.gather(
        provider.get_achievement_progress(user_id, app_id),
        provider.get_achievement_progress(friend_id, app_id),
        return_exceptions=True,
    )

    for which, result in (("user", user_result), ("friend", friend_result)):
        if isinstance(result, SteamAPIError):
            logger.info("No achievement data for %s on app %s: %s", which, app_id, result)
            raise AchievementDataUnavailable(which) from result
        if isinstance(result, BaseException):
            raise result

    total = len(user_result)
    if total == 0:
        raise NoAchievements()

    if len(friend_result) != total:
        logger.warning(
            "Achievement count mismatch for app %s: user has %d, friend has %d",
            app_id, total, len(friend_result),
        )

    return AchievementComparison(
        total=total,
        user=summarize_progress(user_result, total),
        friend=summarize_progress(friend_result, total),
    )
