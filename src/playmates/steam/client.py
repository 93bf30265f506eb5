"""Steam Web API client.

To get a Steam API key:
1. Go to https://steamcommunity.com/dev/apikey
2. Log in with your Steam account
3. Enter a domain name (can be "localhost" for personal use)
4. Copy the API key

Set it as an environment variable:
    export STEAM_API_KEY="your_api_key"

All calls are read-only. Each one fails independently with
``ProviderUnavailable`` (transport or HTTP failure) or ``ProviderDataMissing``
(the response parsed but lacks the data we need); callers decide whether a
single failure aborts their work.
"""

from typing import Any

import httpx

from playmates.models import AchievementEntry, AchievementSchema, Game, UserProfile

STEAM_API_BASE = "https://api.steampowered.com"
DEFAULT_TIMEOUT = 10.0

# GetPlayerSummaries limit on steamids per call
SUMMARIES_BATCH_SIZE = 100

# Avatar fields in ascending resolution
AVATAR_FIELDS = ("avatar", "avatarmedium", "avatarfull")


class SteamAPIError(Exception):
    """Error from Steam API."""

    pass


class ProviderUnavailable(SteamAPIError):
    """Steam could not be reached or answered with an error."""

    pass


class ProviderDataMissing(SteamAPIError):
    """Steam answered but the response lacks the expected data."""

    pass


def player_to_profile(player: dict[str, Any]) -> UserProfile:
    """Convert a GetPlayerSummaries player entry to a UserProfile."""
    return UserProfile(
        steam_id=str(player["steamid"]),
        display_name=player.get("personaname", ""),
        avatars=[player[field] for field in AVATAR_FIELDS if player.get(field)],
    )


class SteamClient:
    """Async client for Steam Web API."""

    def __init__(
        self,
        api_key: str | None,
        base_url: str = STEAM_API_BASE,
        timeout: float = DEFAULT_TIMEOUT,
        http_client: httpx.AsyncClient | None = None,
    ):
        if not api_key:
            raise SteamAPIError(
                "Steam API key not provided. Set STEAM_API_KEY environment variable. "
                "Get your key at: https://steamcommunity.com/dev/apikey"
            )
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self._http_client = http_client or httpx.AsyncClient(timeout=timeout)

    async def _get_json(self, path: str, params: dict[str, Any], allow_error_status: bool = False) -> dict:
        """GET a Web API method and decode its JSON body.

        Args:
            path: Interface/method/version path, e.g. ``ISteamUser/GetFriendList/v1/``.
            params: Query parameters (the API key is added here).
            allow_error_status: Decode the body even on a 4xx response.

        Raises:
            ProviderUnavailable: On transport errors, error statuses or non-JSON bodies.
        """
        url = f"{self.base_url}/{path}"
        query = {"key": self.api_key, **params}

        try:
            response = await self._http_client.get(url, params=query)
        except httpx.HTTPError as e:
            raise ProviderUnavailable(f"Request to {path} failed: {e}") from e

        if response.is_server_error or (response.is_client_error and not allow_error_status):
            raise ProviderUnavailable(f"{path} returned HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderUnavailable(f"{path} returned a non-JSON body") from e

        if not isinstance(data, dict):
            raise ProviderUnavailable(f"{path} returned unexpected JSON")
        return data

    async def get_player_summaries(self, steam_ids: list[str]) -> list[UserProfile]:
        """Fetch display profiles for any number of Steam IDs.

        Steam accepts at most ``SUMMARIES_BATCH_SIZE`` IDs per request, so
        longer lists are split into consecutive requests.

        Returns:
            Profiles batch by batch, in the order Steam returns them.
        """
        profiles = []
        for start in range(0, len(steam_ids), SUMMARIES_BATCH_SIZE):
            batch = steam_ids[start:start + SUMMARIES_BATCH_SIZE]
            data = await self._get_json(
                "ISteamUser/GetPlayerSummaries/v2/",
                {"steamids": ",".join(batch)},
            )
            players = data.get("response", {}).get("players")
            if players is None:
                raise ProviderDataMissing("Player summaries response has no players list")
            profiles.extend(player_to_profile(p) for p in players if p.get("steamid"))
        return profiles

    async def get_profile(self, steam_id: str) -> UserProfile:
        """Fetch the display profile of a single player."""
        profiles = await self.get_player_summaries([steam_id])
        if not profiles:
            raise ProviderDataMissing(f"No profile found for Steam ID {steam_id}")
        return profiles[0]

    async def get_friends(self, steam_id: str) -> list[UserProfile]:
        """Fetch a player's friends with their display profiles.

        Private friend lists come back as an HTTP error and raise
        ``ProviderUnavailable``.
        """
        data = await self._get_json(
            "ISteamUser/GetFriendList/v1/",
            {"steamid": steam_id, "relationship": "friend"},
        )
        friendslist = data.get("friendslist")
        if friendslist is None:
            raise ProviderDataMissing(f"Friend list unavailable for Steam ID {steam_id}")

        friend_ids = [f["steamid"] for f in friendslist.get("friends", []) if f.get("steamid")]
        return await self.get_player_summaries(friend_ids)

    async def get_owned_games(self, steam_id: str) -> list[Game]:
        """Fetch all games owned by a player, free games with playtime included.

        A private library yields an empty list, not an error.
        """
        data = await self._get_json(
            "IPlayerService/GetOwnedGames/v1/",
            {
                "steamid": steam_id,
                "include_appinfo": 1,
                "include_played_free_games": 1,
            },
        )

        games = []
        for game_data in data.get("response", {}).get("games", []):
            app_id = game_data["appid"]
            games.append(Game(app_id=app_id, name=game_data.get("name", f"Unknown ({app_id})")))
        return games

    async def get_achievement_schema(self, app_id: int) -> AchievementSchema:
        """Fetch the achievement definitions of a game.

        Games without stats return a schema with no achievements.

        Raises:
            ProviderDataMissing: If the body does not have the documented shape.
        """
        data = await self._get_json("ISteamUserStats/GetSchemaForGame/v2/", {"appid": app_id})

        game = data.get("game") or {}
        stats = (game.get("availableGameStats") or {}) if isinstance(game, dict) else None
        achievements = (stats.get("achievements") or []) if isinstance(stats, dict) else None
        if not isinstance(achievements, list) or not all(isinstance(a, dict) for a in achievements):
            raise ProviderDataMissing(f"Malformed achievement schema for app {app_id}")

        return AchievementSchema(
            app_id=app_id,
            achievements=[str(ach.get("name", "")) for ach in achievements],
        )

    async def get_achievement_progress(self, steam_id: str, app_id: int) -> list[AchievementEntry]:
        """Fetch a player's achievement progress for one game.

        Steam answers private profiles and unowned games with a 4xx status
        and a JSON body carrying an error, so the body is checked either way.

        Raises:
            ProviderDataMissing: If the response has no achievements list.
        """
        data = await self._get_json(
            "ISteamUserStats/GetPlayerAchievements/v1/",
            {"steamid": steam_id, "appid": app_id},
            allow_error_status=True,
        )

        player_stats = data.get("playerstats") or {}
        achievements = player_stats.get("achievements")
        if achievements is None:
            reason = player_stats.get("error", "no achievements in response")
            raise ProviderDataMissing(f"Achievements for app {app_id} unavailable: {reason}")

        return [
            AchievementEntry(api_name=ach.get("apiname", ""), unlocked=ach.get("achieved", 0) == 1)
            for ach in achievements
        ]

    async def aclose(self):
        """Close the HTTP client."""
        await self._http_client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.aclose()
