"""Steam sign-in and Web API access."""

from playmates.steam.client import (
    ProviderDataMissing,
    ProviderUnavailable,
    SteamAPIError,
    SteamClient,
)
from playmates.steam.openid import AuthError, SteamOpenID

__all__ = [
    "AuthError",
    "ProviderDataMissing",
    "ProviderUnavailable",
    "SteamAPIError",
    "SteamClient",
    "SteamOpenID",
]
