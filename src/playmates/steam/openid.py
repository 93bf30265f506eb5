"""Steam OpenID 2.0 sign-in.

Steam uses OpenID 2.0 (not OAuth2). The flow is:
1. Redirect the browser to steamcommunity.com/openid/login
2. Steam redirects back to our return URL with a signed assertion
3. We check the assertion locally, then ask Steam to confirm the signature
   (``check_authentication``)
4. The claimed identity URL carries the user's Steam64 ID
"""

import logging
import re
from collections.abc import Mapping
from datetime import datetime, timedelta, timezone
from urllib.parse import urlencode

import httpx

logger = logging.getLogger(__name__)

STEAM_OPENID_URL = "https://steamcommunity.com/openid/login"
OPENID_NS = "http://specs.openid.net/auth/2.0"
IDENTIFIER_SELECT = "http://specs.openid.net/auth/2.0/identifier_select"
CLAIMED_ID_PATTERN = re.compile(r"^https?://steamcommunity\.com/openid/id/(\d{17})$")

# Nonces look like "2024-05-01T12:34:56Z<salt>"
NONCE_TIME_FORMAT = "%Y-%m-%dT%H:%M:%SZ"
NONCE_MAX_AGE = timedelta(minutes=5)


class AuthError(Exception):
    """The sign-in assertion was rejected."""

    pass


class SteamOpenID:
    """Builds Steam sign-in redirects and verifies the callback."""

    def __init__(
        self,
        return_url: str,
        realm: str,
        endpoint: str = STEAM_OPENID_URL,
        timeout: float = 10.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.return_url = return_url
        self.realm = realm
        self.endpoint = endpoint
        self._http_client = http_client or httpx.AsyncClient(timeout=timeout)
        self._seen_nonces: dict[str, datetime] = {}

    def begin_login(self) -> str:
        """Return the Steam URL to send the browser to."""
        params = {
            "openid.ns": OPENID_NS,
            "openid.mode": "checkid_setup",
            "openid.return_to": self.return_url,
            "openid.realm": self.realm,
            "openid.identity": IDENTIFIER_SELECT,
            "openid.claimed_id": IDENTIFIER_SELECT,
        }
        return f"{self.endpoint}?{urlencode(params)}"

    async def complete_login(self, params: Mapping[str, str]) -> str:
        """Verify Steam's callback parameters.

        Args:
            params: Query parameters Steam redirected back with.

        Returns:
            The authenticated Steam64 ID.

        Raises:
            AuthError: If any check fails.
        """
        if params.get("openid.mode") != "id_res":
            raise AuthError(f"Unexpected openid.mode: {params.get('openid.mode')!r}")

        if params.get("openid.op_endpoint") != self.endpoint:
            raise AuthError("Assertion was not issued by Steam")

        if params.get("openid.return_to") != self.return_url:
            raise AuthError("openid.return_to does not match the configured return URL")

        match = CLAIMED_ID_PATTERN.match(params.get("openid.claimed_id", ""))
        if not match:
            raise AuthError("Claimed ID is not a Steam identity")

        nonce = params.get("openid.response_nonce", "")
        issued = self._check_nonce(nonce)

        if not await self._verify_signature(params):
            raise AuthError("Steam did not confirm the assertion")

        # Nonces are recorded only once Steam confirms the assertion
        if nonce in self._seen_nonces:
            raise AuthError("Response nonce was already used")
        self._seen_nonces[nonce] = issued

        steam_id = match.group(1)
        logger.info("Steam OpenID: validated Steam64 ID %s", steam_id)
        return steam_id

    def _check_nonce(self, nonce: str, now: datetime | None = None) -> datetime:
        """Reject missing, stale or replayed response nonces.

        Returns the time the nonce was issued. The nonce is not recorded here.
        """
        now = now or datetime.now(timezone.utc)

        # Forget nonces old enough to fail the age check anyway
        self._seen_nonces = {
            n: issued for n, issued in self._seen_nonces.items() if now - issued <= NONCE_MAX_AGE
        }

        try:
            issued = datetime.strptime(nonce[:20], NONCE_TIME_FORMAT).replace(tzinfo=timezone.utc)
        except ValueError:
            raise AuthError("Missing or malformed response nonce")

        if now - issued > NONCE_MAX_AGE:
            raise AuthError("Response nonce has expired")
        if nonce in self._seen_nonces:
            raise AuthError("Response nonce was already used")

        return issued

    async def _verify_signature(self, params: Mapping[str, str]) -> bool:
        """Ask Steam whether it signed these parameters."""
        verify_params = {k: v for k, v in params.items() if k.startswith("openid.")}
        verify_params["openid.mode"] = "check_authentication"

        try:
            response = await self._http_client.post(self.endpoint, data=verify_params)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error("Steam OpenID: HTTP error during validation: %s", e)
            return False

        # Key-value form: one "key:value" pair per line
        fields = dict(line.split(":", 1) for line in response.text.splitlines() if ":" in line)
        return fields.get("is_valid") == "true"

    async def aclose(self):
        """Close the HTTP client."""
        await self._http_client.aclose()
