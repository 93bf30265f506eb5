"""Server-side sessions and the authentication gate.

The browser only holds a signed cookie with an opaque session id; the
signed-in profile lives in a ``SessionStore`` for the life of the process.
"""

import secrets
import time
from collections.abc import Callable
from typing import TypedDict

from pydantic import BaseModel, ValidationError

from playmates.errors import Unauthorized
from playmates.models import UserProfile

# Key under which the session id is kept in the signed cookie
SESSION_KEY = "sid"


class SessionRecord(TypedDict):
    """Stored form of a signed-in user."""

    steam_id: str
    display_name: str
    avatars: list[str]


class SessionDecodeError(Exception):
    """A stored session record could not be turned back into a profile."""

    pass


def encode_profile(profile: UserProfile) -> SessionRecord:
    """Serialize a profile for the session store."""
    return {
        "steam_id": profile.steam_id,
        "display_name": profile.display_name,
        "avatars": list(profile.avatars),
    }


def decode_profile(record: SessionRecord) -> UserProfile:
    """Rebuild a profile from its stored form.

    Raises:
        SessionDecodeError: If the record is missing fields or malformed.
    """
    try:
        return UserProfile(
            steam_id=record["steam_id"],
            display_name=record["display_name"],
            avatars=record["avatars"],
        )
    except (KeyError, TypeError, ValidationError) as e:
        raise SessionDecodeError(f"Invalid session record: {e}") from e


class SessionStore:
    """In-memory map of session id to signed-in user."""

    def __init__(self, max_age: float, clock: Callable[[], float] = time.monotonic):
        self.max_age = max_age
        self._clock = clock
        self._records: dict[str, tuple[float, SessionRecord]] = {}

    def __len__(self) -> int:
        return len(self._records)

    def create(self, profile: UserProfile) -> str:
        """Store a profile under a fresh session id and return the id.

        Expired records are dropped first, so abandoned sessions do not pile up.
        """
        now = self._clock()
        self._records = {
            sid: entry for sid, entry in self._records.items() if now - entry[0] <= self.max_age
        }

        session_id = secrets.token_urlsafe(32)
        self._records[session_id] = (now, encode_profile(profile))
        return session_id

    def get(self, session_id: str) -> UserProfile | None:
        """Look up a session, dropping it if expired or unreadable."""
        entry = self._records.get(session_id)
        if entry is None:
            return None

        created_at, record = entry
        if self._clock() - created_at > self.max_age:
            self.destroy(session_id)
            return None

        try:
            return decode_profile(record)
        except SessionDecodeError:
            self.destroy(session_id)
            return None

    def destroy(self, session_id: str) -> None:
        self._records.pop(session_id, None)


class AuthenticatedContext(BaseModel):
    """The signed-in user, handed explicitly to protected handlers."""

    session_id: str
    user: UserProfile


def authorize(store: SessionStore, session_id: str | None) -> AuthenticatedContext:
    """Resolve a session id to its user.

    Raises:
        Unauthorized: If there is no session or it is no longer valid.
    """
    if not session_id:
        raise Unauthorized("Not signed in")

    user = store.get(session_id)
    if user is None:
        raise Unauthorized("Session expired or unknown")

    return AuthenticatedContext(session_id=session_id, user=user)
