"""Sign in with Steam."""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import RedirectResponse

from playmates.steam import AuthError, SteamAPIError
from playmates.web.session import SESSION_KEY

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth")


@router.get("/login")
@router.get("/steam", include_in_schema=False)
async def login(request: Request):
    """Send the browser to Steam's sign-in page."""
    openid = request.app.state.openid
    return RedirectResponse(url=openid.begin_login(), status_code=302)


@router.get("/login/return")
@router.get("/steam/return", include_in_schema=False)
async def login_return(request: Request):
    """Handle Steam's callback: verify, load the profile, start a session.

    Any failure lands the browser back on the home page, signed out.
    """
    openid = request.app.state.openid
    steam = request.app.state.steam
    sessions = request.app.state.sessions

    try:
        steam_id = await openid.complete_login(request.query_params)
        profile = await steam.get_profile(steam_id)
    except AuthError as e:
        logger.warning("Steam sign-in rejected: %s", e)
        return RedirectResponse(url="/", status_code=302)
    except SteamAPIError as e:
        logger.warning("Steam sign-in failed loading profile: %s", e)
        return RedirectResponse(url="/", status_code=302)

    previous = request.session.get(SESSION_KEY)
    if previous:
        sessions.destroy(previous)
    request.session[SESSION_KEY] = sessions.create(profile)

    logger.info("Signed in %s (%s)", profile.display_name, profile.steam_id)
    return RedirectResponse(url="/dashboard", status_code=302)
