"""Page routes - landing page, dashboard and logout."""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import FileResponse, RedirectResponse

from playmates.web.deps import require_user
from playmates.web.paths import PAGES_DIR
from playmates.web.session import SESSION_KEY, AuthenticatedContext

router = APIRouter()


@router.get("/")
async def index():
    """Serve the landing page."""
    return FileResponse(PAGES_DIR / "index.html")


@router.get("/dashboard")
async def dashboard(ctx: AuthenticatedContext = Depends(require_user)):
    """Serve the dashboard page."""
    return FileResponse(PAGES_DIR / "dashboard.html")


@router.get("/logout")
async def logout(request: Request):
    """End the session and go home."""
    session_id = request.session.pop(SESSION_KEY, None)
    if session_id:
        request.app.state.sessions.destroy(session_id)
    return RedirectResponse(url="/", status_code=302)
