"""Request dependencies shared by the route modules."""

from fastapi import Request

from playmates.web.session import SESSION_KEY, AuthenticatedContext, authorize


def require_user(request: Request) -> AuthenticatedContext:
    """Gate a route behind a valid session.

    Raises ``Unauthorized``, which the app turns into a redirect home.
    """
    return authorize(request.app.state.sessions, request.session.get(SESSION_KEY))
