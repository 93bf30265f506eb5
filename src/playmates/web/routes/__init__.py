"""Route handlers for the web app."""

from playmates.web.routes import api, auth, pages

__all__ = ["api", "auth", "pages"]
