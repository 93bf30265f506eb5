"""Web app: Steam sign-in and the comparison API."""

from playmates.web.app import create_app

__all__ = ["create_app"]
