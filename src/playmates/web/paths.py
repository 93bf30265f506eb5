"""Filesystem locations of bundled web assets."""

from pathlib import Path

WEB_DIR = Path(__file__).parent
PAGES_DIR = WEB_DIR / "pages"
STATIC_DIR = WEB_DIR / "static"
