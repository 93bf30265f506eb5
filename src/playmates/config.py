"""Environment-driven configuration.

Values are read from the process environment after loading ``.env`` files
from the current directory and from ``~/.playmates/.env``:

    export STEAM_API_KEY="your_api_key"
    export SESSION_SECRET="a long random string"
    export RETURN_URL="https://example.com/auth/login/return"
    export REALM="https://example.com/"
"""

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field

CONFIG_DIR = Path.home() / ".playmates"

DEFAULT_RETURN_URL = "http://localhost:3000/auth/login/return"
DEFAULT_REALM = "http://localhost:3000/"


class ConfigError(Exception):
    """Missing or malformed configuration."""

    pass


class Settings(BaseModel):
    """Application settings."""

    steam_api_key: str
    session_secret: str
    return_url: str = DEFAULT_RETURN_URL
    realm: str = DEFAULT_REALM
    host: str = "127.0.0.1"
    port: int = 3000
    steam_api_base: str = "https://api.steampowered.com"
    request_timeout: float = Field(default=10.0, gt=0)
    session_max_age: int = Field(default=86400, gt=0)
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, load_files: bool = True) -> "Settings":
        """Build settings from environment variables.

        Raises:
            ConfigError: If a required variable is missing or a number is malformed.
        """
        if load_files:
            load_dotenv(Path.cwd() / ".env")
            load_dotenv(CONFIG_DIR / ".env")

        missing = [name for name in ("STEAM_API_KEY", "SESSION_SECRET") if not os.getenv(name)]
        if missing:
            raise ConfigError(f"Missing required environment variable(s): {', '.join(missing)}")

        values = {
            "steam_api_key": os.environ["STEAM_API_KEY"],
            "session_secret": os.environ["SESSION_SECRET"],
        }
        optional = {
            "RETURN_URL": "return_url",
            "REALM": "realm",
            "HOST": "host",
            "PORT": "port",
            "STEAM_API_BASE": "steam_api_base",
            "REQUEST_TIMEOUT": "request_timeout",
            "SESSION_MAX_AGE": "session_max_age",
            "LOG_LEVEL": "log_level",
        }
        for env_name, field in optional.items():
            value = os.getenv(env_name)
            if value:
                values[field] = value

        try:
            return cls.model_validate(values)
        except ValueError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e
