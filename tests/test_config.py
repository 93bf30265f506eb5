"""
Tests for environment-driven Settings.

Run with:
    python -m pytest tests/test_config.py
"""
import os
import unittest
from unittest.mock import patch

from playmates.config import DEFAULT_RETURN_URL, ConfigError, Settings

REQUIRED = {"STEAM_API_KEY": "FAKE_KEY", "SESSION_SECRET": "secret"}


class TestSettingsFromEnv(unittest.TestCase):

    def test_defaults(self):
        with patch.dict(os.environ, REQUIRED, clear=True):
            settings = Settings.from_env(load_files=False)
        self.assertEqual(settings.steam_api_key, "FAKE_KEY")
        self.assertEqual(settings.port, 3000)
        self.assertEqual(settings.return_url, DEFAULT_RETURN_URL)
        self.assertEqual(settings.request_timeout, 10.0)

    def test_overrides(self):
        env = {
            **REQUIRED,
            "PORT": "8080",
            "RETURN_URL": "https://playmates.example/auth/login/return",
            "REALM": "https://playmates.example/",
        }
        with patch.dict(os.environ, env, clear=True):
            settings = Settings.from_env(load_files=False)
        self.assertEqual(settings.port, 8080)
        self.assertEqual(settings.realm, "https://playmates.example/")

    def test_missing_required(self):
        with patch.dict(os.environ, {"STEAM_API_KEY": "FAKE_KEY"}, clear=True):
            with self.assertRaises(ConfigError) as ctx:
                Settings.from_env(load_files=False)
        self.assertIn("SESSION_SECRET", str(ctx.exception))

    def test_malformed_port(self):
        with patch.dict(os.environ, {**REQUIRED, "PORT": "three thousand"}, clear=True):
            with self.assertRaises(ConfigError):
                Settings.from_env(load_files=False)


if __name__ == "__main__":
    unittest.main()
