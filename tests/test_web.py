"""
Tests for the HTTP routes (FastAPI TestClient):
  - sign-in callback, session cookie, logout
  - authentication gate on pages and /api routes
  - /api/* payloads and error-to-status mapping

Run with:
    python -m pytest tests/test_web.py
"""
import unittest

from fastapi.testclient import TestClient

from playmates.config import Settings
from playmates.models import Game, UserProfile
from playmates.web import create_app

from tests.fakes import FRIEND_ID, USER_ID, FakeOpenID, FakeSteam, entries

PROTECTED = [
    "/dashboard",
    "/api/me",
    "/api/friends",
    "/api/games",
    "/api/common-games?friendId=1",
    "/api/achievements?friendId=1&appId=10",
]


def make_settings(**overrides):
    values = {"steam_api_key": "FAKE_KEY", "session_secret": "test-secret"}
    values.update(overrides)
    return Settings(**values)


class WebTestCase(unittest.TestCase):

    def setUp(self):
        self.steam = FakeSteam()
        self.steam.profiles[USER_ID] = UserProfile(
            steam_id=USER_ID, display_name="alice", avatars=["a_small.jpg", "a_full.jpg"]
        )
        self.steam.profiles[FRIEND_ID] = UserProfile(
            steam_id=FRIEND_ID, display_name="bob", avatars=["b_small.jpg", "b_full.jpg"]
        )
        self.openid = FakeOpenID()
        self.app = create_app(make_settings(), steam=self.steam, openid=self.openid)
        self.client = TestClient(self.app)

    def sign_in(self):
        response = self.client.get(
            "/auth/login/return",
            params={"openid.mode": "id_res"},
            follow_redirects=False,
        )
        self.assertEqual(response.status_code, 302)
        self.assertEqual(response.headers["location"], "/dashboard")
        return response


class TestSignIn(WebTestCase):

    def test_landing_page_is_public(self):
        response = self.client.get("/")
        self.assertEqual(response.status_code, 200)
        self.assertIn("/auth/login", response.text)

    def test_login_redirects_to_steam(self):
        for path in ("/auth/login", "/auth/steam"):
            response = self.client.get(path, follow_redirects=False)
            self.assertEqual(response.status_code, 302)
            self.assertTrue(response.headers["location"].startswith("https://steamcommunity.com/openid/login"))

    def test_callback_creates_session(self):
        self.sign_in()
        self.assertEqual(self.openid.received["openid.mode"], "id_res")
        self.assertEqual(len(self.app.state.sessions), 1)

        response = self.client.get("/dashboard")
        self.assertEqual(response.status_code, 200)

    def test_rejected_assertion_goes_home(self):
        self.openid.steam_id = None
        response = self.client.get("/auth/login/return", follow_redirects=False)
        self.assertEqual(response.status_code, 302)
        self.assertEqual(response.headers["location"], "/")
        self.assertEqual(len(self.app.state.sessions), 0)

    def test_profile_failure_goes_home(self):
        del self.steam.profiles[USER_ID]
        response = self.client.get("/auth/login/return", follow_redirects=False)
        self.assertEqual(response.headers["location"], "/")

    def test_logout(self):
        self.sign_in()
        response = self.client.get("/logout", follow_redirects=False)
        self.assertEqual(response.status_code, 302)
        self.assertEqual(response.headers["location"], "/")
        self.assertEqual(len(self.app.state.sessions), 0)

        response = self.client.get("/api/me", follow_redirects=False)
        self.assertEqual(response.status_code, 302)

    def test_logout_without_session(self):
        response = self.client.get("/logout", follow_redirects=False)
        self.assertEqual(response.headers["location"], "/")


class TestAuthenticationGate(WebTestCase):

    def test_unauthenticated_requests_redirect_home(self):
        for path in PROTECTED:
            with self.subTest(path=path):
                response = self.client.get(path, follow_redirects=False)
                self.assertEqual(response.status_code, 302)
                self.assertEqual(response.headers["location"], "/")
                self.assertNotIn("application/json", response.headers.get("content-type", ""))

    def test_forged_cookie_redirects_home(self):
        self.client.cookies.set("playmates_session", "forged")
        response = self.client.get("/api/me", follow_redirects=False)
        self.assertEqual(response.status_code, 302)


class TestApi(WebTestCase):

    def setUp(self):
        super().setUp()
        self.sign_in()

    def test_me(self):
        response = self.client.get("/api/me")
        self.assertEqual(response.json(), {"username": "alice", "steamid": USER_ID, "avatar": "a_full.jpg"})

    def test_friends(self):
        self.steam.friends[USER_ID] = [FRIEND_ID]
        response = self.client.get("/api/friends")
        self.assertEqual(response.json(), [{"username": "bob", "steamid": FRIEND_ID, "avatar": "b_full.jpg"}])

    def test_friends_provider_failure(self):
        response = self.client.get("/api/friends")
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"error": "Failed to get friends"})

    def test_games(self):
        self.steam.owned[USER_ID] = [Game(app_id=620, name="Portal 2")]
        response = self.client.get("/api/games")
        self.assertEqual(response.json(), [{"appid": 620, "name": "Portal 2"}])

    def test_common_games_requires_friend_id(self):
        response = self.client.get("/api/common-games")
        self.assertEqual(response.status_code, 400)
        self.assertIn("error", response.json())

    def test_common_games(self):
        self.steam.owned[USER_ID] = [Game(app_id=10, name="A"), Game(app_id=20, name="B"), Game(app_id=30, name="C")]
        self.steam.owned[FRIEND_ID] = [Game(app_id=20, name="B"), Game(app_id=30, name="C")]
        self.steam.schemas = {20: ["B1"], 30: ["C1"]}
        self.steam.broken_schemas.add(20)

        response = self.client.get("/api/common-games", params={"friendId": FRIEND_ID})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), [{"appid": 30, "name": "C"}])

    def test_achievements(self):
        self.steam.progress[(USER_ID, 10)] = entries(25, 50)
        self.steam.progress[(FRIEND_ID, 10)] = entries(10, 50)

        response = self.client.get("/api/achievements", params={"friendId": FRIEND_ID, "appId": "10"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.json(),
            {"total": 50, "user": {"unlocked": 25, "percentage": 50}, "friend": {"unlocked": 10, "percentage": 20}},
        )

    def test_achievements_missing_params(self):
        for params in ({}, {"friendId": FRIEND_ID}, {"appId": "10"}):
            with self.subTest(params=params):
                response = self.client.get("/api/achievements", params=params)
                self.assertEqual(response.status_code, 400)
                self.assertEqual(response.json(), {"error": "Friend ID and App ID required"})

    def test_achievements_bad_app_id(self):
        for app_id in ("portal", "²", "٣", "0", "-5", "1.5"):
            with self.subTest(app_id=app_id):
                response = self.client.get("/api/achievements", params={"friendId": FRIEND_ID, "appId": app_id})
                self.assertEqual(response.status_code, 400)
                self.assertIn("error", response.json())

    def test_achievements_friend_unavailable(self):
        self.steam.progress[(USER_ID, 10)] = entries(1, 5)
        response = self.client.get("/api/achievements", params={"friendId": FRIEND_ID, "appId": "10"})
        self.assertEqual(response.status_code, 400)
        self.assertIn("friend's achievements", response.json()["error"])

    def test_achievements_no_achievements(self):
        self.steam.progress[(USER_ID, 10)] = []
        self.steam.progress[(FRIEND_ID, 10)] = []
        response = self.client.get("/api/achievements", params={"friendId": FRIEND_ID, "appId": "10"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "This game has no achievements."})


if __name__ == "__main__":
    unittest.main()
