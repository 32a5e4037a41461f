import os

# Keep test runs from creating a log file in the working directory.
os.environ["LOG_FILE"] = ""

import pytest
import requests

from config.settings import Settings


class FakeResponse:
    def __init__(self, payload=None, status_code=200, reason="OK", headers=None, invalid_json=False):
        self._payload = payload
        self.status_code = status_code
        self.reason = reason
        self.headers = headers or {"x-requests-remaining": "480", "x-requests-used": "20"}
        self._invalid_json = invalid_json

    def json(self):
        if self._invalid_json:
            raise ValueError("No JSON object could be decoded")
        return self._payload


def make_event(event_id, bookmakers, commence_time="2025-09-01T18:00:00Z"):
    return {
        "id": event_id,
        "sport_key": "tennis_atp_us_open",
        "commence_time": commence_time,
        "bookmakers": bookmakers,
    }


def h2h_bookmaker(title, prices, key=None):
    return {
        "key": key or title.lower().replace(" ", "_"),
        "title": title,
        "markets": [{
            "key": "h2h",
            "outcomes": [{"name": name, "price": price} for name, price in prices],
        }],
    }


CATALOG = [
    {"key": "tennis_atp_us_open", "group": "Tennis", "title": "ATP US Open", "details": "Men's Singles", "active": True},
    {"key": "tennis_wta_us_open", "group": "Tennis", "title": "WTA US Open", "details": "Women's Singles", "active": True},
    {"key": "tennis_atp_wimbledon", "group": "Tennis", "title": "ATP Wimbledon", "details": "Men's Singles", "active": False},
    {"key": "soccer_epl", "group": "Soccer", "title": "EPL", "details": "Premier League", "active": True},
]


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        ODDS_API_KEY="test-key",
        REGION="eu",
        REGIONS="eu",
        LOG_FILE="",
    )


@pytest.fixture
def fake_session(mocker):
    """
    A mocked requests.Session routed by URL path.

    Set session.routes[path] to a FakeResponse or an exception instance.
    Unrouted paths answer 404.
    """
    session = mocker.Mock(spec=requests.Session)
    session.routes = {}

    def get(url, params=None, timeout=None):
        for path, answer in session.routes.items():
            if url.endswith(path):
                if isinstance(answer, Exception):
                    raise answer
                return answer
        return FakeResponse(payload={"message": "Unknown sport"}, status_code=404, reason="Not Found")

    session.get.side_effect = get
    return session
