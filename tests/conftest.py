"""Shared fixtures and fakes for the test suite."""

import asyncio
from typing import Callable, Dict, List, Optional, Union

import httpx
import pytest

from github_finder.api import GitHubClient
from github_finder.cache import ExpiringUserCache
from github_finder.config import Settings
from github_finder.models import UserProfile, UserSummary
from github_finder.service import build_http_client

API_BASE = "https://api.github.test"


# ============================================================================
# Payload builders
# ============================================================================

def profile_payload(login: str = "octocat", **overrides) -> dict:
    payload = {
        "login": login,
        "id": 583231,
        "avatar_url": f"https://avatars.example.com/{login}",
        "name": "The Octocat",
        "bio": "I am the mascot of GitHub.",
        "followers": 3939,
        "following": 9,
        "followers_url": f"{API_BASE}/users/{login}/followers",
        "following_url": f"{API_BASE}/users/{login}/following{{/other_user}}",
        "public_repos": 8,
    }
    payload.update(overrides)
    return payload


def summary_payload(login: str) -> dict:
    return {"login": login, "avatar_url": f"https://avatars.example.com/{login}", "type": "User"}


def summaries(*logins: str) -> List[UserSummary]:
    return [UserSummary(**summary_payload(login)) for login in logins]


# ============================================================================
# Fakes
# ============================================================================

class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


Route = Union[httpx.Response, Callable[[httpx.Request], httpx.Response]]


class FakeGitHubAPI:
    """Canned GitHub endpoints served through ``httpx.MockTransport``.

    Unknown paths answer 404 with GitHub's JSON error body.
    """

    def __init__(self):
        self.routes: Dict[str, Route] = {}
        self.requests: List[httpx.Request] = []

    def add(self, path: str, route: Route) -> None:
        self.routes[path] = route

    def add_json(self, path: str, payload, status_code: int = 200) -> None:
        self.routes[path] = httpx.Response(status_code, json=payload)

    def calls_to(self, path: str) -> int:
        return sum(1 for request in self.requests if request.url.path == path)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, json={"message": "Not Found"})
        if callable(route):
            return route(request)
        return route


class FakeGitHubClient:
    """In-memory stand-in for ``GitHubClient`` with per-call gates.

    A gate is an ``asyncio.Event`` that holds the matching call until set, so
    tests can decide in which order completions land.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self.pages: Dict[int, Union[List[UserSummary], Exception]] = {}
        self.page_gates: Dict[int, asyncio.Event] = {}
        self.list_calls: List[int] = []
        self.search_results: Dict[str, Union[List[UserSummary], Exception]] = {}
        self.search_gates: Dict[str, asyncio.Event] = {}
        self.search_calls: List[str] = []

    async def fetch_user_list(self, profile, relationship, page, per_page=None):
        self.list_calls.append(page)
        gate = self.page_gates.get(page)
        if gate is not None:
            await gate.wait()
        result = self.pages.get(page, [])
        if isinstance(result, Exception):
            raise result
        return list(result)

    async def search_users(self, query):
        self.search_calls.append(query)
        gate = self.search_gates.get(query)
        if gate is not None:
            await gate.wait()
        result = self.search_results.get(query, [])
        if isinstance(result, Exception):
            raise result
        return list(result)


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def settings() -> Settings:
    return Settings(
        api_base_url=API_BASE,
        cache_ttl_seconds=300,
        per_page=30,
        search_per_page=30,
        search_debounce_seconds=0.3,
        request_timeout_seconds=5.0,
        user_agent="github-finder-tests",
        log_level="DEBUG",
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock, settings) -> ExpiringUserCache:
    return ExpiringUserCache(settings.cache_ttl_seconds, clock=clock)


@pytest.fixture
def api() -> FakeGitHubAPI:
    api = FakeGitHubAPI()
    api.add_json("/users/octocat", profile_payload("octocat"))
    return api


@pytest.fixture
def client(api, cache, settings) -> GitHubClient:
    http = build_http_client(settings=settings, transport=api.transport())
    return GitHubClient(http, cache=cache, settings=settings)


@pytest.fixture
def fake_client(settings) -> FakeGitHubClient:
    return FakeGitHubClient(settings)


@pytest.fixture
def octocat() -> UserProfile:
    return UserProfile(**profile_payload("octocat"))


def logins(rows: Optional[List[UserSummary]]) -> List[str]:
    return [row.login for row in rows or []]
