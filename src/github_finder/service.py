from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Optional

import httpx

from github_finder.api import GitHubClient
from github_finder.cache import ExpiringUserCache, MemoryPressureSignal
from github_finder.config import Settings, get_settings
from github_finder.coordinators import ProfileCoordinator, RelationshipListCoordinator
from github_finder.coordinators.relationship_list import ErrorCallback
from github_finder.logging import get_logger
from github_finder.models import RelationshipType, UserProfile

LOGGER = get_logger(__name__)

GITHUB_JSON = "application/vnd.github+json"


def build_http_client(
    *,
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """Instantiate an async HTTP client pointed at the configured API."""
    conf = settings or get_settings()
    return httpx.AsyncClient(
        base_url=conf.api_base_url,
        timeout=conf.request_timeout_seconds,
        headers={"Accept": GITHUB_JSON, "User-Agent": conf.user_agent},
        follow_redirects=True,
        transport=transport,
    )


@dataclass
class UserDirectory:
    """Process-wide services: one cache, one HTTP client, one API client."""

    settings: Settings
    cache: ExpiringUserCache
    memory_pressure: MemoryPressureSignal
    http: httpx.AsyncClient
    client: GitHubClient

    def profile(self, username: str) -> ProfileCoordinator:
        return ProfileCoordinator(self.client, username)

    def relationship_list(
        self,
        profile: UserProfile,
        relationship: RelationshipType,
        *,
        on_error: Optional[ErrorCallback] = None,
    ) -> RelationshipListCoordinator:
        return RelationshipListCoordinator(
            self.client,
            profile,
            relationship,
            settings=self.settings,
            on_error=on_error,
        )


@asynccontextmanager
async def open_directory(
    settings: Optional[Settings] = None,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    memory_pressure: Optional[MemoryPressureSignal] = None,
) -> AsyncIterator[UserDirectory]:
    """Wire the shared services for the lifetime of the host application.

    The cache stays subscribed to ``memory_pressure`` until the block exits.
    """
    conf = settings or get_settings()
    signal = memory_pressure if memory_pressure is not None else MemoryPressureSignal()
    cache = ExpiringUserCache(conf.cache_ttl_seconds)
    cache.attach(signal)
    http = build_http_client(settings=conf, transport=transport)
    directory = UserDirectory(
        settings=conf,
        cache=cache,
        memory_pressure=signal,
        http=http,
        client=GitHubClient(http, cache=cache, settings=conf),
    )
    LOGGER.debug("Opened user directory against %s", conf.api_base_url)
    try:
        yield directory
    finally:
        cache.detach(signal)
        cache.clear()
        await http.aclose()
        LOGGER.debug("Closed user directory")


__all__ = ["UserDirectory", "build_http_client", "open_directory"]
