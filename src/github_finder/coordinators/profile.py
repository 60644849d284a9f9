from __future__ import annotations

from typing import Optional

from github_finder.api import GitHubClient
from github_finder.errors import GitHubFinderError
from github_finder.logging import get_logger
from github_finder.models import UserProfile

LOGGER = get_logger(__name__)


class ProfileCoordinator:
    """State behind a single-profile view: the profile, a loading flag and the last error."""

    def __init__(self, client: GitHubClient, username: str) -> None:
        self.client = client
        self.username = username
        self.profile: Optional[UserProfile] = None
        self.is_loading = True
        self.error_message: Optional[str] = None

    async def load(self, force_refresh: bool = False) -> Optional[UserProfile]:
        try:
            profile = await self.client.fetch_user(self.username, force_refresh=force_refresh)
        except GitHubFinderError as exc:
            LOGGER.warning("Failed to load profile %s: %s", self.username, exc)
            self.error_message = exc.message
            return None
        finally:
            self.is_loading = False

        self.profile = profile
        self.error_message = None
        return profile

    async def refresh(self) -> Optional[UserProfile]:
        """Reload bypassing the cache; a failure keeps the profile already shown."""
        return await self.load(force_refresh=True)

    @property
    def visible_error(self) -> Optional[str]:
        if self.profile is not None:
            return None
        return self.error_message


__all__ = ["ProfileCoordinator"]
