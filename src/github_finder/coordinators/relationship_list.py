from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Awaitable, Callable, List, Optional, Set

from github_finder.api import GitHubClient
from github_finder.config import Settings
from github_finder.coordinators.debounce import Debouncer
from github_finder.errors import GitHubFinderError
from github_finder.logging import get_logger
from github_finder.models import RelationshipType, UserProfile, UserSummary

LOGGER = get_logger(__name__)

ErrorCallback = Callable[[GitHubFinderError], None]


@dataclass
class RelationshipListState:
    rows: List[UserSummary] = field(default_factory=list)
    current_page: int = 1
    is_loading_more: bool = False
    can_load_more: bool = True
    is_searching: bool = False
    search_rows: List[UserSummary] = field(default_factory=list)
    search_text: str = ""
    last_error: Optional[GitHubFinderError] = None

    @property
    def displayed_rows(self) -> List[UserSummary]:
        return self.search_rows if self.is_searching else self.rows


class RelationshipListCoordinator:
    """Pagination and search state for one followers/following list.

    All methods must be called from the event loop that owns the coordinator;
    network calls run as tasks on that loop so their completions never race
    with each other. Page completions carry the generation they were issued
    in and are dropped once a refresh has started a newer one.
    """

    def __init__(
        self,
        client: GitHubClient,
        profile: UserProfile,
        relationship: RelationshipType,
        *,
        settings: Optional[Settings] = None,
        on_error: Optional[ErrorCallback] = None,
    ) -> None:
        self.client = client
        self.profile = profile
        self.relationship = RelationshipType(relationship)
        self.settings = settings or client.settings
        self.on_error = on_error
        self.state = RelationshipListState()

        self._generation = 0
        self._in_flight = 0
        self._search_generation = 0
        self._closed = False
        self._tasks: Set[asyncio.Task] = set()
        self._debouncer: Debouncer[str] = Debouncer(self.settings.search_debounce_seconds, self.search_now)

    @property
    def displayed_rows(self) -> List[UserSummary]:
        return self.state.displayed_rows

    @property
    def closed(self) -> bool:
        return self._closed

    # ------------------------------------------------------------------
    # Pagination
    # ------------------------------------------------------------------

    def start(self) -> Optional[asyncio.Task]:
        """Fetch the current page if nothing has been loaded yet."""
        if self._closed or self.state.rows or self.state.is_searching:
            return None
        return self.fetch_page(self.state.current_page)

    def row_became_visible(self, login: str) -> Optional[asyncio.Task]:
        """Load the next page when the last displayed list row is shown."""
        if self.state.is_searching:
            return None
        displayed = self.displayed_rows
        if not displayed or displayed[-1].login != login:
            return None
        return self.load_more()

    def load_more(self) -> Optional[asyncio.Task]:
        state = self.state
        if self._closed or state.is_searching or state.is_loading_more or not state.can_load_more:
            return None
        state.current_page += 1
        return self.fetch_page(state.current_page)

    def refresh(self) -> Optional[asyncio.Task]:
        """Start over from page 1, superseding every in-flight page fetch."""
        if self._closed:
            return None
        self._generation += 1
        self._in_flight = 0
        state = self.state
        state.current_page = 1
        state.rows = []
        state.can_load_more = True
        state.is_loading_more = False
        LOGGER.debug("Refreshing %s of %s (generation=%d)", self.relationship.value, self.profile.login, self._generation)
        return self.fetch_page(1)

    def fetch_page(self, page: int) -> asyncio.Task:
        """Issue a fetch for ``page`` in the current generation."""
        self._in_flight += 1
        self.state.is_loading_more = True
        return self._spawn(self._run_page_fetch(page, self._generation))

    async def _run_page_fetch(self, page: int, generation: int) -> None:
        error: Optional[GitHubFinderError] = None
        users: List[UserSummary] = []
        try:
            users = await self.client.fetch_user_list(self.profile, self.relationship, page)
        except GitHubFinderError as exc:
            error = exc

        if self._closed or generation != self._generation:
            LOGGER.debug("Discarding stale page %d of %s (generation %d)", page, self.profile.login, generation)
            return

        self._in_flight = max(0, self._in_flight - 1)
        self.state.is_loading_more = self._in_flight > 0

        if error is not None:
            self.state.can_load_more = False
            self._report(error, f"Failed to load {self.relationship.value} page {page} for {self.profile.login}")
            return

        self._merge_page(users)

    def _merge_page(self, users: List[UserSummary]) -> None:
        known = {row.login for row in self.state.rows}
        unique: List[UserSummary] = []
        for user in users:
            if user.login not in known:
                known.add(user.login)
                unique.append(user)
        self.state.rows.extend(unique)
        self.state.can_load_more = bool(unique)
        LOGGER.debug(
            "Merged %d new %s row(s) for %s (%d total)",
            len(unique),
            self.relationship.value,
            self.profile.login,
            len(self.state.rows),
        )

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def update_search_text(self, text: str) -> None:
        """Feed a raw keystroke; the search runs once typing pauses."""
        if self._closed:
            return
        self.state.search_text = text
        self._debouncer.submit(text)

    def search_now(self, text: str) -> Optional[asyncio.Task]:
        """Apply a search query immediately, bypassing the debounce window."""
        if self._closed:
            return None
        self._search_generation += 1
        query = text.strip()
        if not query:
            self.state.is_searching = False
            self.state.search_rows = []
            return None

        self.state.is_searching = True
        return self._spawn(self._run_search(query, self._search_generation))

    async def _run_search(self, query: str, generation: int) -> None:
        try:
            results = await self.client.search_users(query)
        except GitHubFinderError as exc:
            if self._is_current_search(generation):
                self.state.search_rows = []
                self._report(exc, f"Search for {query!r} failed")
            return

        if self._is_current_search(generation):
            self.state.search_rows = list(results)

    def _is_current_search(self, generation: int) -> bool:
        return not self._closed and generation == self._search_generation

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Stop pending searches; completions arriving later are ignored."""
        if self._closed:
            return
        self._closed = True
        self._debouncer.cancel()
        LOGGER.debug("Closed %s coordinator for %s", self.relationship.value, self.profile.login)

    async def drain(self) -> None:
        """Wait until every task spawned so far, and any they spawn, has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    def _spawn(self, coro: Awaitable[None]) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def _report(self, error: GitHubFinderError, context: str) -> None:
        self.state.last_error = error
        LOGGER.warning("%s: %s", context, error)
        if self.on_error is None:
            return
        try:
            self.on_error(error)
        except Exception:  # noqa: BLE001
            LOGGER.exception("Error callback %r failed", self.on_error)


__all__ = ["RelationshipListCoordinator", "RelationshipListState"]
