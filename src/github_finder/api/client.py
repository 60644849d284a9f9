from __future__ import annotations

import re
from typing import Any, Dict, List, Optional, Tuple, Type, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from github_finder.cache import ExpiringUserCache
from github_finder.config import Settings, get_settings
from github_finder.errors import (
    BadResponseError,
    DecodeError,
    InvalidRequestError,
    TransportError,
)
from github_finder.logging import get_logger
from github_finder.models import RelationshipType, SearchResultSet, UserProfile, UserSummary

LOGGER = get_logger(__name__)

URL_TEMPLATE_PLACEHOLDER = re.compile(r"\{[^}]*\}")

ModelT = TypeVar("ModelT", bound=BaseModel)

_SUMMARY_LIST = TypeAdapter(List[UserSummary])


def _percent_encode(value: str, *, what: str) -> str:
    try:
        return quote(value, safe="")
    except UnicodeEncodeError as exc:
        raise InvalidRequestError(
            f"{what} cannot be percent-encoded",
            details={what: value, "error": str(exc)},
        ) from exc


def strip_url_template(url: str) -> str:
    """Drop RFC 6570 placeholders such as ``{/other_user}`` from an API URL."""
    return URL_TEMPLATE_PLACEHOLDER.sub("", url)


class GitHubClient:
    """Stateless request/decode operations against the GitHub REST API.

    Only :meth:`fetch_user` touches the shared cache; relationship lists and
    search results always go to the network.
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        *,
        cache: ExpiringUserCache,
        settings: Optional[Settings] = None,
    ) -> None:
        self.http = http
        self.cache = cache
        self.settings = settings or get_settings()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def fetch_user(self, username: str, force_refresh: bool = False) -> UserProfile:
        """Return the profile for ``username``, from cache unless ``force_refresh``.

        The fetched profile is cached under its own ``login`` which may differ
        in case from ``username``.
        """
        if not force_refresh:
            cached = self.cache.get(username)
            if cached is not None:
                return cached

        if not username or not username.strip():
            raise InvalidRequestError("username must not be empty", details={"username": username})
        url = f"users/{_percent_encode(username, what='username')}"

        payload, status_code = await self._get_json(url)
        profile = self._decode(UserProfile, payload, url=url, status_code=status_code)
        self.cache.put(profile.login, profile)
        LOGGER.debug("Fetched profile %s (requested as %s)", profile.login, username)
        return profile

    async def fetch_user_list(
        self,
        profile: UserProfile,
        relationship: RelationshipType,
        page: int,
        per_page: Optional[int] = None,
    ) -> List[UserSummary]:
        """Return one page of the followers or following list of ``profile``."""
        relationship = RelationshipType(relationship)
        per_page = self.settings.per_page if per_page is None else per_page
        if page < 1 or per_page < 1:
            raise InvalidRequestError(
                "page and per_page must be positive",
                details={"page": page, "per_page": per_page},
            )

        if relationship is RelationshipType.FOLLOWERS:
            base_url = profile.followers_url
        else:
            base_url = strip_url_template(profile.following_url)

        payload, status_code = await self._get_json(base_url, params={"per_page": per_page, "page": page})
        try:
            users = _SUMMARY_LIST.validate_python(payload)
        except ValidationError as exc:
            raise DecodeError(
                f"Unexpected {relationship.value} list shape",
                details={"url": base_url, "page": page, "status_code": status_code, "errors": exc.errors(include_url=False)},
            ) from exc

        LOGGER.debug(
            "Fetched %d %s of %s (page=%d, per_page=%d)",
            len(users),
            relationship.value,
            profile.login,
            page,
            per_page,
        )
        return users

    async def search_users(self, query: str) -> List[UserSummary]:
        """Search users by login, name or bio. Results are not paginated further."""
        if not query or not query.strip():
            raise InvalidRequestError("search query must not be empty", details={"query": query})
        encoded = _percent_encode(query, what="query")
        url = f"search/users?q={encoded}&per_page={self.settings.search_per_page}"

        payload, status_code = await self._get_json(url)
        results = self._decode(SearchResultSet, payload, url=url, status_code=status_code)
        LOGGER.debug("Search for %r returned %d user(s)", query, len(results.items))
        return list(results.items)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Tuple[Any, int]:
        LOGGER.debug("GET %s params=%s", url, params)
        try:
            response = await self.http.get(url, params=params)
        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as exc:
            raise InvalidRequestError(f"Invalid request URL: {url}", details={"url": url, "error": str(exc)}) from exc
        except httpx.DecodingError as exc:
            raise DecodeError("Response body could not be decoded", details={"url": url, "error": str(exc)}) from exc
        except httpx.RequestError as exc:
            raise TransportError(f"Request to {url} failed: {exc}", details={"url": url, "error": str(exc)}) from exc

        if not response.is_success:
            LOGGER.warning("GET %s returned HTTP %d", response.request.url, response.status_code)

        if not response.content:
            raise BadResponseError(
                "Response contained no body",
                details={"url": str(response.request.url), "status_code": response.status_code},
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise DecodeError(
                "Response body is not valid JSON",
                details={"url": str(response.request.url), "status_code": response.status_code},
            ) from exc
        return payload, response.status_code

    def _decode(self, model: Type[ModelT], payload: Any, *, url: str, status_code: int) -> ModelT:
        try:
            return model.model_validate(payload)
        except ValidationError as exc:
            raise DecodeError(
                f"Unexpected {model.__name__} shape",
                details={"url": url, "status_code": status_code, "errors": exc.errors(include_url=False)},
            ) from exc


__all__ = ["GitHubClient", "strip_url_template"]
