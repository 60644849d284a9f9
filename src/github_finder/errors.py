"""
Typed failures raised by the remote access layer.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class GitHubFinderError(Exception):
    """Base exception for every failure an API operation can resolve to."""

    code = "GITHUB_FINDER_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message, "details": self.details}


class InvalidRequestError(GitHubFinderError):
    """The request could not be built (bad username, query or URL)."""

    code = "INVALID_REQUEST"


class TransportError(GitHubFinderError):
    """The network call itself failed."""

    code = "TRANSPORT"


class BadResponseError(GitHubFinderError):
    """The call completed but returned no body."""

    code = "BAD_RESPONSE"


class DecodeError(GitHubFinderError):
    """The body could not be parsed into the expected shape."""

    code = "DECODE"


__all__ = [
    "BadResponseError",
    "DecodeError",
    "GitHubFinderError",
    "InvalidRequestError",
    "TransportError",
]
