"""Typed errors raised by the catalog providers.

Every error carries a stable ``kind`` so the HTTP layer can map it to a status
code without inspecting messages, plus the ``provider`` that raised it.
"""

from __future__ import annotations

from typing import Any, Optional


class CatalogError(Exception):
    """Base class for upstream catalog failures."""

    kind = "catalog_error"

    def __init__(
        self,
        message: str,
        provider: Optional[str] = None,
        status: Optional[int] = None,
        details: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.provider = provider
        self.status = status
        self.details = details

    def to_dict(self) -> dict:
        return {
            "error": self.kind,
            "message": self.message,
            "provider": self.provider,
        }


class ConfigurationError(CatalogError):
    """Credentials for a provider are missing."""

    kind = "configuration_error"


class AuthError(CatalogError):
    """Credentials were rejected or no valid grant could be obtained."""

    kind = "auth_error"


class AuthConfigError(AuthError):
    """Token endpoint rejected the client credentials (401)."""


class AuthRequestError(AuthError):
    """Token endpoint rejected the grant request (400)."""


class AuthUnavailableError(AuthError):
    """Token endpoint could not be reached or answered unexpectedly."""


class RateLimitError(CatalogError):
    """Upstream throttled the request (429). Callers may retry later."""

    kind = "rate_limited"

    def __init__(self, message: str, retry_after: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.retry_after = retry_after


class UpstreamRequestError(CatalogError):
    """The request itself was malformed (400-class, client correctable)."""

    kind = "upstream_request_error"


class NotFoundError(CatalogError):
    """Requested artist or resource does not exist upstream."""

    kind = "not_found"


class UpstreamUnavailableError(CatalogError):
    """Network failure, upstream 5xx, or an unreadable payload."""

    kind = "upstream_unavailable"


# Failures that would hit every artist of a batch identically. These are never
# absorbed per item; they must reach the fallback orchestrator.
CREDENTIAL_ERRORS = (ConfigurationError, AuthError)


def error_for_status(
    status: Optional[int],
    message: str,
    provider: Optional[str] = None,
    details: Any = None,
    retry_after: Optional[int] = None,
) -> CatalogError:
    """Translate an upstream HTTP status into the matching error type."""
    kwargs = {"provider": provider, "status": status, "details": details}
    if status == 429:
        return RateLimitError(message, retry_after=retry_after, **kwargs)
    if status in (401, 403):
        return AuthError(message, **kwargs)
    if status == 404:
        return NotFoundError(message, **kwargs)
    if status is not None and 400 <= status < 500:
        return UpstreamRequestError(message, **kwargs)
    return UpstreamUnavailableError(message, **kwargs)


__all__ = [
    "CatalogError",
    "ConfigurationError",
    "AuthError",
    "AuthConfigError",
    "AuthRequestError",
    "AuthUnavailableError",
    "RateLimitError",
    "UpstreamRequestError",
    "NotFoundError",
    "UpstreamUnavailableError",
    "CREDENTIAL_ERRORS",
    "error_for_status",
]
