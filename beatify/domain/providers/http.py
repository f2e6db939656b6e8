"""JSON GET helper for the requests-based providers."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from beatify.errors import UpstreamUnavailableError, error_for_status

logger = logging.getLogger(__name__)


def _retry_after(response: requests.Response) -> Optional[int]:
    value = response.headers.get("Retry-After")
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def get_json(
    session: requests.Session,
    url: str,
    params: Dict[str, Any],
    *,
    provider: str,
    timeout: float,
) -> Dict[str, Any]:
    """GET ``url`` and decode a JSON object, raising typed catalog errors."""
    try:
        response = session.get(url, params=params, timeout=timeout)
    except requests.RequestException as exc:
        logger.error("%s request to %s failed: %s", provider, url, exc)
        raise UpstreamUnavailableError(f"{provider} is unreachable: {exc}", provider=provider) from exc

    if response.status_code >= 400:
        try:
            details = response.json()
        except ValueError:
            details = None
        raise error_for_status(
            response.status_code,
            f"{provider} answered with status {response.status_code}",
            provider=provider,
            details=details,
            retry_after=_retry_after(response),
        )

    try:
        payload = response.json()
    except ValueError as exc:
        raise UpstreamUnavailableError(f"{provider} returned a non-JSON body", provider=provider) from exc
    if not isinstance(payload, dict):
        raise UpstreamUnavailableError(f"{provider} returned an unexpected payload", provider=provider)
    return payload


__all__ = ["get_json"]
