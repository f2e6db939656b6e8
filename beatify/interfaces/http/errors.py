"""JSON error responses for catalog and library failures."""

from __future__ import annotations

import logging

from flask import jsonify

from beatify.domain.library import LibraryError
from beatify.errors import CatalogError

logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    "configuration_error": 503,
    "auth_error": 401,
    "rate_limited": 429,
    "upstream_request_error": 400,
    "not_found": 404,
    "upstream_unavailable": 502,
}


def status_for(error: CatalogError) -> int:
    return STATUS_BY_KIND.get(error.kind, 502)


def register_error_handlers(app) -> None:
    @app.errorhandler(CatalogError)
    def _catalog_error(error: CatalogError):
        status = status_for(error)
        logger.warning("Catalog request failed (%s, %s): %s", error.kind, error.provider, error.message)
        body = {"success": False, **error.to_dict()}
        response = jsonify(body)
        retry_after = getattr(error, "retry_after", None)
        if retry_after:
            response.headers["Retry-After"] = str(retry_after)
        return response, status

    @app.errorhandler(LibraryError)
    def _library_error(error: LibraryError):
        return jsonify({"success": False, "error": error.code, "message": str(error)}), error.status


__all__ = ["register_error_handlers", "status_for", "STATUS_BY_KIND"]
