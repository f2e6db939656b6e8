#!/usr/bin/env python
"""Flask-Login integration trusting a gateway-supplied user id header."""

from __future__ import annotations

from flask import jsonify
from flask_login import LoginManager, UserMixin

USER_ID_HEADER = "X-User-Id"

login_manager = LoginManager()
login_manager.login_message = None


class ApiUser(UserMixin):
    """Identity resolved from the request; nothing is persisted for it."""

    def __init__(self, user_id: str) -> None:
        self.id = user_id

    def __repr__(self) -> str:
        return f"<ApiUser {self.id}>"


def init_auth(app):
    """Attach Flask-Login to the Flask app."""
    login_manager.init_app(app)

    @login_manager.request_loader
    def load_user_from_request(request) -> ApiUser | None:
        user_id = (request.headers.get(USER_ID_HEADER) or "").strip()
        if not user_id:
            return None
        return ApiUser(user_id)

    @login_manager.unauthorized_handler
    def _unauthorized():
        return jsonify({
            "success": False,
            "error": "authentication_required",
            "message": "Unauthorized. Please login and try again.",
        }), 401

    return login_manager


__all__ = ["login_manager", "init_auth", "ApiUser", "USER_ID_HEADER"]
