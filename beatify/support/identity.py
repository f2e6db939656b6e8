from __future__ import annotations

from flask_login import current_user


def current_user_id() -> str:
    """Id of the authenticated caller; only valid behind ``login_required``."""
    return str(current_user.get_id())


__all__ = ["current_user_id"]
