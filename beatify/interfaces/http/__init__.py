"""HTTP surface: blueprints and error handlers."""

from .errors import register_error_handlers  # noqa: F401
