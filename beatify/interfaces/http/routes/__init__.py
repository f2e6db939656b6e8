"""Route blueprints exposed via Flask."""

from .health import health_bp
from .library import library_bp
from .music import music_bp

__all__ = [
    "health_bp",
    "library_bp",
    "music_bp",
]
