"""Spotify embed player helpers."""

from __future__ import annotations

import html
import re
from typing import Dict, Tuple

_SPOTIFY_URL_RE = re.compile(r'spotify\.com/(?:intl-[a-z-]+/)?(track|album|playlist|artist)/([A-Za-z0-9]+)')
_SPOTIFY_URI_RE = re.compile(r'^spotify:(track|album|playlist|artist):([A-Za-z0-9]+)$')
_BARE_ID_RE = re.compile(r'^[A-Za-z0-9]+$')

EMBED_URL = "https://open.spotify.com/embed/{type}/{id}"
IFRAME = (
    '<iframe style="border-radius:12px" src="{src}" width="100%" height="380" '
    'frameBorder="0" allowtransparency="true" allow="encrypted-media"></iframe>'
)


def parse_spotify_input(value: str) -> Tuple[str, str]:
    """Return ``(type, id)`` from a Spotify URL, URI or bare track id.

    Raises ValueError for anything else.
    """
    value = (value or "").strip()
    if not value:
        raise ValueError("Missing input (Spotify URL or ID)")
    match = _SPOTIFY_URL_RE.search(value) or _SPOTIFY_URI_RE.match(value)
    if match:
        return match.group(1), match.group(2)
    if _BARE_ID_RE.match(value):
        return "track", value
    raise ValueError("Input is not a Spotify URL, URI or ID")


def build_embed(value: str) -> Dict[str, str]:
    item_type, item_id = parse_spotify_input(value)
    embed_url = EMBED_URL.format(type=item_type, id=item_id)
    return {
        'embed_url': embed_url,
        'html': IFRAME.format(src=html.escape(embed_url, quote=True)),
        'type': item_type,
        'id': item_id,
    }


__all__ = ["parse_spotify_input", "build_embed"]
