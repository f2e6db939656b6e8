import pytest

from beatify.domain.catalog.embed import build_embed, parse_spotify_input
from beatify.errors import (
    AuthError,
    ConfigurationError,
    NotFoundError,
    RateLimitError,
    UpstreamRequestError,
    UpstreamUnavailableError,
    error_for_status,
)
from beatify.interfaces.http.errors import status_for


@pytest.mark.unit
@pytest.mark.parametrize(
    "status,error_cls",
    [
        (400, UpstreamRequestError),
        (401, AuthError),
        (403, AuthError),
        (404, NotFoundError),
        (429, RateLimitError),
        (500, UpstreamUnavailableError),
        (None, UpstreamUnavailableError),
    ],
)
def test_error_for_status(status, error_cls):
    error = error_for_status(status, "boom", provider="spotify")
    assert type(error) is error_cls
    assert error.to_dict() == {"error": error.kind, "message": "boom", "provider": "spotify"}


@pytest.mark.unit
@pytest.mark.parametrize(
    "error,status",
    [
        (ConfigurationError("x"), 503),
        (AuthError("x"), 401),
        (RateLimitError("x", retry_after=2), 429),
        (UpstreamRequestError("x"), 400),
        (NotFoundError("x"), 404),
        (UpstreamUnavailableError("x"), 502),
    ],
)
def test_http_status_for_each_error_kind(error, status):
    assert status_for(error) == status


@pytest.mark.unit
@pytest.mark.parametrize(
    "value,expected",
    [
        ("https://open.spotify.com/track/4uLU6hMCjMI75M1A2tKUQC?si=abc", ("track", "4uLU6hMCjMI75M1A2tKUQC")),
        ("https://open.spotify.com/intl-de/album/1DFixLWuPkv3KT3TnV35m3", ("album", "1DFixLWuPkv3KT3TnV35m3")),
        ("spotify:playlist:37i9dQZF1DXcBWIGoYBM5M", ("playlist", "37i9dQZF1DXcBWIGoYBM5M")),
        ("  4uLU6hMCjMI75M1A2tKUQC ", ("track", "4uLU6hMCjMI75M1A2tKUQC")),
    ],
)
def test_parse_spotify_input(value, expected):
    assert parse_spotify_input(value) == expected


@pytest.mark.unit
def test_build_embed_and_empty_input():
    embed = build_embed("spotify:artist:abc123")
    assert embed["embed_url"] == "https://open.spotify.com/embed/artist/abc123"
    assert 'src="https://open.spotify.com/embed/artist/abc123"' in embed["html"]
    with pytest.raises(ValueError):
        parse_spotify_input("   ")


@pytest.mark.unit
@pytest.mark.parametrize(
    "value",
    ['"><script>alert(1)</script>', "abc def", "https://example.com/track/abc", "spotify:show:abc"],
)
def test_parse_spotify_input_rejects_anything_but_spotify_ids(value):
    with pytest.raises(ValueError):
        parse_spotify_input(value)


@pytest.mark.unit
def test_embed_html_only_carries_a_plain_embed_url():
    embed = build_embed("https://open.spotify.com/track/4uLU6hMCjMI75M1A2tKUQC?si=x\"><b>")
    assert embed["id"] == "4uLU6hMCjMI75M1A2tKUQC"
    assert "<b>" not in embed["html"]
    assert 'src="https://open.spotify.com/embed/track/4uLU6hMCjMI75M1A2tKUQC"' in embed["html"]
