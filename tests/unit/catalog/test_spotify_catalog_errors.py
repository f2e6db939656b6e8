import json

import pytest
import requests
from requests.adapters import BaseAdapter
from requests.structures import CaseInsensitiveDict

from beatify.domain.catalog.spotify_catalog import SpotifyCatalog
from beatify.domain.catalog.token_manager import TOKEN_URL, TokenManager
from beatify.errors import NotFoundError, RateLimitError, UpstreamUnavailableError
from tests.support.stubs import FakeResponse, FakeSession


class CannedAdapter(BaseAdapter):
    """Answers every request with one fixed response, without touching the network."""

    def __init__(self, status, payload=None, headers=None):
        super().__init__()
        self.status = status
        self.payload = payload
        self.headers = headers or {}
        self.sent = []

    def send(self, request, **kwargs):
        self.sent.append(request)
        response = requests.Response()
        response.status_code = self.status
        response.reason = "canned"
        response.headers = CaseInsensitiveDict(self.headers)
        response._content = json.dumps(self.payload).encode() if self.payload is not None else b""
        response.encoding = "utf-8"
        response.url = request.url
        response.request = request
        return response

    def close(self):
        pass


def _catalog(adapter):
    token_session = FakeSession({
        TOKEN_URL: [FakeResponse(200, {"access_token": "tok", "expires_in": 3600})],
    })
    api_session = requests.Session()
    api_session.mount("https://", adapter)
    return SpotifyCatalog(TokenManager("cid", "secret", session=token_session), session=api_session)


@pytest.mark.unit
def test_server_error_keeps_its_status_instead_of_looking_like_a_rate_limit():
    adapter = CannedAdapter(503, {"error": {"status": 503, "message": "Service unavailable"}})
    catalog = _catalog(adapter)

    with pytest.raises(UpstreamUnavailableError) as excinfo:
        catalog.artist("abc")

    assert excinfo.value.kind == "upstream_unavailable"
    assert excinfo.value.status == 503
    assert excinfo.value.provider == "spotify"
    assert len(adapter.sent) == 1
    assert adapter.sent[0].headers["Authorization"] == "Bearer tok"


@pytest.mark.unit
def test_rate_limit_carries_retry_after_from_the_response():
    adapter = CannedAdapter(429, {"error": {"status": 429, "message": "Too many"}}, {"Retry-After": "7"})
    catalog = _catalog(adapter)

    with pytest.raises(RateLimitError) as excinfo:
        catalog.artist_top_tracks("abc")

    assert excinfo.value.kind == "rate_limited"
    assert excinfo.value.retry_after == 7
    assert len(adapter.sent) == 1


@pytest.mark.unit
def test_missing_artist_maps_to_not_found_even_without_a_json_body():
    catalog = _catalog(CannedAdapter(404))

    with pytest.raises(NotFoundError):
        catalog.artist("missing")
