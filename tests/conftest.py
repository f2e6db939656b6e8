import os
import random
import sys
from pathlib import Path

import pytest

# Ensure project root is on sys.path so 'app', 'config' and 'beatify' import correctly
_TESTS_DIR = os.path.dirname(__file__)
_ROOT_DIR = os.path.abspath(os.path.join(_TESTS_DIR, os.pardir))
if _ROOT_DIR not in sys.path:
    sys.path.insert(0, _ROOT_DIR)

from tests.support import factories as test_factories
from tests.support import stubs as test_stubs

USER_HEADERS = {"X-User-Id": "user-1"}


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch, tmp_path_factory):
    """Ensure a clean env for tests with per-test sqlite files."""
    db_dir = tmp_path_factory.mktemp("db")
    db_path = Path(db_dir) / "test.sqlite"
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{db_path.as_posix()}")
    monkeypatch.setenv("SPOTIPY_CLIENT_ID", "test-client-id")
    monkeypatch.setenv("SPOTIPY_CLIENT_SECRET", "test-client-secret")
    monkeypatch.delenv("YOUTUBE_API_KEY", raising=False)
    monkeypatch.delenv("SOUNDCLOUD_CLIENT_ID", raising=False)
    yield str(db_path)


@pytest.fixture
def settings():
    from beatify.settings import load_app_settings

    return load_app_settings({"soundcloud_scrape_client_id": False, "youtube_min_interval_ms": 0})


@pytest.fixture
def spotipy_stub():
    return test_stubs.SpotipyCatalogStub()


@pytest.fixture
def http_session():
    return test_stubs.FakeSession()


@pytest.fixture
def spotify_provider(settings, spotipy_stub):
    from beatify.domain.providers import build_spotify_provider

    return build_spotify_provider(
        settings,
        client_id="cid",
        client_secret="secret",
        spotify_client=spotipy_stub,
        rng=random.Random(7),
    )


@pytest.fixture
def provider_registry(settings, spotify_provider, http_session):
    from beatify.domain.providers import ProviderRegistry, SoundCloudProvider, YouTubeProvider

    return ProviderRegistry([
        spotify_provider,
        YouTubeProvider(session=http_session),
        SoundCloudProvider(scrape_client_id=False, session=http_session),
    ])


@pytest.fixture
def app(_isolate_env, provider_registry):
    import app as app_module

    application = app_module.create_app(
        {"TESTING": True, "SQLALCHEMY_DATABASE_URI": f"sqlite:///{_isolate_env}"},
        provider_registry=provider_registry,
    )
    yield application


@pytest.fixture
def app_context(app):
    with app.app_context():
        yield app


@pytest.fixture
def db_session(app_context):
    from beatify.database.db_manager import db

    test_factories.set_session(db.session)
    try:
        yield db.session
    finally:
        db.session.rollback()
        db.session.remove()
        test_factories.reset_session()


@pytest.fixture
def factories(db_session):
    yield test_factories


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers():
    return dict(USER_HEADERS)
