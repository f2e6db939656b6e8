import importlib

import pytest
from hypothesis import given, strategies as st


@pytest.mark.unit
def test_default_music_service_falls_back_to_spotify():
    import beatify.settings as settings

    assert settings.AppSettings(default_music_service="YouTube").default_music_service == "youtube"
    assert settings.AppSettings(default_music_service="napster").default_music_service == "spotify"
    assert settings.AppSettings(default_music_service=None).default_music_service == "spotify"


@pytest.mark.unit
def test_env_precedence_for_catalog_fields(monkeypatch):
    monkeypatch.setenv("DEFAULT_MUSIC_SERVICE", "soundcloud")
    monkeypatch.setenv("CATALOG_CACHE_TTL_SECONDS", "90")
    monkeypatch.setenv("YOUTUBE_MIN_INTERVAL_MS", "250")
    monkeypatch.setenv("SOUNDCLOUD_SCRAPE_CLIENT_ID", "off")
    monkeypatch.setenv("AGGREGATOR_MAX_WORKERS", "not-a-number")

    import config as _config
    importlib.reload(_config)
    import beatify.settings as settings
    importlib.reload(settings)

    try:
        s = settings.load_app_settings()
        assert s.default_music_service == _config.Config.DEFAULT_MUSIC_SERVICE == "soundcloud"
        assert s.cache_ttl_seconds == 90
        assert s.rate_limits_ms() == {"youtube": 250, "soundcloud": 200}
        assert s.soundcloud_scrape_client_id is False
        assert s.aggregator_max_workers == 8
    finally:
        monkeypatch.undo()
        importlib.reload(_config)
        importlib.reload(settings)


@pytest.mark.unit
def test_overrides_win_over_config():
    import beatify.settings as settings

    s = settings.load_app_settings({"aggregator_max_topup_artists": 3, "cache_maxsize": "64"})
    assert s.aggregator_max_topup_artists == 3
    assert s.cache_maxsize == 64


@pytest.mark.unit
@given(workers=st.integers(min_value=-100, max_value=1000))
def test_worker_count_is_bounded(workers):
    import beatify.settings as settings

    assert 1 <= settings.AppSettings(aggregator_max_workers=workers).aggregator_max_workers <= 32
