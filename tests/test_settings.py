from deck_backend.app.core.settings import Settings, get_settings


def test_settings_defaults():
    settings = get_settings()
    assert settings.app_name == "Outline Deck"
    assert isinstance(settings.secret_key, str) and settings.secret_key
    assert settings.database_url
    assert settings.default_slide_seconds == 60
    assert settings.min_slide_seconds == 10
    assert settings.on_time_tolerance_minutes == 1


def test_settings_singleton():
    assert get_settings() is get_settings()


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("DECK_DEFAULT_SLIDE_SECONDS", "90")
    monkeypatch.setenv("DECK_CORS_ORIGINS", "https://deck.example.com, http://localhost:3000")
    settings = Settings()
    assert settings.default_slide_seconds == 90
    assert settings.cors_origins == ["https://deck.example.com", "http://localhost:3000"]
