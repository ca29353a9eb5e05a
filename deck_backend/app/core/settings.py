import os


def _env(name: str, default: str) -> str:
    return os.getenv(f"DECK_{name}", default)


class Settings:
    def __init__(self):
        self.app_name = "Outline Deck"
        self.api_version = "1.0.0"
        self.environment = _env("ENVIRONMENT", "development")
        self.secret_key = _env("SECRET_KEY", "CHANGE_ME")
        self.SECRET_KEY = self.secret_key
        self.access_token_expire_minutes = int(_env("ACCESS_TOKEN_EXPIRE_MINUTES", "30"))
        self.ACCESS_TOKEN_EXPIRE_MINUTES = self.access_token_expire_minutes
        self.database_url = _env("DATABASE_URL", "sqlite:///./outline_deck.db")
        self.log_level = _env("LOG_LEVEL", "INFO")
        self.cors_origins = [
            origin.strip()
            for origin in _env("CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173").split(",")
            if origin.strip()
        ]
        # Presentation pacing
        self.default_slide_seconds = int(_env("DEFAULT_SLIDE_SECONDS", "60"))
        self.min_slide_seconds = int(_env("MIN_SLIDE_SECONDS", "10"))
        self.on_time_tolerance_minutes = float(_env("ON_TIME_TOLERANCE_MINUTES", "1"))


_settings_instance = None


def get_settings():
    """Return a singleton Settings instance."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
