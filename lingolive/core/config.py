"""Application configuration via pydantic-settings.

All values loaded from the .env file at the project root.
The .env file takes precedence over OS-level environment variables
so stale system env vars never shadow the project config.
"""

from pathlib import Path
from typing import Tuple, Type

from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from lingolive.services.language.normalizer import is_supported_language

# Resolve .env from project root (two levels up from this file: lingolive/core/config.py → project root)
_ENV_FILE = Path(__file__).resolve().parents[2] / ".env"
_LOCALES_DIR = Path(__file__).resolve().parents[1] / "locales"

DEV_JWT_SECRET = "dev-secret-key-change-in-production"


class Settings(BaseSettings):
    """Central application settings. .env file wins over OS env vars."""

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        """Override source priority: .env file > OS env vars > defaults."""
        return (init_settings, dotenv_settings, env_settings, file_secret_settings)

    # --- Auth ---
    jwt_secret_key: str = DEV_JWT_SECRET
    jwt_algorithm: str = "HS256"
    session_token_ttl_hours: int = 24
    # Comma-separated list, e.g. "PUBLIC_SITE_KEY_123,ACME_KEY"
    valid_site_keys: str = "PUBLIC_SITE_KEY_123"

    # --- CORS ---
    allowed_origins: str = (
        "http://localhost:3000,http://localhost:5173,http://127.0.0.1:5173"
    )

    # --- Languages ---
    agent_language: str = "en"
    default_language: str = "en"

    # --- Translation ---
    translation_cache_size: int = 2000
    translation_timeout_seconds: float = 10.0
    external_translation_enabled: bool = True
    libretranslate_url: str = "https://libretranslate.com/translate"
    libretranslate_api_key: str = ""
    google_web_translate_enabled: bool = True

    # --- Sessions ---
    session_max_age_hours: int = 24
    session_sweep_interval_minutes: int = 60

    # --- App ---
    app_env: str = "development"
    log_level: str = "INFO"
    locales_dir: str = str(_LOCALES_DIR)

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def site_keys(self) -> list[str]:
        return [k.strip() for k in self.valid_site_keys.split(",") if k.strip()]

    @property
    def origins(self) -> list[str]:
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]


def validate_settings(config: Settings) -> None:
    """Fail fast on configuration that must never reach production.

    Raises:
        ValueError: If a required secret is missing or left at its dev default,
            or a configured language is not supported.
    """
    if config.is_production and config.jwt_secret_key in ("", DEV_JWT_SECRET):
        raise ValueError("Missing required configuration: jwt_secret_key")
    if not config.site_keys:
        raise ValueError("Missing required configuration: valid_site_keys")
    for name in ("agent_language", "default_language"):
        if not is_supported_language(getattr(config, name)):
            raise ValueError(f"Unsupported language in configuration: {name}")


settings = Settings()
