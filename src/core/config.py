"""
Application configuration via pydantic-settings.

Loads values from .env file with sensible defaults for local development.
Use ``get_settings()`` to obtain the cached singleton instance.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Walkup Voice settings loaded from environment / .env file.

    All settings can be overridden via environment variables or a `.env` file.
    Field names map directly to env var names (case-insensitive).

    Attributes:
        api_base_url: Root URL of the voice backend (no trailing slash needed).
        speech_to_text_path: Path of the multipart voice-registration endpoint.
        text_to_speech_path: Path of the JSON text-to-speech endpoint.
        release_superseded_handles: Revoke a playback resource as soon as a
            newer one replaces it.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Silently ignore unrecognized env vars
    )

    # --- Voice backend ---
    api_base_url: str = "https://redfish-internal-definitely.ngrok-free.app"
    speech_to_text_path: str = "/integrations/speech-to-text"
    text_to_speech_path: str = "/integrations/text-to-speech"
    request_timeout: float = 30.0  # Seconds per request, no retries

    # --- Microphone capture ---
    sample_rate: int = 16000
    channels: int = 1
    stop_timeout: float = 10.0  # Max seconds to wait for the recorder stop notification

    # --- Playback ---
    release_superseded_handles: bool = True

    # --- Application ---
    log_level: str = "INFO"  # Python logging level


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings singleton.

    Uses ``functools.lru_cache`` so the .env file is read only once.
    Subsequent calls return the same ``Settings`` instance.

    Returns:
        Settings: The application-wide configuration object.
    """
    return Settings()
