"""
Application configuration via pydantic-settings.

Loads values from .env file with sensible defaults for local development.
Use ``get_settings()`` to obtain the cached singleton instance.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """SongScout settings loaded from environment / .env file.

    All settings can be overridden via environment variables or a `.env` file.
    Field names map directly to env var names (case-insensitive).

    Attributes:
        api_url: Base URL of the song retrieval service.
        http_timeout: Per-request timeout in seconds; ``None`` disables it.
        enrichment_max_attempts: Attempts per song detail fetch on transport errors.
        recording_filename: File name given to microphone recordings.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Silently ignore unrecognized env vars
    )

    # --- Retrieval service ---
    api_url: str = "http://localhost:8000"
    http_timeout: float | None = None  # Left to the transport layer by default

    # Song detail lookups are idempotent GETs, so transient failures are retried
    enrichment_max_attempts: int = 2
    enrichment_retry_wait: float = 0.5  # Backoff multiplier in seconds

    # --- Capture ---
    capture_device: str | None = None  # PortAudio device name or index; None = default input
    recording_filename: str = "recording.wav"

    # --- Storage ---
    scratch_dir: str = ""  # Playback scratch files; empty = system temp dir
    downloads_dir: str = "data/downloads"

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
