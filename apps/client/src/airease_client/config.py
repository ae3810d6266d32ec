"""Client configuration via environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict

from airease_ml.retry import BackoffPolicy


class ClientSettings(BaseSettings):
    """Settings loaded from environment variables / .env file."""

    model_config = SettingsConfigDict(
        env_prefix="AIREASE_", env_file=".env", extra="ignore"
    )

    # Backend REST API
    api_base_url: str = "http://localhost:8000"
    api_timeout: float = 30.0
    api_token: str = ""

    # AI parsing (Anthropic)
    anthropic_api_key: str = ""
    anthropic_model: str = "claude-haiku-4-5"
    ai_max_tokens: int = 2048

    # AI retry policy: 1s, 2s, 4s (capped at 8s), 3 retries
    ai_retry_base_delay: float = 1.0
    ai_retry_max_delay: float = 8.0
    ai_max_retries: int = 3
    ai_truncation_attempts: int = 3

    # Departure auto-detection
    nearest_airport_radius_km: float = 150.0

    default_currency: str = "USD"

    @property
    def ai_backoff(self) -> BackoffPolicy:
        return BackoffPolicy(
            max_retries=self.ai_max_retries,
            base_delay=self.ai_retry_base_delay,
            max_delay=self.ai_retry_max_delay,
        )


settings = ClientSettings()
