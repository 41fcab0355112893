"""
Planotto Core - Configuration and settings.

CoreSettings contains only what the provider gateway needs.
Import limits and other kitchen settings live in planotto_kitchen.config.

Every credential is optional: a missing key routes the request to the
next fallback tier instead of failing start-up.
"""

from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CoreSettings(BaseSettings):
    """
    Core settings shared by all assist actions.

    Resolved once at start-up and passed explicitly into each client.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # OpenRouter (completion + vision)
    openrouter_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("openrouter_api_key", "openrouter_key"),
    )
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    openrouter_model: str = "openai/gpt-4o-mini"
    openrouter_vision_model: str = "openai/gpt-4o-mini"
    openrouter_temperature: float = 0.2
    openrouter_referer: str = "https://planotto.local"
    openrouter_title: str = "Planotto Assistant"

    # fal.ai OCR queue
    fal_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("fal_key", "fal_api_key"),
    )
    fal_ocr_endpoint: str = "https://queue.fal.run/fal-ai/got-ocr/v2"
    ocr_poll_attempts: int = 20
    ocr_poll_delay_ms: int = 1200

    # FusionBrain image generation (needs BOTH key and secret)
    fusionbrain_base_url: str = "https://api-key.fusionbrain.ai/key/api/v1"
    fusionbrain_api_key: str | None = None
    fusionbrain_secret_key: str | None = None
    fusionbrain_credentials: str | None = None  # "KEY:SECRET" shorthand
    image_poll_attempts: int = 15
    image_poll_delay_ms: int = 1500

    # Per-request network timeout for every provider call
    provider_timeout_seconds: float = 30.0

    # Application
    planotto_env: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # PLANOTTO_LOG_PROVIDER_CALLS=1 - write provider calls to provider_logs/ (dev only)
    planotto_log_provider_calls: bool = False

    @property
    def ocr_poll_delay(self) -> float:
        return self.ocr_poll_delay_ms / 1000

    @property
    def image_poll_delay(self) -> float:
        return self.image_poll_delay_ms / 1000

    def fusionbrain_key_pair(self) -> tuple[str, str] | None:
        """
        Resolve FusionBrain credentials.

        The combined "KEY:SECRET" setting wins when both halves are present;
        otherwise both separate settings are required.
        """
        combined = (self.fusionbrain_credentials or "").strip()
        if ":" in combined:
            api_key, secret_key = (part.strip() for part in combined.split(":", 1))
            if api_key and secret_key:
                return api_key, secret_key

        api_key = (self.fusionbrain_api_key or "").strip()
        secret_key = (self.fusionbrain_secret_key or "").strip()
        if api_key and secret_key:
            return api_key, secret_key
        return None

