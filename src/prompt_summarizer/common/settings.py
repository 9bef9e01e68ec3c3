"""Process configuration using Pydantic Settings."""
from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict

from prompt_summarizer.common.templates import DEFAULT_TEMPLATE_PATH


class Settings(BaseSettings):
    """
    Server settings, read from the environment and an optional ``.env`` file.

    ``openai_api_key`` may be empty here; the launcher refuses to start
    without it and the handler rejects requests.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # OpenAI
    openai_api_key: str = ""
    openai_base_url: str = "https://api.openai.com/v1"
    openai_timeout: float = 60.0

    # HTTP server
    host: str = "0.0.0.0"
    port: int = 3000
    static_dir: str = "public"
    max_in_flight: int = 0  # 0 disables admission control

    template_path: str = DEFAULT_TEMPLATE_PATH
    log_level: str = "INFO"
