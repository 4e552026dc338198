from pydantic_settings import BaseSettings
from pydantic import ConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App
    app_name: str = "Devonboard Sync"
    debug: bool = False
    host: str = "127.0.0.1"
    port: int = 8000

    # GitHub
    github_token: str = ""
    github_webhook_secret: str = ""  # Signature check is skipped when empty

    # OpenAI (for change analysis via gen_ai_hub proxy)
    # No API key needed - uses gen_ai_hub proxy
    openai_model: str = "gpt-5"
    temperature: float = 0.3
    classifier_max_tokens: int = 4096

    # Change classification
    classifier_max_content_chars: int = 2000  # Prefix of each version sent to the LLM
    auto_apply_severity_threshold: int = 7  # Severity at or above always needs review

    # Sync orchestration
    max_concurrent_subscribers: int = 4

    model_config = ConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
