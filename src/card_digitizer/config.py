"""Settings loaded from the environment and .env."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings"""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Vision model backends
    openai_api_key: str | None = None
    openai_model: str = "gpt-4o-mini"
    openai_base_url: str = "https://api.openai.com/v1"
    ollama_url: str = "http://localhost:11434"
    ollama_model: str = "llava"

    # Airtable
    airtable_api_key: str | None = None
    airtable_base_id: str | None = None
    airtable_table_name: str = "CRM"

    request_timeout: float = 60.0


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
