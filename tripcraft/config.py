"""
Configuration management for the trip planner.
Supports any OpenAI-compatible gateway: Lovable AI, OpenAI, OpenRouter, Ollama.
"""
from pydantic_settings import BaseSettings
from typing import Literal, Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # LLM Configuration
    llm_provider: Literal["lovable", "openai", "openrouter", "ollama", "mock"] = "mock"
    llm_api_key: str = ""
    llm_base_url: str = ""
    llm_model: str = "google/gemini-2.5-flash"

    # LLM Parameters
    llm_temperature: float = 0.8
    llm_max_tokens: Optional[int] = None
    llm_timeout: Optional[float] = None  # None keeps the SDK default

    # Storage
    database_path: str = "tripcraft.db"

    # Server Configuration
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = True
    log_level: str = "INFO"
    cors_origins: list[str] = ["*"]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


# Global settings instance
settings = Settings()


PROVIDER_BASE_URLS = {
    "lovable": "https://ai.gateway.lovable.dev/v1",
    "openai": "https://api.openai.com/v1",
    "openrouter": "https://openrouter.ai/api/v1",
    "ollama": "http://localhost:11434/v1",
}


def get_llm_config(config: Optional[Settings] = None) -> dict:
    """Get LLM configuration based on provider."""
    config = config or settings
    api_key = config.llm_api_key
    if not api_key and config.llm_provider == "ollama":
        api_key = "ollama"  # Ollama ignores the key
    return {
        "provider": config.llm_provider,
        "api_key": api_key,
        "base_url": config.llm_base_url or PROVIDER_BASE_URLS.get(config.llm_provider),
        "model": config.llm_model,
        "temperature": config.llm_temperature,
        "max_tokens": config.llm_max_tokens,
        "timeout": config.llm_timeout,
    }
