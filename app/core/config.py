"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

from functools import lru_cache
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # MongoDB (Cosmos DB accounts expose the same wire API)
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db: str = "achievement_tracker"

    # JWT Auth
    jwt_secret_key: str = "change-this-secret"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 1440  # 24 hours

    # Admin account (single shared reviewer login)
    admin_username: str = "admin"
    admin_password: str = "change-this-password"

    # AI providers: "gemini", "azure" or "none"
    ai_provider: str = "gemini"
    gemini_api_key: str = ""
    gemini_model: str = "gemini-1.5-flash"
    azure_openai_endpoint: str = ""
    azure_openai_key: str = ""
    azure_openai_deployment: str = ""
    azure_openai_api_version: str = "2024-02-01"

    # AI endpoint throttling (per caller)
    ai_rate_limit_requests: int = 15
    ai_rate_limit_window_seconds: int = 60

    # App
    cors_origins: List[str] = ["*"]
    log_level: str = "INFO"
    debug: bool = False

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
