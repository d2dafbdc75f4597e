from functools import lru_cache
from typing import Annotated

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    newsletter_service: str = "netlify"
    mailchimp_api_key: str | None = None
    mailchimp_server_prefix: str | None = None
    mailchimp_list_id: str | None = None
    convertkit_api_key: str | None = None
    convertkit_form_id: str | None = None
    klaviyo_api_key: str | None = None
    klaviyo_list_id: str | None = None
    brevo_api_key: str | None = None
    brevo_list_id: str | None = None
    provider_timeout_seconds: float = 10.0

    site_url: str = "https://your-blog.pages.dev"
    site_title: str = "Your Blog"
    site_description: str = "A modern blog built with Astro and deployed on Cloudflare Pages"
    site_language: str = "en-us"
    content_index_path: str = "content/posts.json"

    cors_origins: Annotated[list[str], NoDecode] = ["http://localhost:4321"]
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_prefix="APP_", env_file_encoding="utf-8")

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: str | list[str]) -> list[str]:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator("newsletter_service", mode="before")
    @classmethod
    def _normalise_service(cls, value: str) -> str:
        if isinstance(value, str):
            return value.strip().lower()
        return value

@lru_cache

def get_settings() -> Settings:
    """Return a cached settings instance."""

    return Settings()


settings = get_settings()
