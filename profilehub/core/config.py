"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

from functools import lru_cache
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_AVATAR_URL = (
    "https://img.freepik.com/premium-vector/vector-flat-illustration-grayscale-avatar-"
    "user-profile-person-icon-gender-neutral-silhouette-profile-picture-suitable-social-"
    "media-profiles-icons-screensavers-as-templatex9xa_719432-2210.jpg?semt=ais_hybrid"
)


class Settings(BaseSettings):
    # MongoDB
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db: str = "profilehub"

    # JWT Auth
    jwt_secret_key: str = "change-this-secret"
    jwt_algorithm: str = "HS256"
    jwt_expire_days: int = 30

    # Cloudinary (image host)
    cloudinary_cloud_name: str = ""
    cloudinary_api_key: str = ""
    cloudinary_api_secret: str = ""
    default_image_url: str = DEFAULT_AVATAR_URL

    # SerpAPI (opportunity listings)
    serpapi_key: str = ""
    serpapi_base_url: str = "https://serpapi.com/search.json"
    serpapi_default_location: str = "India"
    serpapi_google_domain: str = "google.co.in"
    serpapi_gl: str = "in"
    serpapi_hl: str = "hi"

    # Outbound HTTP
    http_timeout_seconds: float = 10.0

    # App
    cors_origins: List[str] = ["*"]
    log_level: str = "INFO"

    @property
    def cloudinary_upload_url(self) -> str:
        """Construct Cloudinary image upload URL"""
        return f"https://api.cloudinary.com/v1_1/{self.cloudinary_cloud_name}/image/upload"

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
