from pathlib import Path
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


def choose_env_file() -> str:
    return ".env.local" if Path(".env.local").exists() else ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=choose_env_file(),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # tolerate unrelated env vars
    )

    # Content
    CONTENT_DIR: str = "content"
    BLOG_PREFIX: str = "blog/"
    IMAGE_PREFIX: str = "img/"
    POST_EXTENSIONS: List[str] = [".mdx", ".md"]

    # API
    BLOG_API_URL: str = "http://localhost:8000"
    POSTDESK_API_KEY: str = ""

    # Logging
    LOG_LEVEL: str = "INFO"

    # Lint rules
    REQUIRED_FIELDS: List[str] = ["title", "date"]
    ALLOWED_LAYOUTS: List[str] = []
    REQUIRE_CODE_LANGUAGE: bool = True

    @property
    def content_path(self) -> Path:
        return Path(self.CONTENT_DIR)

    @property
    def image_base_url(self) -> str:
        return f"{self.BLOG_API_URL.rstrip('/')}/images"


# Global settings instance (evaluated at import, but reads env on construction)
settings = Settings()
