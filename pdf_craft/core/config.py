"""Client configuration using pydantic-settings."""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from pdf_craft import __version__


class Settings(BaseSettings):
    """Client settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="pdf-craft", alias="APP_NAME")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # API
    api_key: Optional[str] = Field(default=None, alias="PDF_CRAFT_API_KEY")
    base_url: str = Field(default="https://fusion-api.oomol.com/v1", alias="PDF_CRAFT_BASE_URL")
    request_timeout: float = Field(default=60.0, alias="PDF_CRAFT_TIMEOUT")
    user_agent: str = Field(default=f"pdf-craft-python/{__version__}", alias="PDF_CRAFT_USER_AGENT")
    default_model: str = Field(default="gundam", alias="PDF_CRAFT_MODEL")

    # Upload
    upload_timeout: float = Field(default=300.0, alias="PDF_CRAFT_UPLOAD_TIMEOUT")
    upload_max_retries: int = Field(default=3, ge=1, alias="PDF_CRAFT_UPLOAD_MAX_RETRIES")

    # Endpoint paths, relative to base_url
    upload_init_path: str = Field(default="/file-upload/init", alias="PDF_CRAFT_UPLOAD_INIT_PATH")
    upload_url_path: str = Field(default="/file-upload/url", alias="PDF_CRAFT_UPLOAD_URL_PATH")
    submit_path: str = Field(
        default="/pdf-transform-{format}/submit", alias="PDF_CRAFT_SUBMIT_PATH"
    )
    result_path: str = Field(
        default="/pdf-transform-{format}/result/{session_id}", alias="PDF_CRAFT_RESULT_PATH"
    )
    batches_path: str = Field(default="/batches", alias="PDF_CRAFT_BATCHES_PATH")
    jobs_path: str = Field(default="/jobs", alias="PDF_CRAFT_JOBS_PATH")

    @property
    def api_root(self) -> str:
        """Base URL without a trailing slash."""
        return self.base_url.rstrip("/")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
