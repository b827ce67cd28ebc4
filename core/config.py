"""Application settings loaded from environment / .env"""
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Runtime configuration, constructed once at process start"""
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = Field(default="MediaHub API")
    app_version: str = Field(default="0.1.0")

    database_url: str = Field(default="sqlite:///./mediahub.db")
    sql_echo: bool = Field(default=False)
    auto_create_schema: bool = Field(default=False)

    log_level: str = Field(default="INFO")

    default_page_size: int = Field(default=10, ge=1)
    max_page_size: int = Field(default=100, ge=1)
