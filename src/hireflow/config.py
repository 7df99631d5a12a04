"""Configuration management for Hireflow."""

from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_prefix="HIREFLOW_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Storage Configuration
    database_url: Optional[str] = Field(None, description="SQLAlchemy URL; in-memory store when unset")
    db_echo: bool = Field(False, description="Echo SQL statements")
    resume_dir: str = Field("./uploads", description="Directory holding stored resumes")
    max_resume_bytes: int = Field(5 * 1024 * 1024, description="Largest accepted resume document")

    # Admission Gate
    admission_min_skill_match: int = Field(50, ge=0, le=100, description="Minimum skill match percent")
    admission_requires_experience: bool = Field(True, description="Require the experience check to pass")

    # Application Configuration
    debug: bool = Field(False, description="Enable debug mode")
    log_level: str = Field("INFO", description="Logging level")

    # Server Configuration
    api_host: str = Field("0.0.0.0", description="API server host")
    api_port: int = Field(8000, description="API server port")
    reload: bool = Field(False, description="Enable auto-reload")
    allowed_origins: list[str] = Field(["*"], description="CORS allowed origins")


# Global settings instance
settings = Settings()
