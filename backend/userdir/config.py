"""
User Directory Configuration Module
Loads settings from environment variables with sensible defaults.
"""

import re
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = "UserDirectory"
    debug: bool = False

    # Database
    database_url: str = Field(..., alias="DATABASE_URL")

    # Login keys
    login_regex: str = r"^[_.@A-Za-z0-9-]*$"
    login_max_length: int = 50

    # Rate Limiting (unauthenticated existence checks)
    rate_limit_enabled: bool = True
    rate_limit_existence: str = "30/minute"

    # Redis / Celery
    redis_url: str = "redis://redis:6379/0"
    celery_broker_url: str = "redis://redis:6379/0"
    celery_result_backend: str = "redis://redis:6379/1"

    # Mail
    mail_from: str = "no-reply@hdmon.com"
    smtp_server: str = "localhost"
    smtp_port: int = 587
    smtp_username: str = ""
    smtp_password: str = ""
    smtp_use_tls: bool = True
    activation_base_url: str = "http://localhost:8080/#/activate"

    # Logging
    log_dir: str = "/var/log/userdir"
    log_level: str = "INFO"

    # API Settings
    api_prefix: str = "/api"

    @field_validator("login_regex")
    @classmethod
    def validate_login_regex(cls, v: str) -> str:
        """Reject patterns that do not compile."""
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"LOGIN_REGEX is not a valid regular expression: {e}")
        return v

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Convenience alias
settings = get_settings()
