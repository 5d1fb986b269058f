"""
Bandhan Configuration Module
Loads settings from environment variables with sensible defaults.
"""

from functools import lru_cache
from typing import List
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = "Bandhan"
    debug: bool = False

    # Authentication
    secret_key: str = Field(..., min_length=32)  # Required, no default
    jwt_algorithm: str = "HS256"
    user_token_expire_minutes: int = 60 * 24 * 7  # 1 week
    admin_token_expire_minutes: int = 60 * 24  # 1 day

    # Shared secret required to self-register an administrator.
    # Empty disables admin registration entirely.
    admin_registration_key: str = ""
    default_admin_permissions: str = "manage_users,view_statistics"

    # Rate Limiting
    rate_limit_enabled: bool = True
    rate_limit_login: str = "5/15minutes"
    rate_limit_register: str = "10/hour"

    # CORS
    cors_origins: str = "http://localhost:3000"

    # Database
    database_url: str = Field(..., alias="DATABASE_URL")

    # Redis (admin stats cache)
    redis_url: str = "redis://redis:6379/0"
    stats_cache_ttl: int = 60  # seconds, 0 disables caching
    stats_timezone: str = "UTC"

    # Logging
    log_dir: str = "/var/log/bandhan"
    log_level: str = "INFO"

    # Cloudinary media store
    cloudinary_cloud_name: str = ""
    cloudinary_api_key: str = ""
    cloudinary_api_secret: str = ""
    media_folder: str = "matrimony_app/profiles"
    photo_folder: str = "user_photos"
    media_timeout_seconds: float = 30.0

    # Uploads
    max_upload_bytes: int = 5 * 1024 * 1024  # 5MB
    max_additional_pictures: int = 4
    max_photos: int = 10

    # API Settings
    api_prefix: str = "/api"

    @field_validator('secret_key')
    @classmethod
    def validate_secret_key(cls, v: str) -> str:
        """Validate that the secret key is secure."""
        if not v or len(v) < 32:
            raise ValueError("SECRET_KEY must be at least 32 characters long")

        # Check for common insecure values
        insecure_values = [
            "change-me-in-production",
            "secret",
            "password",
            "default",
            "changeme",
        ]
        if any(bad in v.lower() for bad in insecure_values):
            raise ValueError(
                "SECRET_KEY appears to be insecure. Generate a secure key with: "
                "python -c 'import secrets; print(secrets.token_hex(32))'"
            )

        return v

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse comma-separated CORS origins into a list."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def default_admin_permissions_list(self) -> List[str]:
        return [p.strip() for p in self.default_admin_permissions.split(",") if p.strip()]

    @property
    def media_store_configured(self) -> bool:
        return bool(
            self.cloudinary_cloud_name
            and self.cloudinary_api_key
            and self.cloudinary_api_secret
        )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"
        populate_by_name = True


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Convenience alias
settings = get_settings()
