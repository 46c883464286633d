from datetime import timedelta

from pydantic import Field
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Application configuration loaded from environment variables / .env file."""

    app_name: str = "QR Kit API"
    app_env: str = "development"
    frontend_url: str = "http://localhost:3000"
    max_upload_size_mb: int = 100

    # Database (any async driver; SQLite for local dev)
    database_url: str = Field(
        default="sqlite+aiosqlite:///./qrkit_dev.db",
        alias="DATABASE_URL",
    )
    auto_create_schema: bool = Field(default=True, alias="AUTO_CREATE_SCHEMA")

    # Session tokens issued by the identity provider (verified, never minted here)
    auth_jwt_secret: str | None = Field(default=None, alias="AUTH_JWT_SECRET")
    auth_jwt_algorithm: str = Field(default="HS256", alias="AUTH_JWT_ALGORITHM")
    auth_jwt_audience: str | None = Field(default=None, alias="AUTH_JWT_AUDIENCE")

    # Single-use content access tokens
    access_token_ttl_minutes: int = Field(default=10, alias="ACCESS_TOKEN_TTL_MINUTES")
    access_token_purpose: str = Field(
        default="CONTENT_SESSION", alias="ACCESS_TOKEN_PURPOSE",
    )
    signed_url_ttl_seconds: int = Field(
        default=3600, alias="SIGNED_URL_TTL_SECONDS",
    )  # longer than the token TTL: playback starts after the gate decision

    # Cloudinary (signed delivery + uploads)
    cloudinary_cloud_name: str | None = Field(default=None, alias="CLOUDINARY_CLOUD_NAME")
    cloudinary_api_key: str | None = Field(default=None, alias="CLOUDINARY_API_KEY")
    cloudinary_api_secret: str | None = Field(default=None, alias="CLOUDINARY_API_SECRET")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "populate_by_name": True,
        "extra": "ignore",
    }

    @property
    def max_upload_size_bytes(self) -> int:
        return self.max_upload_size_mb * 1024 * 1024

    @property
    def access_token_ttl(self) -> timedelta:
        return timedelta(minutes=self.access_token_ttl_minutes)

    @property
    def storage_configured(self) -> bool:
        """Signed delivery is available only when all Cloudinary credentials are set."""
        return bool(
            self.cloudinary_cloud_name
            and self.cloudinary_api_key
            and self.cloudinary_api_secret
        )

settings = Settings()
