import os

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import SecretStr, Field

BASE_DIR = os.path.dirname(os.path.abspath(__file__))


class DBSettings(BaseSettings):
    name: str = "artcourses"
    user: str = "postgres"
    password: SecretStr = SecretStr("postgres")
    host: str = "localhost"
    port: int = 5432
    echo: bool = False

    model_config = SettingsConfigDict(
        extra="forbid",
    )


class MinioSettings(BaseSettings):
    host: str = "localhost"
    port: int = 9000
    bucket: str = "artworks"
    access_key: str = "minioadmin"
    secret_key: SecretStr = SecretStr("minioadmin")
    secure: bool = False
    # Base URL the bucket is served from; falls back to the MinIO endpoint
    public_url: str | None = None

    model_config = SettingsConfigDict(
        extra="forbid",
    )


class RateLimitSettings(BaseSettings):
    upload_limit: int = 5
    window_seconds: int = 24 * 60 * 60

    model_config = SettingsConfigDict(
        extra="forbid",
    )


class Settings(BaseSettings):
    app_name: str = "ArtCourses"
    debug: bool = False
    log_level: str = "INFO"
    db_settings: DBSettings = Field(default_factory=DBSettings)
    minio_settings: MinioSettings = Field(default_factory=MinioSettings)
    rate_limit_settings: RateLimitSettings = Field(
        default_factory=RateLimitSettings
    )
    secret_key: str = "change-me"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 24 * 60

    model_config = SettingsConfigDict(
        env_file=os.path.join(BASE_DIR, ".env"),
        env_file_encoding="utf-8",
        extra="forbid",
        env_nested_delimiter="__"
    )
