from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    app_name: str = "Storefront"
    debug: bool = False
    version: str = "1.0.0"

    # API
    api_prefix: str = "/api"
    frontend_url: str = "http://localhost:3000"
    cors_allowed_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]

    # Key-value store
    redis_url: str = "redis://localhost:6379"
    redis_socket_timeout_seconds: float = 5.0
    kv_update_retries: int = 10

    # Identity provider (GoTrue-compatible REST API)
    auth_url: str = ""
    auth_anon_key: str = ""
    auth_service_key: str = ""
    auth_timeout_seconds: float = 10.0
    # Which metadata block on the provider's user record carries ``role``.
    # "app_metadata" is only writable with the service key.
    role_metadata_key: str = "user_metadata"

    # Analytics
    stats_timezone: str = "UTC"  # env: STATS_TIMEZONE, e.g. Africa/Nairobi
    dashboard_window_days: int = 30
    export_analytics_days: int = 90
    top_products_limit: int = 10

    # Uploads (S3)
    max_upload_bytes: int = 5 * 1024 * 1024
    images_bucket: str = ""  # env: IMAGES_BUCKET
    profile_pictures_bucket: str = ""  # env: PROFILE_PICTURES_BUCKET
    s3_region: str = "us-east-1"
    signed_url_ttl_seconds: int = 7 * 24 * 3600  # SigV4 presign maximum

    # Checkout messaging
    store_name: str = "Sensual Kenya"
    whatsapp_number: str = ""  # env: WHATSAPP_NUMBER, digits only, e.g. 254112327141
    currency: str = "KSh"
    payment_instructions: str = ""


@lru_cache
def get_settings() -> Settings:
    return Settings()
