"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
API starts locally without any setup.  In a production deployment you
must at least override ``SECRET_KEY`` and the storage/email
credentials.
"""

import os
from dataclasses import dataclass, field


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = field(default_factory=lambda: os.getenv("PROJECT_NAME", "Evenza API"))
    api_version: str = field(default_factory=lambda: os.getenv("API_VERSION", "1.0.0"))
    debug: bool = field(default_factory=lambda: _env_bool("DEBUG"))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    log_file: str = field(default_factory=lambda: os.getenv("LOG_FILE", ""))

    # Token signing.  ``secret_key`` is the shared secret used to sign
    # and verify every access token.
    secret_key: str = field(default_factory=lambda: os.getenv("SECRET_KEY", "change_me"))
    algorithm: str = field(default_factory=lambda: os.getenv("ALGORITHM", "HS256"))
    access_token_expire_minutes: int = field(
        default_factory=lambda: int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24)))
    )
    remember_me_expire_days: int = field(
        default_factory=lambda: int(os.getenv("REMEMBER_ME_EXPIRE_DAYS", "30"))
    )

    # Name of the same-site cookie carrying the access token.  Browser
    # clients rely on it; API clients send ``Authorization: Bearer``.
    auth_cookie_name: str = field(default_factory=lambda: os.getenv("AUTH_COOKIE_NAME", "authToken"))
    cookie_secure: bool = field(default_factory=lambda: _env_bool("COOKIE_SECURE"))

    # Path to the SQLite database file.  Relative paths are resolved
    # against the project root by ``core.db``.
    database_url: str = field(default_factory=lambda: os.getenv("DATABASE_URL", "evenza.db"))

    # Object storage for uploads (S3 or an S3 compatible service such as
    # MinIO when ``aws_s3_endpoint_url`` is set).
    aws_region: str = field(default_factory=lambda: os.getenv("AWS_REGION", "us-east-1"))
    aws_access_key_id: str = field(default_factory=lambda: os.getenv("AWS_ACCESS_KEY_ID", ""))
    aws_secret_access_key: str = field(default_factory=lambda: os.getenv("AWS_SECRET_ACCESS_KEY", ""))
    aws_s3_bucket: str = field(default_factory=lambda: os.getenv("AWS_S3_BUCKET", "evenza-uploads"))
    aws_s3_endpoint_url: str = field(default_factory=lambda: os.getenv("AWS_S3_ENDPOINT_URL", ""))

    # Transactional email through Resend.  When no key is configured
    # outgoing mail is skipped and only logged.
    resend_api_key: str = field(default_factory=lambda: os.getenv("RESEND_API_KEY", ""))
    email_from: str = field(default_factory=lambda: os.getenv("EMAIL_FROM", "Evenza <noreply@evenza.local>"))


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables
# should be set before importing this module.
settings = Settings()
