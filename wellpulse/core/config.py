"""Application configuration."""
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional, Union
import os

from wellpulse.core.constants import (
    ACCESS_TOKEN_EXPIRE_MINUTES as DEFAULT_ACCESS_TOKEN_EXPIRE_MINUTES,
    DEFAULT_TXT_TTL,
    VERIFY_HOST_PREFIX,
)


class VerificationConfig(BaseModel):
    """Knobs for the domain verification state machine."""

    host_prefix: str = VERIFY_HOST_PREFIX
    default_ttl: int = DEFAULT_TXT_TTL
    verification_ttl_days: int = 7
    nameservers: List[str] = ["8.8.8.8", "1.1.1.1"]
    dns_timeout_seconds: float = 5.0


class DispatchConfig(BaseModel):
    """Knobs for the weekly report scheduler.

    ``weekday`` follows ``datetime.weekday()`` (Monday is 0). Hours are UTC,
    start inclusive and end exclusive.
    """

    enabled: bool = True
    interval_seconds: int = 30 * 60
    weekday: int = 0
    start_hour: int = 8
    end_hour: int = 12
    theme_limit: int = Field(3, ge=3, le=4)


class NotificationConfig(BaseModel):
    """SMTP and queue settings for outbound email."""

    smtp_host: Optional[str] = None
    smtp_port: int = 587
    smtp_user: Optional[str] = None
    smtp_password: Optional[str] = None
    smtp_use_tls: bool = True
    smtp_timeout_seconds: float = 8.0
    from_address: str = "no-reply@wellpulse.app"
    queue_max_depth: int = 1000
    worker_count: int = 1
    support_fallback_email: Optional[str] = None


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    # Database - Support both full URL and individual components
    DATABASE_URL: Optional[str] = None
    POSTGRES_USER: Optional[str] = None
    POSTGRES_PASSWORD: Optional[str] = None
    POSTGRES_HOST: Optional[str] = None
    POSTGRES_PORT: Optional[str] = None
    POSTGRES_DB: Optional[str] = None

    # Security
    SECRET_KEY: str = "your-secret-key-change-in-production"
    ADMIN_PASSWORD: str = "adminpass"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = DEFAULT_ACCESS_TOKEN_EXPIRE_MINUTES

    # CORS - Can be a list or comma-separated string
    CORS_ORIGINS: Union[list, str] = ["*"]

    @field_validator('CORS_ORIGINS', 'DNS_NAMESERVERS', mode='before')
    @classmethod
    def parse_comma_separated(cls, v):
        """Parse list settings from comma-separated string or list."""
        if isinstance(v, str):
            return [item.strip() for item in v.split(',') if item.strip()]
        return v

    # Application
    APP_TITLE: str = "WellPulse"
    APP_DESCRIPTION: str = "Multi-tenant wellbeing check-ins with weekly summaries"
    APP_VERSION: str = "1.0.0"

    # Environment
    ENVIRONMENT: str = "development"  # development, staging, production

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # Domain verification
    VERIFY_HOST_PREFIX: str = VERIFY_HOST_PREFIX
    DEFAULT_TXT_TTL: int = DEFAULT_TXT_TTL
    VERIFICATION_TTL_DAYS: int = 7
    DNS_NAMESERVERS: Union[list, str] = ["8.8.8.8", "1.1.1.1"]
    DNS_TIMEOUT_SECONDS: float = 5.0

    # Weekly report job
    WEEKLY_REPORT_JOB_ENABLED: bool = True
    WEEKLY_REPORT_DISPATCH_INTERVAL_SECONDS: int = 30 * 60
    WEEKLY_REPORT_WEEKDAY: int = 0
    WEEKLY_REPORT_START_HOUR: int = 8
    WEEKLY_REPORT_END_HOUR: int = 12
    WEEKLY_REPORT_THEME_LIMIT: int = 3

    # Email
    SMTP_HOST: Optional[str] = None
    SMTP_PORT: int = 587
    SMTP_USER: Optional[str] = None
    SMTP_PASS: Optional[str] = None
    SMTP_USE_TLS: bool = True
    SMTP_TIMEOUT_SECONDS: float = 8.0
    SMTP_FROM: str = "no-reply@wellpulse.app"
    NOTIFICATION_QUEUE_MAX_DEPTH: int = 1000
    NOTIFICATION_WORKERS: int = 1
    SUPPORT_FALLBACK_EMAIL: Optional[str] = None

    # Database Connection Pool Configuration
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20

    def get_database_url(self) -> str:
        """
        Get database URL from either DATABASE_URL or individual components.
        Priority: DATABASE_URL > individual components > default (dev only)
        """
        if self.DATABASE_URL:
            return self.DATABASE_URL

        if all([self.POSTGRES_USER, self.POSTGRES_PASSWORD,
                self.POSTGRES_HOST, self.POSTGRES_DB]):
            port = self.POSTGRES_PORT or "5432"
            return (
                f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
                f"@{self.POSTGRES_HOST}:{port}/{self.POSTGRES_DB}"
            )

        # Development fallback only
        if self.ENVIRONMENT in ("development", "testing"):
            return "sqlite:///./wellpulse.db"

        raise ValueError(
            "Database configuration missing. Provide either DATABASE_URL or "
            "all of: POSTGRES_USER, POSTGRES_PASSWORD, POSTGRES_HOST, POSTGRES_DB"
        )

    def verification_config(self) -> VerificationConfig:
        return VerificationConfig(
            host_prefix=self.VERIFY_HOST_PREFIX,
            default_ttl=self.DEFAULT_TXT_TTL,
            verification_ttl_days=self.VERIFICATION_TTL_DAYS,
            nameservers=list(self.DNS_NAMESERVERS),
            dns_timeout_seconds=self.DNS_TIMEOUT_SECONDS,
        )

    def dispatch_config(self) -> DispatchConfig:
        return DispatchConfig(
            enabled=self.WEEKLY_REPORT_JOB_ENABLED,
            interval_seconds=self.WEEKLY_REPORT_DISPATCH_INTERVAL_SECONDS,
            weekday=self.WEEKLY_REPORT_WEEKDAY,
            start_hour=self.WEEKLY_REPORT_START_HOUR,
            end_hour=self.WEEKLY_REPORT_END_HOUR,
            theme_limit=self.WEEKLY_REPORT_THEME_LIMIT,
        )

    def notification_config(self) -> NotificationConfig:
        return NotificationConfig(
            smtp_host=self.SMTP_HOST,
            smtp_port=self.SMTP_PORT,
            smtp_user=self.SMTP_USER,
            smtp_password=self.SMTP_PASS,
            smtp_use_tls=self.SMTP_USE_TLS,
            smtp_timeout_seconds=self.SMTP_TIMEOUT_SECONDS,
            from_address=self.SMTP_FROM,
            queue_max_depth=self.NOTIFICATION_QUEUE_MAX_DEPTH,
            worker_count=self.NOTIFICATION_WORKERS,
            support_fallback_email=self.SUPPORT_FALLBACK_EMAIL,
        )

    def validate_production_config(self) -> None:
        """Validate that production-critical settings are properly configured."""
        if self.ENVIRONMENT == "production":
            issues = []

            if self.SECRET_KEY == "your-secret-key-change-in-production":
                issues.append("SECRET_KEY must be changed from default value")

            if self.ADMIN_PASSWORD == "adminpass":
                issues.append("ADMIN_PASSWORD must be changed from default value")

            if self.CORS_ORIGINS == ["*"]:
                issues.append("CORS_ORIGINS should be restricted to specific domains")

            if not self.SMTP_HOST:
                issues.append("SMTP_HOST is required to deliver weekly reports")

            if issues:
                raise ValueError(
                    "Production configuration errors:\n" +
                    "\n".join(f"  - {issue}" for issue in issues)
                )


settings = Settings()

# Validate production configuration on startup
if os.getenv("ENVIRONMENT") == "production":
    settings.validate_production_config()
