"""Shared API dependencies."""
from typing import Optional

from fastapi import Request

from wellpulse.core.config import DispatchConfig, NotificationConfig, VerificationConfig, settings
from wellpulse.core.security import verify_admin_token
from wellpulse.db import get_db
from wellpulse.services.dns import PublicDnsResolver, TxtResolver
from wellpulse.services.notifications import NotificationQueue


def get_verification_config() -> VerificationConfig:
    return settings.verification_config()


def get_dispatch_config() -> DispatchConfig:
    return settings.dispatch_config()


def get_notification_config() -> NotificationConfig:
    return settings.notification_config()


def get_resolver() -> TxtResolver:
    """Public-resolver TXT lookups; overridden with a stub in tests."""
    config = settings.verification_config()
    return PublicDnsResolver(config.nameservers, config.dns_timeout_seconds)


def get_notification_queue(request: Request) -> Optional[NotificationQueue]:
    return getattr(request.app.state, "notifications", None)


__all__ = [
    "get_db",
    "verify_admin_token",
    "get_verification_config",
    "get_dispatch_config",
    "get_notification_config",
    "get_resolver",
    "get_notification_queue",
]
