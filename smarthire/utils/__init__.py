"""
Utility modules for SmartHire.

This package contains shared utilities used across the application:
- config: Configuration management
- logger: Logging infrastructure
- constants: Application-wide constants and enums
"""

from smarthire.utils.config import (
    AppSettings,
    get_settings,
    reload_settings,
    ROOT_DIR,
    DATA_DIR,
)
from smarthire.utils.constants import (
    APP_NAME,
    VERSION,
    RECOMMENDATION_LIMIT,
    SUPPORTED_RESUME_FORMATS,
    ApplicationStage,
    AuditAction,
    NotificationType,
    OfferStatus,
    UserRole,
)
from smarthire.utils.logger import (
    setup_logging,
    get_logger,
    audit_log,
    LoggerMixin,
    log,
)

__all__ = [
    # Config
    "AppSettings",
    "get_settings",
    "reload_settings",
    "ROOT_DIR",
    "DATA_DIR",
    # Constants
    "APP_NAME",
    "VERSION",
    "RECOMMENDATION_LIMIT",
    "SUPPORTED_RESUME_FORMATS",
    "ApplicationStage",
    "AuditAction",
    "NotificationType",
    "OfferStatus",
    "UserRole",
    # Logger
    "setup_logging",
    "get_logger",
    "audit_log",
    "LoggerMixin",
    "log",
]
