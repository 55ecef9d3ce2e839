"""
Utility modules for SkillMatch.

This package contains shared utilities used across the application:
- config: Configuration management
- logger: Logging infrastructure
- constants: Application-wide constants
"""

from skillmatch.utils.config import (
    AppSettings,
    DatabaseSettings,
    LoggingSettings,
    MatchingSettings,
    get_settings,
    reload_settings,
    settings,
    ROOT_DIR,
)
from skillmatch.utils.constants import (
    APP_NAME,
    APP_DISPLAY_NAME,
    VERSION,
    EXACT_MATCH_POINTS,
    REVERSE_MATCH_POINTS,
    PARTIAL_MATCH_CAP,
    MATCH_SCORE_CEILING,
    AuditAction,
    ErrorCode,
    UserRole,
)
from skillmatch.utils.logger import (
    setup_logging,
    get_logger,
    audit_log,
)

__all__ = [
    # Config
    "AppSettings",
    "DatabaseSettings",
    "LoggingSettings",
    "MatchingSettings",
    "get_settings",
    "reload_settings",
    "settings",
    "ROOT_DIR",
    # Constants
    "APP_NAME",
    "APP_DISPLAY_NAME",
    "VERSION",
    "EXACT_MATCH_POINTS",
    "REVERSE_MATCH_POINTS",
    "PARTIAL_MATCH_CAP",
    "MATCH_SCORE_CEILING",
    "AuditAction",
    "ErrorCode",
    "UserRole",
    # Logger
    "setup_logging",
    "get_logger",
    "audit_log",
]
