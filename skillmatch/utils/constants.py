"""
Application-wide constants for SkillMatch.

Scoring weights and limits live here so the scorer and ranker share
a single source of truth.
"""

from enum import Enum
from typing import Final


# =============================================================================
# Application Constants
# =============================================================================

APP_NAME: Final[str] = "SkillMatch"
APP_DISPLAY_NAME: Final[str] = "SkillMatch Learner/Mentor Matching"
VERSION: Final[str] = "0.1.0"


# =============================================================================
# Scoring Constants
# =============================================================================

# Candidate knows a skill the requester wants
EXACT_MATCH_POINTS: Final[int] = 5

# Candidate wants a skill the requester knows
REVERSE_MATCH_POINTS: Final[int] = 3

# One point per partially matching candidate skill, capped
PARTIAL_MATCH_POINTS: Final[int] = 1
PARTIAL_MATCH_CAP: Final[int] = 15

# Fixed percentage denominator, not the highest achievable score
MATCH_SCORE_CEILING: Final[int] = 100


# =============================================================================
# Retrieval Limits
# =============================================================================

DEFAULT_CANDIDATE_POOL_LIMIT: Final[int] = 100
DEFAULT_RECOMMENDATION_LIMIT: Final[int] = 20
DEFAULT_PAGE_SIZE: Final[int] = 20


# =============================================================================
# Enums
# =============================================================================


class UserRole(str, Enum):
    """Role of a registered user."""

    USER = "user"
    ADMIN = "admin"


class ErrorCode(str, Enum):
    """Internal diagnostic codes attached to user-visible failures."""

    REQUESTER_NOT_FOUND = "REQUESTER_NOT_FOUND"
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"


class AuditAction(str, Enum):
    """Types of actions that can be audited."""

    RECOMMENDATIONS_GENERATED = "recommendations_generated"
    SEARCH_EXECUTED = "search_executed"
    MUTUAL_MATCHES_FOUND = "mutual_matches_found"
    SKILLS_UPDATED = "skills_updated"
    USER_CREATED = "user_created"
