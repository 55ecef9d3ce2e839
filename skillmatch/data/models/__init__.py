"""
Pydantic data models and schemas for SkillMatch.

This module provides the stored user document plus the transient
records and result pages exchanged by the matching core.
"""

# Base models
from .base import BaseDocument, EmbeddedModel, PyObjectId, TimestampMixin

# User models
from .user import (
    SkillUpdate,
    User,
    UserCreate,
    UserProfileInfo,
)

# Match models
from .match import (
    CandidateRecord,
    CandidateSummary,
    MutualMatch,
    RankedPage,
    ScoredCandidate,
    SearchFilters,
)

__all__ = [
    # Base
    "BaseDocument",
    "EmbeddedModel",
    "PyObjectId",
    "TimestampMixin",
    # User
    "SkillUpdate",
    "User",
    "UserCreate",
    "UserProfileInfo",
    # Match
    "CandidateRecord",
    "CandidateSummary",
    "MutualMatch",
    "RankedPage",
    "ScoredCandidate",
    "SearchFilters",
]
