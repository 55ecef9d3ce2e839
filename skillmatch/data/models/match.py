"""
Match and retrieval data models for SkillMatch.

Defines the candidate records exchanged with the store and the ranked,
paginated results returned to callers. None of these are persisted.
"""

import math
from datetime import datetime
from typing import Any, Generic, Optional, TypeVar

from pydantic import Field, computed_field, field_validator

from skillmatch.core.matching import MatchResult, SkillProfile
from skillmatch.utils.constants import DEFAULT_PAGE_SIZE
from skillmatch.utils.logger import get_logger

from .base import EmbeddedModel
from .user import UserProfileInfo

logger = get_logger(__name__)

T = TypeVar("T")


def _optional_skill_list(value: Any) -> list[str]:
    if value is None or isinstance(value, str):
        return []
    return [s for s in value if isinstance(s, str)]


class CandidateRecord(EmbeddedModel):
    """A user as supplied by the candidate store."""

    user_id: str
    name: str = ""
    email: Optional[str] = None
    skills_known: list[str] = Field(default_factory=list)
    skills_wanted: list[str] = Field(default_factory=list)
    profile: UserProfileInfo = Field(default_factory=UserProfileInfo)
    created_at: Optional[datetime] = None
    text_score: Optional[float] = None  # Relevance, only set for text searches

    @field_validator("skills_known", "skills_wanted", mode="before")
    @classmethod
    def default_skills(cls, v: Any) -> list[str]:
        return _optional_skill_list(v)

    @field_validator("profile", mode="before")
    @classmethod
    def default_profile(cls, v: Any) -> Any:
        return v if v is not None else {}

    @property
    def skill_profile(self) -> SkillProfile:
        return SkillProfile.from_lists(self.skills_known, self.skills_wanted)


class CandidateSummary(EmbeddedModel):
    """Display fields for a search hit."""

    user_id: str
    name: str
    email: Optional[str] = None
    skills_offered: list[str] = Field(default_factory=list)
    skills_wanted: list[str] = Field(default_factory=list)
    profile: UserProfileInfo = Field(default_factory=UserProfileInfo)

    @classmethod
    def from_record(cls, record: CandidateRecord) -> "CandidateSummary":
        return cls(
            user_id=record.user_id,
            name=record.name,
            email=record.email,
            skills_offered=list(record.skills_known),
            skills_wanted=list(record.skills_wanted),
            profile=record.profile,
        )


class ScoredCandidate(EmbeddedModel):
    """A recommended user annotated with its match result."""

    user_id: str
    name: str
    skills_offered: list[str] = Field(default_factory=list)
    skills_wanted: list[str] = Field(default_factory=list)
    profile: UserProfileInfo = Field(default_factory=UserProfileInfo)

    match_score: int = 0
    match_percentage: int = Field(0, ge=0, le=100)
    mutual_skills: list[str] = Field(default_factory=list)
    exact_matches: list[str] = Field(default_factory=list)
    reverse_matches: list[str] = Field(default_factory=list)

    @classmethod
    def from_match(cls, record: CandidateRecord, result: MatchResult) -> "ScoredCandidate":
        return cls(
            user_id=record.user_id,
            name=record.name,
            skills_offered=list(record.skills_known),
            skills_wanted=list(record.skills_wanted),
            profile=record.profile,
            match_score=result.raw_score,
            match_percentage=result.match_percentage,
            mutual_skills=list(result.mutual_skills),
            exact_matches=list(result.exact_matches),
            reverse_matches=list(result.reverse_matches),
        )


class MutualMatch(EmbeddedModel):
    """A user with whom the requester can both learn and teach."""

    user_id: str
    name: str
    email: Optional[str] = None
    learn_from_other: list[str] = Field(default_factory=list)
    teach_to_other: list[str] = Field(default_factory=list)
    match_score: int = 0


class SearchFilters(EmbeddedModel):
    """
    Normalized search input.

    Malformed filter values (non-strings, blanks) are treated as absent and
    out-of-range pages are clamped; nothing here raises for bad input.
    """

    query: Optional[str] = None
    skill_offered: Optional[str] = None
    skill_wanted: Optional[str] = None
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    @field_validator("query", "skill_offered", "skill_wanted", mode="before")
    @classmethod
    def ignore_invalid_filter(cls, v: Any, info: Any) -> Optional[str]:
        if v is None:
            return None
        if not isinstance(v, str):
            logger.warning(f"Ignoring non-string {info.field_name} filter: {type(v).__name__}")
            return None
        return v.strip() or None

    @field_validator("page", mode="before")
    @classmethod
    def clamp_page(cls, v: Any) -> int:
        try:
            page = int(v)
        except (TypeError, ValueError):
            return 1
        return max(1, page)

    @field_validator("page_size", mode="before")
    @classmethod
    def clamp_page_size(cls, v: Any) -> int:
        try:
            size = int(v)
        except (TypeError, ValueError):
            return DEFAULT_PAGE_SIZE
        return size if size >= 1 else DEFAULT_PAGE_SIZE

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.page_size


class RankedPage(EmbeddedModel, Generic[T]):
    """A bounded, ordered window of results plus pagination metadata."""

    items: list[T] = Field(default_factory=list)
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    total_count: int = 0

    @computed_field
    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_count / self.page_size)

    @computed_field
    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages
