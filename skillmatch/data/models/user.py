"""
User data models for SkillMatch.

Defines the schema for registered users and their declared skills.
Credentials are owned by the authentication service and are not part
of this document.
"""

from typing import Any, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from skillmatch.core.matching import SkillProfile
from skillmatch.utils.constants import UserRole

from .base import BaseDocument, EmbeddedModel


def _clean_skill_list(value: Any) -> list[str]:
    """Drop non-string and blank entries; keep raw spelling for display."""
    if value is None or isinstance(value, str):
        return []
    return [s for s in value if isinstance(s, str) and s.strip()]


class UserProfileInfo(EmbeddedModel):
    """Display metadata shown next to a user."""

    photo: Optional[str] = None
    bio: Optional[str] = None


class User(BaseDocument):
    """
    Registered user who can both teach and learn.

    This is the primary document stored in the users collection.
    """

    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    role: UserRole = UserRole.USER
    profile: UserProfileInfo = Field(default_factory=UserProfileInfo)

    # Skills
    skills_known: list[str] = Field(default_factory=list)
    skills_to_learn: list[str] = Field(default_factory=list)

    @field_validator("skills_known", "skills_to_learn", mode="before")
    @classmethod
    def clean_skills(cls, v: Any) -> list[str]:
        return _clean_skill_list(v)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()

    @property
    def skill_profile(self) -> SkillProfile:
        """Scoring snapshot of this user's skills."""
        return SkillProfile.from_lists(self.skills_known, self.skills_to_learn)

    class Settings:
        """MongoDB collection settings."""

        name = "users"
        indexes = [
            "email",
            "created_at",
            "skills_known",
            "skills_to_learn",
        ]


class UserCreate(BaseModel):
    """Schema for creating a new user."""

    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    role: UserRole = UserRole.USER
    profile: Optional[UserProfileInfo] = None
    skills_known: list[str] = Field(default_factory=list)
    skills_to_learn: list[str] = Field(default_factory=list)


class SkillUpdate(BaseModel):
    """Schema for replacing a user's skill lists."""

    skills_known: list[str] = Field(default_factory=list)
    skills_to_learn: list[str] = Field(default_factory=list)

    @field_validator("skills_known", "skills_to_learn", mode="before")
    @classmethod
    def clean_skills(cls, v: Any) -> list[str]:
        return _clean_skill_list(v)
