"""Skill compatibility scoring module."""

from .skill_scorer import (
    MatchResult,
    SkillProfile,
    SkillScorer,
    get_skill_scorer,
    normalize_skill,
)

__all__ = [
    "MatchResult",
    "SkillProfile",
    "SkillScorer",
    "get_skill_scorer",
    "normalize_skill",
]
