"""
Skill compatibility scorer.

Scores one candidate's skill profile against a requester's profile using
three signals:
- exact matches (candidate teaches what the requester wants)
- reverse matches (candidate wants what the requester teaches)
- partial matches (substring overlap between any two skills, capped)
"""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Optional

from skillmatch.utils.constants import (
    EXACT_MATCH_POINTS,
    MATCH_SCORE_CEILING,
    PARTIAL_MATCH_CAP,
    PARTIAL_MATCH_POINTS,
    REVERSE_MATCH_POINTS,
)
from skillmatch.utils.logger import get_logger

logger = get_logger(__name__)


def normalize_skill(skill: str) -> str:
    """Comparison form of a skill name."""
    return skill.strip().lower()


def _coerce_skills(skills: Any) -> tuple[str, ...]:
    """Turn an optional skill collection into a tuple of strings."""
    if skills is None or isinstance(skills, str):
        return ()
    if not isinstance(skills, Iterable):
        return ()
    return tuple(s for s in skills if isinstance(s, str))


@dataclass(frozen=True)
class SkillProfile:
    """
    Immutable snapshot of a user's declared skills.

    Raw strings are kept for display; normalized forms are derived when
    scoring.
    """

    known: tuple[str, ...] = ()
    wanted: tuple[str, ...] = ()

    @classmethod
    def from_lists(cls, known: Any = None, wanted: Any = None) -> "SkillProfile":
        """Build a profile, treating missing or malformed lists as empty."""
        return cls(known=_coerce_skills(known), wanted=_coerce_skills(wanted))

    @property
    def is_empty(self) -> bool:
        return not self.known and not self.wanted


@dataclass(frozen=True)
class MatchResult:
    """Result of scoring one candidate against a requester."""

    candidate_id: Optional[str] = None
    raw_score: int = 0
    match_percentage: int = 0
    exact_matches: tuple[str, ...] = ()
    reverse_matches: tuple[str, ...] = ()
    mutual_skills: tuple[str, ...] = ()
    partial_matches: tuple[str, ...] = ()
    partial_points: int = 0


class SkillScorer:
    """
    Pure, stateless scorer for pairs of skill profiles.

    Duplicate entries within a list are not collapsed before counting
    exact and reverse matches, so a candidate listing a skill twice
    scores it twice. Only the mutual and partial sets are deduplicated.
    """

    def __init__(
        self,
        exact_points: int = EXACT_MATCH_POINTS,
        reverse_points: int = REVERSE_MATCH_POINTS,
        partial_points: int = PARTIAL_MATCH_POINTS,
        partial_cap: int = PARTIAL_MATCH_CAP,
        score_ceiling: int = MATCH_SCORE_CEILING,
    ):
        self.exact_points = exact_points
        self.reverse_points = reverse_points
        self.partial_points = partial_points
        self.partial_cap = partial_cap
        self.score_ceiling = score_ceiling

    def score(
        self,
        requester: SkillProfile,
        candidate: SkillProfile,
        candidate_id: Optional[str] = None,
    ) -> MatchResult:
        """
        Score a candidate against the requester.

        Args:
            requester: Profile of the user asking for matches
            candidate: Profile being evaluated
            candidate_id: Optional identifier copied onto the result

        Returns:
            MatchResult with raw score, percentage and matched skills
        """
        requester_known = [normalize_skill(s) for s in requester.known]
        requester_wanted = [normalize_skill(s) for s in requester.wanted]
        candidate_known = [normalize_skill(s) for s in candidate.known]
        candidate_wanted = [normalize_skill(s) for s in candidate.wanted]

        exact_matches = self._match_exact(candidate_known, requester_wanted)
        reverse_matches = self._match_exact(candidate_wanted, requester_known)
        partial_matches = self._match_partial(
            candidate_known + candidate_wanted,
            requester_wanted + requester_known,
        )

        partial_points = min(len(partial_matches) * self.partial_points, self.partial_cap)
        raw_score = (
            len(exact_matches) * self.exact_points
            + len(reverse_matches) * self.reverse_points
            + partial_points
        )

        return MatchResult(
            candidate_id=candidate_id,
            raw_score=raw_score,
            match_percentage=self._to_percentage(raw_score),
            exact_matches=tuple(exact_matches),
            reverse_matches=tuple(reverse_matches),
            mutual_skills=tuple(dict.fromkeys(exact_matches + reverse_matches)),
            partial_matches=tuple(partial_matches),
            partial_points=partial_points,
        )

    @staticmethod
    def _match_exact(candidate_skills: list[str], requester_skills: list[str]) -> list[str]:
        """Candidate skills present in the requester's list, in candidate order."""
        lookup = set(requester_skills)
        return [skill for skill in candidate_skills if skill in lookup]

    @staticmethod
    def _match_partial(candidate_skills: list[str], requester_skills: list[str]) -> list[str]:
        """Candidate skills that contain, or are contained in, any requester skill."""
        # dict keeps first-seen order for a deterministic result
        partial: dict[str, None] = {}
        for skill in candidate_skills:
            if skill in partial:
                continue
            for mine in requester_skills:
                if skill in mine or mine in skill:
                    partial[skill] = None
                    break
        return list(partial)

    def _to_percentage(self, raw_score: int) -> int:
        percentage = round(raw_score / self.score_ceiling * 100)
        return max(0, min(percentage, 100))


# Singleton instance
_skill_scorer: Optional[SkillScorer] = None


def get_skill_scorer() -> SkillScorer:
    """Get the skill scorer singleton instance."""
    global _skill_scorer
    if _skill_scorer is None:
        _skill_scorer = SkillScorer()
    return _skill_scorer
