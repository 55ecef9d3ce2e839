"""
Candidate-supply interfaces consumed by the ranking service.

The ranking core never talks to a database directly; it is handed an
object implementing one of these protocols. Implementations raise
``StoreUnavailableError`` when the backing store fails.
"""

from typing import Optional, Protocol, runtime_checkable

from skillmatch.core.matching import SkillProfile
from skillmatch.data.models import CandidateRecord


@runtime_checkable
class CandidateStore(Protocol):
    """Synchronous candidate store."""

    def fetch_profile(self, user_id: str) -> Optional[SkillProfile]:
        """Skill profile of a user, or None if the id does not resolve."""
        ...

    def fetch_candidate_pool(
        self, exclude_user_id: str, limit: Optional[int]
    ) -> list[CandidateRecord]:
        """Up to ``limit`` users other than ``exclude_user_id``, in store order."""
        ...

    def fetch_filtered_candidates(
        self,
        exclude_user_id: str,
        query: Optional[str] = None,
        skill_offered: Optional[str] = None,
        skill_wanted: Optional[str] = None,
        skip: int = 0,
        limit: int = 20,
    ) -> tuple[list[CandidateRecord], int]:
        """One page of filtered users plus the count over the whole filter."""
        ...


@runtime_checkable
class AsyncCandidateStore(Protocol):
    """Asynchronous candidate store."""

    async def fetch_profile_async(self, user_id: str) -> Optional[SkillProfile]:
        ...

    async def fetch_candidate_pool_async(
        self, exclude_user_id: str, limit: Optional[int]
    ) -> list[CandidateRecord]:
        ...

    async def fetch_filtered_candidates_async(
        self,
        exclude_user_id: str,
        query: Optional[str] = None,
        skill_offered: Optional[str] = None,
        skill_wanted: Optional[str] = None,
        skip: int = 0,
        limit: int = 20,
    ) -> tuple[list[CandidateRecord], int]:
        ...
