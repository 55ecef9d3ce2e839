"""
Shared test fixtures for the SkillMatch test suite.

Sets environment variables before any skillmatch imports to prevent config
failures, then provides factory fixtures and an in-memory candidate store.
"""

import os

# === Set environment BEFORE any skillmatch imports ===
os.environ.setdefault("APP_ENVIRONMENT", "testing")
os.environ.setdefault("DB_NAME", "skillmatch_test")

from datetime import datetime, timedelta
from typing import Any, Optional

import pytest

from skillmatch.core.exceptions import StoreUnavailableError
from skillmatch.core.matching import SkillProfile, SkillScorer
from skillmatch.core.ranking import SkillMatchService
from skillmatch.data.models import CandidateRecord
from skillmatch.utils.config import MatchingSettings


BASE_TIME = datetime(2024, 1, 1, 12, 0, 0)


# ---------------------------------------------------------------------------
# In-memory candidate store
# ---------------------------------------------------------------------------


class InMemoryCandidateStore:
    """
    Candidate store backed by a list, kept in insertion order.

    Text relevance is the number of name/skill fields containing the query.
    """

    def __init__(self, records: Optional[list[CandidateRecord]] = None, ignore_limit: bool = False):
        self.records = list(records or [])
        self.ignore_limit = ignore_limit
        self.fail = False
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def add(self, record: CandidateRecord) -> CandidateRecord:
        self.records.append(record)
        return record

    def _check(self, operation: str, **kwargs: Any) -> None:
        self.calls.append((operation, kwargs))
        if self.fail:
            raise StoreUnavailableError(operation)

    def fetch_profile(self, user_id: str) -> Optional[SkillProfile]:
        self._check("fetch_profile", user_id=user_id)
        for record in self.records:
            if record.user_id == user_id:
                return record.skill_profile
        return None

    def fetch_candidate_pool(self, exclude_user_id: str, limit: Optional[int]) -> list[CandidateRecord]:
        self._check("fetch_candidate_pool", exclude_user_id=exclude_user_id, limit=limit)
        pool = [r for r in self.records if r.user_id != exclude_user_id]
        if limit and not self.ignore_limit:
            pool = pool[:limit]
        return pool

    @staticmethod
    def _relevance(record: CandidateRecord, query: str) -> int:
        needle = query.lower()
        fields = [record.name, *record.skills_known, *record.skills_wanted]
        return sum(1 for f in fields if needle in f.lower())

    def fetch_filtered_candidates(
        self,
        exclude_user_id: str,
        query: Optional[str] = None,
        skill_offered: Optional[str] = None,
        skill_wanted: Optional[str] = None,
        skip: int = 0,
        limit: int = 20,
    ) -> tuple[list[CandidateRecord], int]:
        self._check(
            "fetch_filtered_candidates",
            exclude_user_id=exclude_user_id,
            query=query,
            skill_offered=skill_offered,
            skill_wanted=skill_wanted,
            skip=skip,
            limit=limit,
        )
        matched = [r for r in self.records if r.user_id != exclude_user_id]
        if skill_offered:
            matched = [r for r in matched if any(skill_offered.lower() in s.lower() for s in r.skills_known)]
        if skill_wanted:
            matched = [r for r in matched if any(skill_wanted.lower() in s.lower() for s in r.skills_wanted)]

        matched.sort(key=lambda r: r.created_at or BASE_TIME, reverse=True)
        if query:
            matched = [r for r in matched if self._relevance(r, query) > 0]
            matched.sort(key=lambda r: self._relevance(r, query), reverse=True)

        return matched[skip:skip + limit], len(matched)


class AsyncInMemoryCandidateStore:
    """Async facade over an InMemoryCandidateStore."""

    def __init__(self, store: InMemoryCandidateStore):
        self.store = store

    async def fetch_profile_async(self, user_id: str) -> Optional[SkillProfile]:
        return self.store.fetch_profile(user_id)

    async def fetch_candidate_pool_async(self, exclude_user_id: str, limit: Optional[int]) -> list[CandidateRecord]:
        return self.store.fetch_candidate_pool(exclude_user_id, limit)

    async def fetch_filtered_candidates_async(self, exclude_user_id: str, **kwargs: Any) -> tuple[list[CandidateRecord], int]:
        return self.store.fetch_filtered_candidates(exclude_user_id, **kwargs)


# ---------------------------------------------------------------------------
# Factory fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def make_profile():
    """Factory that returns a callable to build SkillProfile snapshots."""

    def _factory(known: Optional[list[str]] = None, wanted: Optional[list[str]] = None) -> SkillProfile:
        return SkillProfile.from_lists(known or [], wanted or [])

    return _factory


@pytest.fixture
def make_record():
    """Factory that returns a callable to build CandidateRecord instances."""

    counter = {"n": 0}

    def _factory(
        user_id: Optional[str] = None,
        name: Optional[str] = None,
        known: Optional[list[str]] = None,
        wanted: Optional[list[str]] = None,
        created_at: Optional[datetime] = None,
        **kwargs: Any,
    ) -> CandidateRecord:
        counter["n"] += 1
        n = counter["n"]
        return CandidateRecord(
            user_id=user_id or f"user-{n}",
            name=name or f"User {n}",
            email=kwargs.pop("email", f"user{n}@example.com"),
            skills_known=known or [],
            skills_wanted=wanted or [],
            created_at=created_at or BASE_TIME + timedelta(minutes=n),
            **kwargs,
        )

    return _factory


# ---------------------------------------------------------------------------
# Engine fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def scorer():
    return SkillScorer()


@pytest.fixture
def matching_settings():
    return MatchingSettings(
        candidate_pool_limit=100,
        recommendation_limit=20,
        search_page_size=20,
        mutual_pool_limit=1000,
        scoring_workers=1,
    )


@pytest.fixture
def store():
    return InMemoryCandidateStore()


@pytest.fixture
def requester(store, make_record):
    """Requester who knows python/react and wants design."""
    return store.add(make_record(user_id="requester", name="Rita", known=["Python", "React"], wanted=["Design"]))


@pytest.fixture
def service(store, scorer, matching_settings):
    return SkillMatchService(store, scorer=scorer, matching_settings=matching_settings)


@pytest.fixture
def make_store():
    """Factory for additional in-memory stores."""
    return InMemoryCandidateStore


@pytest.fixture
def make_async_store():
    """Factory wrapping an in-memory store in the async interface."""
    return AsyncInMemoryCandidateStore
