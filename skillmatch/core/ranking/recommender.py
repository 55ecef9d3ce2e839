"""
Ranking and retrieval over a candidate store.

Two entry points share the store but differ in what they do with it:
- recommend: pull a bounded candidate pool, score every candidate and
  keep the best matches
- search: let the store filter, order and paginate; nothing is scored

Every call recomputes from scratch; no results are cached between requests.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Any, Optional

from skillmatch.core.exceptions import RequesterNotFoundError
from skillmatch.core.matching import (
    MatchResult,
    SkillProfile,
    SkillScorer,
    get_skill_scorer,
    normalize_skill,
)
from skillmatch.data.models import (
    CandidateRecord,
    CandidateSummary,
    MutualMatch,
    RankedPage,
    ScoredCandidate,
    SearchFilters,
)
from skillmatch.utils.config import MatchingSettings, get_settings
from skillmatch.utils.constants import AuditAction
from skillmatch.utils.logger import audit_log, get_logger

logger = get_logger(__name__)


class SkillMatchService:
    """
    Recommendation, search and mutual-match retrieval.

    The store is injected so the service holds no connection state of its
    own; pass anything implementing ``CandidateStore`` for the synchronous
    methods or ``AsyncCandidateStore`` for the ``*_async`` ones.
    """

    def __init__(
        self,
        store: Any,
        scorer: Optional[SkillScorer] = None,
        matching_settings: Optional[MatchingSettings] = None,
    ):
        """
        Initialize the service.

        Args:
            store: Candidate store implementation
            scorer: Scorer to use; defaults to the shared instance
            matching_settings: Limits; defaults to application settings
        """
        self.store = store
        self.scorer = scorer or get_skill_scorer()
        self.settings = matching_settings or get_settings().matching

    # -------------------------------------------------------------------------
    # Recommendations
    # -------------------------------------------------------------------------

    def recommend(self, requester_id: str) -> RankedPage[ScoredCandidate]:
        """
        Top-scoring candidates for the requester.

        At most ``candidate_pool_limit`` candidates are fetched and scored,
        so in large pools some users are never considered.

        Raises:
            RequesterNotFoundError: requester id does not resolve
            StoreUnavailableError: the store call failed
        """
        requester = self.store.fetch_profile(requester_id)
        if requester is None:
            raise RequesterNotFoundError(requester_id)

        pool = self.store.fetch_candidate_pool(
            requester_id, self.settings.candidate_pool_limit
        )
        return self._rank(requester_id, requester, pool)

    async def recommend_async(self, requester_id: str) -> RankedPage[ScoredCandidate]:
        """Asynchronous variant of :meth:`recommend`."""
        requester = await self.store.fetch_profile_async(requester_id)
        if requester is None:
            raise RequesterNotFoundError(requester_id)

        pool = await self.store.fetch_candidate_pool_async(
            requester_id, self.settings.candidate_pool_limit
        )
        return self._rank(requester_id, requester, pool)

    def _rank(
        self,
        requester_id: str,
        requester: SkillProfile,
        pool: list[CandidateRecord],
    ) -> RankedPage[ScoredCandidate]:
        candidates = [
            c for c in pool[: self.settings.candidate_pool_limit]
            if c.user_id != requester_id
        ]
        results = self._score_all(requester, candidates)

        # sorted() is stable, so equal percentages keep pool order
        ranked = sorted(
            zip(candidates, results),
            key=lambda pair: pair[1].match_percentage,
            reverse=True,
        )
        top = [
            ScoredCandidate.from_match(record, result)
            for record, result in ranked[: self.settings.recommendation_limit]
        ]

        logger.info(
            f"Scored {len(candidates)} candidates for {requester_id}, "
            f"returning {len(top)}"
        )
        audit_log(
            AuditAction.RECOMMENDATIONS_GENERATED.value,
            {
                "requester_id": requester_id,
                "candidates_scored": len(candidates),
                "returned": len(top),
                "top_percentage": top[0].match_percentage if top else None,
            },
        )

        return RankedPage[ScoredCandidate](
            items=top,
            page=1,
            page_size=self.settings.recommendation_limit,
            total_count=len(top),
        )

    def _score_all(
        self, requester: SkillProfile, candidates: list[CandidateRecord]
    ) -> list[MatchResult]:
        """Score candidates, in parallel when configured; output keeps input order."""

        def score_one(record: CandidateRecord) -> MatchResult:
            return self.scorer.score(requester, record.skill_profile, record.user_id)

        workers = self.settings.scoring_workers
        if workers > 1 and len(candidates) > 1:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                return list(executor.map(score_one, candidates))
        return [score_one(record) for record in candidates]

    # -------------------------------------------------------------------------
    # Search
    # -------------------------------------------------------------------------

    def search(
        self,
        requester_id: str,
        query: Any = None,
        skill_offered: Any = None,
        skill_wanted: Any = None,
        page: Any = 1,
        page_size: Optional[int] = None,
    ) -> RankedPage[CandidateSummary]:
        """
        Filtered, paginated listing of other users.

        Ordering is by text relevance when a query is given, otherwise by
        most recently joined. Invalid filter values are ignored.

        Raises:
            RequesterNotFoundError: requester id does not resolve
            StoreUnavailableError: the store call failed
        """
        filters = self._build_filters(query, skill_offered, skill_wanted, page, page_size)

        if self.store.fetch_profile(requester_id) is None:
            raise RequesterNotFoundError(requester_id)

        records, total_count = self.store.fetch_filtered_candidates(
            requester_id,
            query=filters.query,
            skill_offered=filters.skill_offered,
            skill_wanted=filters.skill_wanted,
            skip=filters.skip,
            limit=filters.page_size,
        )
        return self._paginate(requester_id, filters, records, total_count)

    async def search_async(
        self,
        requester_id: str,
        query: Any = None,
        skill_offered: Any = None,
        skill_wanted: Any = None,
        page: Any = 1,
        page_size: Optional[int] = None,
    ) -> RankedPage[CandidateSummary]:
        """Asynchronous variant of :meth:`search`."""
        filters = self._build_filters(query, skill_offered, skill_wanted, page, page_size)

        if await self.store.fetch_profile_async(requester_id) is None:
            raise RequesterNotFoundError(requester_id)

        records, total_count = await self.store.fetch_filtered_candidates_async(
            requester_id,
            query=filters.query,
            skill_offered=filters.skill_offered,
            skill_wanted=filters.skill_wanted,
            skip=filters.skip,
            limit=filters.page_size,
        )
        return self._paginate(requester_id, filters, records, total_count)

    def _build_filters(
        self,
        query: Any,
        skill_offered: Any,
        skill_wanted: Any,
        page: Any,
        page_size: Optional[int],
    ) -> SearchFilters:
        return SearchFilters(
            query=query,
            skill_offered=skill_offered,
            skill_wanted=skill_wanted,
            page=page,
            page_size=page_size or self.settings.search_page_size,
        )

    def _paginate(
        self,
        requester_id: str,
        filters: SearchFilters,
        records: list[CandidateRecord],
        total_count: int,
    ) -> RankedPage[CandidateSummary]:
        items = [
            CandidateSummary.from_record(r)
            for r in records[: filters.page_size]
            if r.user_id != requester_id
        ]

        audit_log(
            AuditAction.SEARCH_EXECUTED.value,
            {
                "requester_id": requester_id,
                "query": filters.query,
                "skill_offered": filters.skill_offered,
                "skill_wanted": filters.skill_wanted,
                "page": filters.page,
                "total_count": total_count,
            },
            audit_type="ACCESS",
        )

        return RankedPage[CandidateSummary](
            items=items,
            page=filters.page,
            page_size=filters.page_size,
            total_count=total_count,
        )

    # -------------------------------------------------------------------------
    # Mutual matches
    # -------------------------------------------------------------------------

    def find_mutual_matches(self, requester_id: str) -> list[MutualMatch]:
        """
        Users the requester can both learn from and teach.

        Raises:
            RequesterNotFoundError: requester id does not resolve
            StoreUnavailableError: the store call failed
        """
        requester = self.store.fetch_profile(requester_id)
        if requester is None:
            raise RequesterNotFoundError(requester_id)

        pool = self.store.fetch_candidate_pool(
            requester_id, self.settings.mutual_pool_limit
        )
        return self._mutual(requester_id, requester, pool)

    async def find_mutual_matches_async(self, requester_id: str) -> list[MutualMatch]:
        """Asynchronous variant of :meth:`find_mutual_matches`."""
        requester = await self.store.fetch_profile_async(requester_id)
        if requester is None:
            raise RequesterNotFoundError(requester_id)

        pool = await self.store.fetch_candidate_pool_async(
            requester_id, self.settings.mutual_pool_limit
        )
        return self._mutual(requester_id, requester, pool)

    def _mutual(
        self,
        requester_id: str,
        requester: SkillProfile,
        pool: list[CandidateRecord],
    ) -> list[MutualMatch]:
        wanted = [normalize_skill(s) for s in requester.wanted]
        known = [normalize_skill(s) for s in requester.known]

        matches = []
        for record in pool:
            if record.user_id == requester_id:
                continue
            their_known = {normalize_skill(s) for s in record.skills_known}
            their_wanted = {normalize_skill(s) for s in record.skills_wanted}

            learn = [s for s in wanted if s in their_known]
            teach = [s for s in known if s in their_wanted]
            if learn and teach:
                matches.append(MutualMatch(
                    user_id=record.user_id,
                    name=record.name,
                    email=record.email,
                    learn_from_other=learn,
                    teach_to_other=teach,
                    match_score=len(learn) + len(teach),
                ))

        matches.sort(key=lambda m: m.match_score, reverse=True)

        audit_log(
            AuditAction.MUTUAL_MATCHES_FOUND.value,
            {"requester_id": requester_id, "matches": len(matches)},
        )
        return matches
