"""
Tests for skillmatch.core.ranking.recommender: SkillMatchService.

All tests run against the in-memory candidate store from conftest, so no
database is required.
"""

import asyncio
from unittest.mock import MagicMock

import pytest

from skillmatch.core.exceptions import RequesterNotFoundError, StoreUnavailableError
from skillmatch.core.ranking import SkillMatchService
from skillmatch.utils.config import MatchingSettings
from skillmatch.utils.constants import ErrorCode


# ── recommend ────────────────────────────────────────────────────────────────


class TestRecommend:
    def test_sorted_by_percentage_descending(self, service, store, requester, make_record):
        store.add(make_record(name="Nobody", known=["cooking"]))
        store.add(make_record(name="Designer", known=["design"], wanted=["python"]))
        store.add(make_record(name="Learner", wanted=["python"]))

        page = service.recommend("requester")

        names = [c.name for c in page.items]
        assert names == ["Designer", "Learner", "Nobody"]
        percentages = [c.match_percentage for c in page.items]
        assert percentages == sorted(percentages, reverse=True)

    def test_ties_keep_pool_order(self, service, store, requester, make_record):
        for i in range(5):
            store.add(make_record(user_id=f"tie-{i}", known=["design"]))

        page = service.recommend("requester")
        assert [c.user_id for c in page.items] == [f"tie-{i}" for i in range(5)]

    def test_result_carries_match_details(self, service, store, requester, make_record):
        store.add(make_record(user_id="d", known=["Design", "figma"], wanted=["python"]))

        candidate = service.recommend("requester").items[0]

        assert candidate.exact_matches == ["design"]
        assert candidate.reverse_matches == ["python"]
        assert candidate.mutual_skills == ["design", "python"]
        assert candidate.match_score == 10
        assert candidate.match_percentage == 10
        assert candidate.skills_offered == ["Design", "figma"]

    def test_returns_at_most_twenty(self, service, store, requester, make_record):
        for _ in range(50):
            store.add(make_record(known=["design"]))

        page = service.recommend("requester")

        assert len(page.items) == 20
        assert page.page == 1
        assert page.total_count == 20

    def test_only_first_hundred_candidates_scored(self, service, store, requester, make_record):
        for i in range(100):
            store.add(make_record(user_id=f"early-{i}", known=["cooking"]))
        for i in range(50):
            store.add(make_record(user_id=f"late-{i}", known=["design"], wanted=["python"]))

        page = service.recommend("requester")

        assert len(page.items) <= 20
        assert all(c.user_id.startswith("early-") for c in page.items)
        pool_calls = [kw for op, kw in store.calls if op == "fetch_candidate_pool"]
        assert pool_calls == [{"exclude_user_id": "requester", "limit": 100}]

    def test_pool_truncated_when_store_ignores_limit(self, scorer, matching_settings, make_record, make_store):
        store = make_store(ignore_limit=True)
        store.add(make_record(user_id="requester", wanted=["design"]))
        for i in range(100):
            store.add(make_record(user_id=f"early-{i}"))
        store.add(make_record(user_id="late", known=["design"]))

        service = SkillMatchService(store, scorer=scorer, matching_settings=matching_settings)
        page = service.recommend("requester")

        assert "late" not in [c.user_id for c in page.items]

    def test_requester_never_recommended(self, service, store, make_record, monkeypatch):
        monkeypatch.setattr(store, "fetch_candidate_pool", lambda exclude_user_id, limit: list(store.records))
        store.add(make_record(user_id="requester", known=["design"], wanted=["design"]))
        store.add(make_record(user_id="other", known=["design"]))

        page = service.recommend("requester")

        assert [c.user_id for c in page.items] == ["other"]

    def test_empty_pool(self, service, requester):
        page = service.recommend("requester")
        assert page.items == []
        assert page.total_count == 0

    def test_requester_not_found(self, service, store):
        with pytest.raises(RequesterNotFoundError) as exc_info:
            service.recommend("ghost")

        assert exc_info.value.code == ErrorCode.REQUESTER_NOT_FOUND
        assert [op for op, _ in store.calls] == ["fetch_profile"]

    def test_store_failure_propagates(self, service, store, requester):
        store.fail = True
        with pytest.raises(StoreUnavailableError) as exc_info:
            service.recommend("requester")
        assert exc_info.value.code == ErrorCode.STORE_UNAVAILABLE

    def test_parallel_scoring_matches_inline(self, store, scorer, requester, make_record):
        skills = ["design", "python", "react", "figma", "cooking"]
        for i in range(60):
            store.add(make_record(
                user_id=f"c-{i}",
                known=[skills[i % 5], skills[(i * 3) % 5]],
                wanted=[skills[(i * 2) % 5]],
            ))

        inline = SkillMatchService(store, scorer=scorer, matching_settings=MatchingSettings(scoring_workers=1))
        parallel = SkillMatchService(store, scorer=scorer, matching_settings=MatchingSettings(scoring_workers=4))

        assert inline.recommend("requester").items == parallel.recommend("requester").items

    def test_custom_limits(self, store, scorer, requester, make_record):
        for i in range(10):
            store.add(make_record(user_id=f"c-{i}", known=["design"] if i >= 5 else []))

        settings = MatchingSettings(candidate_pool_limit=5, recommendation_limit=3)
        service = SkillMatchService(store, scorer=scorer, matching_settings=settings)
        page = service.recommend("requester")

        assert [c.user_id for c in page.items] == ["c-0", "c-1", "c-2"]
        assert all(c.match_percentage == 0 for c in page.items)

    def test_async_matches_sync(self, service, store, requester, make_record, make_async_store):
        store.add(make_record(user_id="d", known=["design"]))
        store.add(make_record(user_id="p", wanted=["python"]))

        async_service = SkillMatchService(
            make_async_store(store),
            scorer=service.scorer,
            matching_settings=service.settings,
        )
        result = asyncio.run(async_service.recommend_async("requester"))

        assert result.items == service.recommend("requester").items


# ── search ───────────────────────────────────────────────────────────────────


class TestSearch:
    @pytest.fixture
    def populated(self, store, requester, make_record):
        for i in range(45):
            store.add(make_record(user_id=f"u-{i:02d}", known=["python"] if i % 2 else ["design"]))
        return store

    def test_no_filters_lists_everyone_newest_first(self, service, populated):
        page = service.search("requester")

        assert page.total_count == 45
        assert page.total_pages == 3
        assert page.page == 1
        assert len(page.items) == 20
        assert page.items[0].user_id == "u-44"
        assert "requester" not in [c.user_id for c in page.items]

    def test_serialized_page_carries_total_pages(self, service, populated):
        dumped = service.search("requester").model_dump()

        assert dumped["total_pages"] == 3
        assert dumped["total_count"] == 45
        assert dumped["has_next"] is True

    def test_pages_concatenate_to_full_listing(self, service, populated):
        pages = [service.search("requester", page=n) for n in (1, 2, 3)]

        ids = [c.user_id for p in pages for c in p.items]
        assert ids == [f"u-{i:02d}" for i in reversed(range(45))]
        assert len(pages[2].items) == 5
        assert all(p.total_count == 45 for p in pages)

    def test_page_past_end_is_empty(self, service, populated):
        page = service.search("requester", page=4)
        assert page.items == []
        assert page.total_count == 45

    @pytest.mark.parametrize("bad_page", [0, -3, "abc", None])
    def test_page_clamped_to_one(self, service, populated, store, bad_page):
        page = service.search("requester", page=bad_page)

        assert page.page == 1
        _, kwargs = store.calls[-1]
        assert kwargs["skip"] == 0

    def test_skip_computed_from_page(self, service, populated, store):
        service.search("requester", page=3)
        _, kwargs = store.calls[-1]
        assert kwargs["skip"] == 40
        assert kwargs["limit"] == 20

    def test_skill_offered_filter(self, service, populated):
        page = service.search("requester", skill_offered="PYTH")
        assert page.total_count == 22
        assert all("python" in c.skills_offered for c in page.items)

    def test_skill_wanted_filter(self, service, store, requester, make_record):
        store.add(make_record(user_id="w", wanted=["Graphic Design"]))
        store.add(make_record(user_id="x", wanted=["cooking"]))

        page = service.search("requester", skill_wanted="design")
        assert [c.user_id for c in page.items] == ["w"]

    def test_invalid_filters_ignored(self, service, populated, store):
        page = service.search("requester", skill_offered=123, skill_wanted=["x"], query={"$ne": 1})

        assert page.total_count == 45
        _, kwargs = store.calls[-1]
        assert kwargs["query"] is None
        assert kwargs["skill_offered"] is None
        assert kwargs["skill_wanted"] is None

    def test_blank_query_treated_as_absent(self, service, populated, store):
        service.search("requester", query="   ")
        _, kwargs = store.calls[-1]
        assert kwargs["query"] is None

    def test_query_orders_by_relevance(self, service, store, requester, make_record):
        store.add(make_record(user_id="one", name="Sam", known=["guitar"]))
        store.add(make_record(user_id="two", name="Guitar Gus", known=["guitar", "bass guitar"]))
        store.add(make_record(user_id="none", name="Zed", known=["piano"]))

        page = service.search("requester", query="guitar")

        assert [c.user_id for c in page.items] == ["two", "one"]
        assert page.total_count == 2

    def test_search_does_not_score(self, store, matching_settings, populated):
        scorer = MagicMock()
        service = SkillMatchService(store, scorer=scorer, matching_settings=matching_settings)

        service.search("requester")
        scorer.score.assert_not_called()

    def test_requester_not_found(self, service, populated):
        with pytest.raises(RequesterNotFoundError):
            service.search("ghost")

    def test_store_failure_propagates(self, service, populated, store):
        store.fail = True
        with pytest.raises(StoreUnavailableError):
            service.search("requester")

    def test_custom_page_size(self, service, populated):
        page = service.search("requester", page_size=10)
        assert len(page.items) == 10
        assert page.total_pages == 5

    def test_async_matches_sync(self, service, populated, make_async_store):
        async_service = SkillMatchService(
            make_async_store(populated),
            scorer=service.scorer,
            matching_settings=service.settings,
        )
        result = asyncio.run(async_service.search_async("requester", page=2))

        assert result.items == service.search("requester", page=2).items
        assert result.total_count == 45


# ── find_mutual_matches ──────────────────────────────────────────────────────


class TestMutualMatches:
    def test_requires_both_directions(self, service, store, requester, make_record):
        store.add(make_record(user_id="both", known=["design"], wanted=["python"]))
        store.add(make_record(user_id="teach-only", known=["design"]))
        store.add(make_record(user_id="learn-only", wanted=["react"]))

        matches = service.find_mutual_matches("requester")

        assert [m.user_id for m in matches] == ["both"]
        assert matches[0].learn_from_other == ["design"]
        assert matches[0].teach_to_other == ["python"]
        assert matches[0].match_score == 2

    def test_sorted_by_score(self, service, store, requester, make_record):
        store.add(make_record(user_id="small", known=["design"], wanted=["python"]))
        store.add(make_record(user_id="big", known=["Design"], wanted=["python", "REACT"]))
        store.add(make_record(user_id="small-2", known=["design"], wanted=["react"]))

        matches = service.find_mutual_matches("requester")

        assert [m.user_id for m in matches] == ["big", "small", "small-2"]
        assert matches[0].match_score == 3

    def test_requester_not_found(self, service):
        with pytest.raises(RequesterNotFoundError):
            service.find_mutual_matches("ghost")

    def test_uses_mutual_pool_limit(self, service, store, requester):
        service.find_mutual_matches("requester")
        pool_calls = [kw for op, kw in store.calls if op == "fetch_candidate_pool"]
        assert pool_calls[0]["limit"] == 1000

    def test_async(self, service, store, requester, make_record, make_async_store):
        store.add(make_record(user_id="both", known=["design"], wanted=["react"]))
        async_service = SkillMatchService(
            make_async_store(store),
            scorer=service.scorer,
            matching_settings=service.settings,
        )
        matches = asyncio.run(async_service.find_mutual_matches_async("requester"))
        assert [m.user_id for m in matches] == ["both"]
