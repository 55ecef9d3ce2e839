"""
User repository for SkillMatch.

Stores user documents and implements the candidate-store interfaces the
ranking service consumes (profile lookup, bounded candidate pool, and
filtered/paginated search).
"""

import re
from typing import Any, Optional

from bson import ObjectId
from pydantic import ValidationError

from skillmatch.core.matching import SkillProfile
from skillmatch.data.models import (
    CandidateRecord,
    SkillUpdate,
    User,
    UserCreate,
    UserProfileInfo,
)
from skillmatch.utils.config import get_settings
from skillmatch.utils.constants import AuditAction
from skillmatch.utils.logger import audit_log, get_logger

from .base import BaseRepository

logger = get_logger(__name__)

# Fields needed to build a CandidateRecord
CANDIDATE_PROJECTION: dict[str, Any] = {
    "_id": 1,
    "name": 1,
    "email": 1,
    "skills_known": 1,
    "skills_to_learn": 1,
    "profile": 1,
    "created_at": 1,
}

SKILLS_PROJECTION: dict[str, Any] = {"skills_known": 1, "skills_to_learn": 1}


class UserRepository(BaseRepository[User]):
    """Repository for user documents and candidate retrieval."""

    @property
    def collection_name(self) -> str:
        return get_settings().database.users_collection

    @property
    def model_class(self) -> type[User]:
        return User

    # -------------------------------------------------------------------------
    # Query Construction
    # -------------------------------------------------------------------------

    @staticmethod
    def _exclude_filter(user_id: str) -> dict[str, Any]:
        """Filter that excludes one user, by ObjectId when the id is valid."""
        object_id: Any = ObjectId(user_id) if ObjectId.is_valid(user_id) else user_id
        return {"_id": {"$ne": object_id}}

    @staticmethod
    def _skill_regex(value: str) -> dict[str, Any]:
        """Case-insensitive substring match on any element of a skill list."""
        return {"$elemMatch": {"$regex": re.escape(value.strip()), "$options": "i"}}

    @classmethod
    def build_search_query(
        cls,
        exclude_user_id: str,
        query: Optional[str] = None,
        skill_offered: Optional[str] = None,
        skill_wanted: Optional[str] = None,
    ) -> dict[str, Any]:
        """
        Build the MongoDB filter for a candidate search.

        Args:
            exclude_user_id: Requester, never part of the result
            query: Free text matched against the text index
            skill_offered: Substring of a skill the candidate knows
            skill_wanted: Substring of a skill the candidate wants

        Returns:
            MongoDB query document
        """
        mongo_query = cls._exclude_filter(exclude_user_id)

        if query and query.strip():
            mongo_query["$text"] = {"$search": query.strip()}

        if skill_offered and skill_offered.strip():
            mongo_query["skills_known"] = cls._skill_regex(skill_offered)

        if skill_wanted and skill_wanted.strip():
            mongo_query["skills_to_learn"] = cls._skill_regex(skill_wanted)

        return mongo_query

    @staticmethod
    def build_search_sort(text_search: bool) -> list[tuple[str, Any]]:
        """Relevance first for text searches, newest users otherwise."""
        # _id is the final key so skip/limit windows never overlap on ties
        if text_search:
            return [("score", {"$meta": "textScore"}), ("created_at", -1), ("_id", -1)]
        return [("created_at", -1), ("_id", -1)]

    @staticmethod
    def build_search_projection(text_search: bool) -> dict[str, Any]:
        if text_search:
            return {**CANDIDATE_PROJECTION, "score": {"$meta": "textScore"}}
        return dict(CANDIDATE_PROJECTION)

    # -------------------------------------------------------------------------
    # Document Conversion
    # -------------------------------------------------------------------------

    @staticmethod
    def _to_record(document: dict[str, Any]) -> Optional[CandidateRecord]:
        """Convert a user document; malformed documents are skipped."""
        try:
            return CandidateRecord(
                user_id=str(document["_id"]),
                name=document.get("name") or "",
                email=document.get("email"),
                skills_known=document.get("skills_known"),
                skills_wanted=document.get("skills_to_learn"),
                profile=document.get("profile"),
                created_at=document.get("created_at"),
                text_score=document.get("score"),
            )
        except (KeyError, ValidationError) as e:
            logger.warning(f"Skipping malformed user document {document.get('_id')}: {e}")
            return None

    def _to_records(self, documents: list[dict[str, Any]]) -> list[CandidateRecord]:
        records = (self._to_record(doc) for doc in documents)
        return [r for r in records if r is not None]

    @staticmethod
    def _to_skill_profile(document: Optional[dict[str, Any]]) -> Optional[SkillProfile]:
        if document is None:
            return None
        return SkillProfile.from_lists(
            document.get("skills_known"), document.get("skills_to_learn")
        )

    # -------------------------------------------------------------------------
    # Candidate Store (sync)
    # -------------------------------------------------------------------------

    def fetch_profile(self, user_id: str) -> Optional[SkillProfile]:
        """Skill profile of a user, or None if the id does not resolve."""
        object_id = self._to_object_id(user_id)
        if object_id is None:
            return None
        collection = self._get_sync_collection()
        with self._store_errors("fetch_profile"):
            document = collection.find_one({"_id": object_id}, SKILLS_PROJECTION)
        return self._to_skill_profile(document)

    def fetch_candidate_pool(
        self, exclude_user_id: str, limit: Optional[int]
    ) -> list[CandidateRecord]:
        """Up to ``limit`` other users in natural store order."""
        collection = self._get_sync_collection()
        with self._store_errors("fetch_candidate_pool"):
            cursor = collection.find(self._exclude_filter(exclude_user_id), CANDIDATE_PROJECTION)
            if limit:
                cursor = cursor.limit(limit)
            documents = list(cursor)
        return self._to_records(documents)

    def fetch_filtered_candidates(
        self,
        exclude_user_id: str,
        query: Optional[str] = None,
        skill_offered: Optional[str] = None,
        skill_wanted: Optional[str] = None,
        skip: int = 0,
        limit: int = 20,
    ) -> tuple[list[CandidateRecord], int]:
        """One page of filtered users and the total count over the filter."""
        mongo_query = self.build_search_query(exclude_user_id, query, skill_offered, skill_wanted)
        text_search = "$text" in mongo_query
        collection = self._get_sync_collection()

        with self._store_errors("fetch_filtered_candidates"):
            cursor = (
                collection.find(mongo_query, self.build_search_projection(text_search))
                .sort(self.build_search_sort(text_search))
                .skip(skip)
                .limit(limit)
            )
            documents = list(cursor)
            total_count = collection.count_documents(mongo_query)

        return self._to_records(documents), total_count

    # -------------------------------------------------------------------------
    # Candidate Store (async)
    # -------------------------------------------------------------------------

    async def fetch_profile_async(self, user_id: str) -> Optional[SkillProfile]:
        """Skill profile of a user asynchronously."""
        object_id = self._to_object_id(user_id)
        if object_id is None:
            return None
        collection = self._get_async_collection()
        with self._store_errors("fetch_profile"):
            document = await collection.find_one({"_id": object_id}, SKILLS_PROJECTION)
        return self._to_skill_profile(document)

    async def fetch_candidate_pool_async(
        self, exclude_user_id: str, limit: Optional[int]
    ) -> list[CandidateRecord]:
        """Bounded candidate pool asynchronously."""
        collection = self._get_async_collection()
        with self._store_errors("fetch_candidate_pool"):
            cursor = collection.find(self._exclude_filter(exclude_user_id), CANDIDATE_PROJECTION)
            if limit:
                cursor = cursor.limit(limit)
            documents = await cursor.to_list(length=limit)
        return self._to_records(documents)

    async def fetch_filtered_candidates_async(
        self,
        exclude_user_id: str,
        query: Optional[str] = None,
        skill_offered: Optional[str] = None,
        skill_wanted: Optional[str] = None,
        skip: int = 0,
        limit: int = 20,
    ) -> tuple[list[CandidateRecord], int]:
        """Filtered page and total count asynchronously."""
        mongo_query = self.build_search_query(exclude_user_id, query, skill_offered, skill_wanted)
        text_search = "$text" in mongo_query
        collection = self._get_async_collection()

        with self._store_errors("fetch_filtered_candidates"):
            cursor = (
                collection.find(mongo_query, self.build_search_projection(text_search))
                .sort(self.build_search_sort(text_search))
                .skip(skip)
                .limit(limit)
            )
            documents = await cursor.to_list(length=limit)
            total_count = await collection.count_documents(mongo_query)

        return self._to_records(documents), total_count

    # -------------------------------------------------------------------------
    # Profile Operations
    # -------------------------------------------------------------------------

    def create_from_schema(self, data: UserCreate) -> User:
        """Create a user from a create schema."""
        user = User(
            name=data.name,
            email=data.email,
            role=data.role,
            profile=data.profile or UserProfileInfo(),
            skills_known=data.skills_known,
            skills_to_learn=data.skills_to_learn,
        )
        user = self.create(user)
        audit_log(
            AuditAction.USER_CREATED.value,
            {"user_id": str(user.id)},
            audit_type="UPDATE",
        )
        return user

    def get_skills(self, user_id: str) -> Optional[SkillUpdate]:
        """Current skill lists of a user."""
        user = self.get_by_id(user_id)
        if user is None:
            return None
        return SkillUpdate(skills_known=user.skills_known, skills_to_learn=user.skills_to_learn)

    def update_skills(self, user_id: str, data: SkillUpdate) -> Optional[User]:
        """Replace both skill lists of a user."""
        user = self.update(user_id, data.model_dump())
        if user is not None:
            self._audit_skills_update(user_id, data)
        return user

    async def update_skills_async(self, user_id: str, data: SkillUpdate) -> Optional[User]:
        """Replace both skill lists of a user asynchronously."""
        user = await self.update_async(user_id, data.model_dump())
        if user is not None:
            self._audit_skills_update(user_id, data)
        return user

    @staticmethod
    def _audit_skills_update(user_id: str, data: SkillUpdate) -> None:
        audit_log(
            AuditAction.SKILLS_UPDATED.value,
            {
                "user_id": user_id,
                "skills_known": len(data.skills_known),
                "skills_to_learn": len(data.skills_to_learn),
            },
            audit_type="UPDATE",
        )

    def update_profile_photo(self, user_id: str, photo_url: Optional[str]) -> Optional[User]:
        """Set or clear the profile photo URL."""
        return self.update(user_id, {"profile.photo": photo_url})


# Singleton instance
_user_repository: Optional[UserRepository] = None


def get_user_repository() -> UserRepository:
    """Get the user repository singleton instance."""
    global _user_repository
    if _user_repository is None:
        _user_repository = UserRepository()
    return _user_repository
