"""Candidate ranking, search and store interfaces."""

from .recommender import SkillMatchService
from .store import AsyncCandidateStore, CandidateStore

__all__ = [
    "AsyncCandidateStore",
    "CandidateStore",
    "SkillMatchService",
]
