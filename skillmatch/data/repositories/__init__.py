"""
Database repositories for SkillMatch data access.

This module provides repository classes for the database collections,
implementing the repository pattern for clean data access.
"""

# Base repository
from .base import BaseRepository

# Entity repositories
from .user_repository import UserRepository, get_user_repository

__all__ = [
    # Base
    "BaseRepository",
    # User
    "UserRepository",
    "get_user_repository",
]
