"""
Core business logic modules for SkillMatch.

Submodules:
- matching: Skill compatibility scoring
- ranking: Recommendation, search and store interfaces
- exceptions: Errors surfaced to callers
"""
