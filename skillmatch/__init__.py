"""SkillMatch: learner/mentor skill matching and recommendation engine."""

__app_name__ = "SkillMatch"
__version__ = "0.1.0"
