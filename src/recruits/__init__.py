from src.recruits.character_stats import CharacterStats
from src.recruits.recruit import Recruit, RecruitClass

__all__ = [
    "CharacterStats",
    "Recruit",
    "RecruitClass",
]
