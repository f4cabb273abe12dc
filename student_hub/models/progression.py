"""Progression state model"""
from datetime import date
from typing import Optional
from pydantic import BaseModel, Field


class ProgressionState(BaseModel):
    """Points, level and streak for the single local user

    `points` is the balance inside the current level; `total_points` is lifetime.
    """
    points: int = Field(default=0, ge=0)
    total_points: int = Field(default=0, ge=0)
    level: int = Field(default=1, ge=1)
    streak: int = Field(default=0, ge=0)
    longest_streak: int = Field(default=0, ge=0)
    last_login: Optional[date] = None
    achievements: list[str] = Field(default_factory=list)

    def has_achievement(self, achievement_id: str) -> bool:
        return achievement_id in self.achievements
