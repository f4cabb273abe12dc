"""Achievement models for gamification"""
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, model_validator


class TaskCategory(str, Enum):
    """Task categories tracked by completion counters"""
    MEAL = "meal"
    STUDY = "study"
    CLEANING = "cleaning"
    DIY = "diy"
    EXPENSE = "expense"


class AchievementTrigger(str, Enum):
    """What an achievement's requirement is measured against"""
    TASKS_COMPLETED = "tasks_completed"
    CATEGORY_COUNT = "category_count"
    STREAK = "streak"
    LEVEL = "level"


class Achievement(BaseModel):
    """Achievement definition"""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    icon: str
    trigger: AchievementTrigger
    requirement: int
    category: Optional[TaskCategory] = None

    @model_validator(mode="after")
    def check_category(self) -> "Achievement":
        if self.trigger == AchievementTrigger.CATEGORY_COUNT and self.category is None:
            raise ValueError("category_count achievements need a category")
        return self
