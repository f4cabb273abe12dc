"""Activity log and aggregate stats models"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from student_hub.models.achievement import TaskCategory


class ActivityLogEntry(BaseModel):
    """One point-earning event"""
    action: str
    points: int
    timestamp: datetime
    date: str  # DD/MM/YYYY

    @classmethod
    def create(cls, action: str, points: int, at: Optional[datetime] = None) -> "ActivityLogEntry":
        at = at or datetime.now()
        return cls(action=action, points=points, timestamp=at, date=at.strftime("%d/%m/%Y"))


class AggregateStats(BaseModel):
    """Completion counters read for achievement evaluation"""
    total_tasks_completed: int = 0
    by_category: dict[TaskCategory, int] = Field(default_factory=dict)

    def count_for(self, category: TaskCategory) -> int:
        return self.by_category.get(category, 0)
