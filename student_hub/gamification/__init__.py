"""
Gamification system for Student Life Hub

This module implements the progression layer:
- Points and leveling
- Daily login streaks with milestone bonuses
- Achievement catalog and unlocks
- Bounded activity log

ProgressionEngine ties them to storage and the event bus.
"""

from student_hub.gamification.points_system import (
    POINTS_CONFIG,
    apply_points,
    calculate_level,
    get_points_for_activity,
)
from student_hub.gamification.streak_system import STREAK_MILESTONES, advance_streak
from student_hub.gamification.achievement_system import ACHIEVEMENTS, get_achievement
from student_hub.gamification.activity_log import ActivityLog
from student_hub.gamification.engine import ProgressionEngine

__all__ = [
    "POINTS_CONFIG",
    "apply_points",
    "calculate_level",
    "get_points_for_activity",
    "STREAK_MILESTONES",
    "advance_streak",
    "ACHIEVEMENTS",
    "get_achievement",
    "ActivityLog",
    "ProgressionEngine",
]
