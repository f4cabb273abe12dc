"""
Points and Leveling System

Pure point/level arithmetic. Persistence and notifications live in
ProgressionEngine.

Leveling:
- Flat POINTS_PER_LEVEL (100 by default) per level
- `points` is the balance inside the current level; overflow rolls into
  the level and the remainder carries over
- Levels are never lost: penalties drain the current balance down to 0

Point Award Rules:
- Study session: 15
- Cook meal: 10
- Cleaning task: 5
- Log expense: 3
- DIY task: 8
- Daily login: 5
- All daily tasks complete: 25
- Streak milestones: 50 (7 days), 200 (30 days)
- Achievement unlocks: 50
"""

from typing import Any, Dict, Tuple
import logging

from student_hub import config
from student_hub.models.achievement import TaskCategory
from student_hub.models.progression import ProgressionState

logger = logging.getLogger(__name__)


POINTS_CONFIG: Dict[str, int] = {
    # Task completion
    "STUDY_SESSION": 15,
    "COOK_MEAL": 10,
    "CLEAN_TASK": 5,
    "LOG_EXPENSE": 3,
    "DIY_TASK": 8,

    # Daily goals
    "DAILY_LOGIN": 5,
    "ALL_TASKS_COMPLETE": 25,

    # Streaks
    "WEEK_STREAK": 50,
    "MONTH_STREAK": 200,
}

CATEGORY_POINTS: Dict[TaskCategory, int] = {
    TaskCategory.STUDY: POINTS_CONFIG["STUDY_SESSION"],
    TaskCategory.MEAL: POINTS_CONFIG["COOK_MEAL"],
    TaskCategory.CLEANING: POINTS_CONFIG["CLEAN_TASK"],
    TaskCategory.EXPENSE: POINTS_CONFIG["LOG_EXPENSE"],
    TaskCategory.DIY: POINTS_CONFIG["DIY_TASK"],
}


def calculate_level(points: int, points_per_level: int = config.POINTS_PER_LEVEL) -> int:
    """
    Level reached by a points counter: floor(points / points_per_level) + 1

    Never below 1.
    """
    return max(1, points // points_per_level + 1)


def apply_points(
    state: ProgressionState,
    points: int,
    points_per_level: int = config.POINTS_PER_LEVEL
) -> Tuple[ProgressionState, bool]:
    """
    Add points to a progression state

    Args:
        state: Current state (not modified)
        points: Delta, may be negative
        points_per_level: Level size

    Returns:
        (new state, leveled_up)

    Example:
        >>> new_state, leveled_up = apply_points(ProgressionState(), 250)
        >>> new_state.level, new_state.points, leveled_up
        (3, 50, True)
    """
    balance = max(0, state.points + points)
    total_points = max(0, state.total_points + points)

    # calculate_level() on the within-level counter counts the current level as 1
    new_level = state.level + calculate_level(balance, points_per_level) - 1
    leveled_up = new_level > state.level

    if leveled_up:
        balance = balance % points_per_level

    new_state = state.model_copy(update={
        "points": balance,
        "total_points": total_points,
        "level": new_level,
    })
    return new_state, leveled_up


def get_points_for_activity(category: TaskCategory) -> int:
    """
    Points awarded for completing a task in a category

    Args:
        category: Task category (or its string value)

    Returns:
        Point amount
    """
    return CATEGORY_POINTS[TaskCategory(category)]


def get_level_progress(
    state: ProgressionState,
    points_per_level: int = config.POINTS_PER_LEVEL
) -> Dict[str, Any]:
    """
    Summarize level progress for display

    Returns:
        {
            'level': int,
            'points': int,
            'total_points': int,
            'points_to_next_level': int,
            'progress_percent': int (0-100)
        }
    """
    return {
        "level": state.level,
        "points": state.points,
        "total_points": state.total_points,
        "points_to_next_level": points_per_level - state.points,
        "progress_percent": int(state.points * 100 / points_per_level),
    }
