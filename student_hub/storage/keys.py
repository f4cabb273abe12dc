"""
Storage keys - every key the app writes

Keys are flat strings in one namespace. Backups refer to them by enum name
(e.g. "USER_PROFILE"), so renaming a member breaks old backups.
"""

from enum import Enum
from typing import Dict, List, Optional

from student_hub.models.achievement import TaskCategory


class StorageKey(str, Enum):
    # User profile & gamification
    USER_PROFILE = "slh_user_profile"
    PROGRESSION = "slh_user_data"
    ACHIEVEMENTS = "slh_achievements"
    ACTIVITY_LOG = "slh_activity_log"
    LAST_ACTIVE = "slh_last_active"

    # Completion counters
    TOTAL_TASKS_COMPLETED = "slh_total_tasks_completed"
    MEALS_COOKED_COUNT = "slh_meals_cooked_count"
    STUDY_SESSIONS_COUNT = "slh_study_sessions_count"
    CLEANING_TASKS_COUNT = "slh_cleaning_tasks_count"
    DIY_TASKS_COUNT = "slh_diy_tasks_count"
    EXPENSES_LOGGED_COUNT = "slh_expenses_logged_count"

    # Study section
    STUDY_TIMETABLE = "slh_study_timetable"
    STUDY_GOALS = "slh_study_goals"
    FLASHCARDS = "slh_flashcards"
    PRACTICE_PROGRESS = "slh_practice_progress"

    # Meals section
    PLANNED_MEALS = "slh_planned_meals"
    FAVORITE_MEALS = "slh_favorite_meals"
    CUSTOM_MEALS = "slh_custom_meals"
    MEAL_RATINGS = "slh_meal_ratings"

    # Shopping & planning
    SHOPPING_LIST = "slh_shopping_list"
    LEFTOVERS = "slh_leftovers"

    # Cleaning & DIY
    CLEANING_ROUTINE = "slh_cleaning_routine"
    DIY_TASKS = "slh_diy_tasks"

    # Budget & money
    BUDGET_DATA = "slh_budget_data"
    SAVINGS_GOALS = "slh_savings_goals"

    # Uni essentials
    UNI_CHECKLIST = "slh_uni_checklist"

    # Completed items
    COMPLETED_ITEMS = "slh_completed_items"

    # Settings & preferences
    USER_TIER = "slh_user_tier"
    USER_PREFERENCES = "slh_user_preferences"
    NOTIFICATION_SETTINGS = "slh_notification_settings"


# Keys owned by each app section, used by clear_section()
SECTION_KEYS: Dict[str, List[StorageKey]] = {
    "study": [
        StorageKey.STUDY_TIMETABLE,
        StorageKey.STUDY_GOALS,
        StorageKey.FLASHCARDS,
        StorageKey.PRACTICE_PROGRESS,
    ],
    "meals": [
        StorageKey.PLANNED_MEALS,
        StorageKey.FAVORITE_MEALS,
        StorageKey.CUSTOM_MEALS,
        StorageKey.MEAL_RATINGS,
        StorageKey.SHOPPING_LIST,
        StorageKey.LEFTOVERS,
    ],
    "cleaning": [StorageKey.CLEANING_ROUTINE],
    "diy": [StorageKey.DIY_TASKS],
    "budget": [StorageKey.BUDGET_DATA, StorageKey.SAVINGS_GOALS],
    "uni": [StorageKey.UNI_CHECKLIST],
}

CATEGORY_COUNTER_KEYS: Dict[TaskCategory, StorageKey] = {
    TaskCategory.MEAL: StorageKey.MEALS_COOKED_COUNT,
    TaskCategory.STUDY: StorageKey.STUDY_SESSIONS_COUNT,
    TaskCategory.CLEANING: StorageKey.CLEANING_TASKS_COUNT,
    TaskCategory.DIY: StorageKey.DIY_TASKS_COUNT,
    TaskCategory.EXPENSE: StorageKey.EXPENSES_LOGGED_COUNT,
}


def key_for_name(name: str) -> Optional[StorageKey]:
    """Resolve a backup entry name to its key, None if unknown"""
    try:
        return StorageKey[name]
    except KeyError:
        return None
