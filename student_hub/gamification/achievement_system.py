"""
Achievement System

Static catalog of permanently unlockable badges and the predicates that
decide whether one is earned:
- Task totals (any category)
- Category counts (meals cooked, cleaning tasks, study sessions)
- Streak length
- Level reached

The catalog order is the evaluation order. Unlocking, bonuses and
notifications are handled by ProgressionEngine.
"""

from typing import Any, Dict, List, Optional
import logging

from student_hub.models.achievement import Achievement, AchievementTrigger, TaskCategory
from student_hub.models.activity import AggregateStats
from student_hub.models.progression import ProgressionState

logger = logging.getLogger(__name__)


ACHIEVEMENTS: List[Achievement] = [
    Achievement(
        id="first_steps",
        name="First Steps",
        description="Complete your first task",
        icon="👣",
        trigger=AchievementTrigger.TASKS_COMPLETED,
        requirement=1,
    ),
    Achievement(
        id="chef_apprentice",
        name="Chef Apprentice",
        description="Cook 10 meals",
        icon="👨‍🍳",
        trigger=AchievementTrigger.CATEGORY_COUNT,
        category=TaskCategory.MEAL,
        requirement=10,
    ),
    Achievement(
        id="clean_sweep",
        name="Clean Sweep",
        description="Complete 25 cleaning tasks",
        icon="✨",
        trigger=AchievementTrigger.CATEGORY_COUNT,
        category=TaskCategory.CLEANING,
        requirement=25,
    ),
    Achievement(
        id="scholar",
        name="Scholar",
        description="Complete 50 study sessions",
        icon="🎓",
        trigger=AchievementTrigger.CATEGORY_COUNT,
        category=TaskCategory.STUDY,
        requirement=50,
    ),
    Achievement(
        id="week_warrior",
        name="Week Warrior",
        description="Maintain a 7-day streak",
        icon="⚔️",
        trigger=AchievementTrigger.STREAK,
        requirement=7,
    ),
    Achievement(
        id="month_master",
        name="Month Master",
        description="Maintain a 30-day streak",
        icon="👑",
        trigger=AchievementTrigger.STREAK,
        requirement=30,
    ),
    Achievement(
        id="level_10",
        name="Rising Star",
        description="Reach level 10",
        icon="⭐",
        trigger=AchievementTrigger.LEVEL,
        requirement=10,
    ),
    Achievement(
        id="level_25",
        name="Super Student",
        description="Reach level 25",
        icon="🌟",
        trigger=AchievementTrigger.LEVEL,
        requirement=25,
    ),
    Achievement(
        id="level_50",
        name="Legend",
        description="Reach level 50",
        icon="💫",
        trigger=AchievementTrigger.LEVEL,
        requirement=50,
    ),
]

_ACHIEVEMENTS_BY_ID: Dict[str, Achievement] = {a.id: a for a in ACHIEVEMENTS}


def get_achievement(achievement_id: str) -> Optional[Achievement]:
    return _ACHIEVEMENTS_BY_ID.get(achievement_id)


def get_current_value(
    achievement: Achievement,
    stats: AggregateStats,
    state: ProgressionState
) -> int:
    """Value the achievement's requirement is compared against"""
    trigger = achievement.trigger

    if trigger == AchievementTrigger.TASKS_COMPLETED:
        return stats.total_tasks_completed
    elif trigger == AchievementTrigger.CATEGORY_COUNT:
        return stats.count_for(achievement.category)
    elif trigger == AchievementTrigger.STREAK:
        return state.streak
    elif trigger == AchievementTrigger.LEVEL:
        return state.level

    raise ValueError(f"Unknown achievement trigger: {trigger}")


def is_achievement_earned(
    achievement: Achievement,
    stats: AggregateStats,
    state: ProgressionState
) -> bool:
    return get_current_value(achievement, stats, state) >= achievement.requirement


def get_achievement_progress(
    stats: AggregateStats,
    state: ProgressionState,
    catalog: Optional[List[Achievement]] = None
) -> List[Dict[str, Any]]:
    """
    Progress towards every achievement, in catalog order

    Returns:
        [
            {
                'achievement_id': str,
                'name': str,
                'icon': str,
                'current': int,
                'requirement': int,
                'progress_percent': int (0-100),
                'unlocked': bool
            }
        ]
    """
    progress = []
    for achievement in catalog or ACHIEVEMENTS:
        current = get_current_value(achievement, stats, state)
        unlocked = state.has_achievement(achievement.id)
        percent = 100 if unlocked else min(100, int(current * 100 / achievement.requirement))
        progress.append({
            "achievement_id": achievement.id,
            "name": achievement.name,
            "icon": achievement.icon,
            "current": current,
            "requirement": achievement.requirement,
            "progress_percent": percent,
            "unlocked": unlocked,
        })
    return progress


def format_achievements_display(progress: List[Dict[str, Any]]) -> str:
    """
    Format achievement progress for a text display

    Args:
        progress: Output of get_achievement_progress()
    """
    unlocked = [p for p in progress if p["unlocked"]]
    lines = [f"🏆 ACHIEVEMENTS ({len(unlocked)}/{len(progress)})\n"]

    for item in progress:
        if item["unlocked"]:
            lines.append(f"{item['icon']} {item['name']} ✅")
        else:
            lines.append(
                f"🔒 {item['name']}: {item['current']}/{item['requirement']} "
                f"({item['progress_percent']}%)"
            )

    return "\n".join(lines)
