"""
Daily Streak Tracking

A streak counts consecutive calendar days with a login. Days are local
`date` values; no timezone normalization.

Transitions (on the first activation of a day):
- Last login today (or later, if the clock went back): nothing changes
- Last login yesterday: streak continues (+1)
- Anything else, including no previous login: streak restarts at 1

Milestones (7 and 30 days) pay a one-time bonus each time they are crossed.
"""

from typing import Any, Dict, List, Optional
from datetime import date, timedelta
import logging

from student_hub.gamification.points_system import POINTS_CONFIG
from student_hub.models.progression import ProgressionState

logger = logging.getLogger(__name__)


STREAK_MILESTONES: Dict[int, Dict[str, Any]] = {
    7: {"bonus": POINTS_CONFIG["WEEK_STREAK"], "reason": "Week streak milestone! 🔥"},
    30: {"bonus": POINTS_CONFIG["MONTH_STREAK"], "reason": "Month streak milestone! 👑"},
}


def advance_streak(state: ProgressionState, activity_date: date) -> Dict[str, Any]:
    """
    Compute the streak transition for an activation on activity_date

    Args:
        state: Current progression state (not modified)
        activity_date: Local calendar day of the activation

    Returns:
        {
            'state': ProgressionState,      # unchanged object if last login is not before activity_date
            'changed': bool,
            'streak_broken': bool,          # a previous streak was reset
            'old_streak': int,
            'milestone': Optional[int]      # 7 or 30 when just reached
        }
    """
    old_streak = state.streak
    last_login = state.last_login

    if last_login is not None and last_login >= activity_date:
        return {
            "state": state,
            "changed": False,
            "streak_broken": False,
            "old_streak": old_streak,
            "milestone": None,
        }

    milestone: Optional[int] = None
    streak_broken = False

    if last_login is not None and last_login == activity_date - timedelta(days=1):
        streak = old_streak + 1
        if streak in STREAK_MILESTONES:
            milestone = streak
    else:
        streak = 1
        streak_broken = old_streak > 0
        if streak_broken:
            gap_days = (activity_date - last_login).days if last_login else None
            logger.info(f"Streak broken. Was {old_streak}, gap was {gap_days} days")

    new_state = state.model_copy(update={
        "streak": streak,
        "longest_streak": max(state.longest_streak, streak),
        "last_login": activity_date,
    })

    return {
        "state": new_state,
        "changed": True,
        "streak_broken": streak_broken,
        "old_streak": old_streak,
        "milestone": milestone,
    }


def get_milestone_bonus(milestone: int) -> int:
    return STREAK_MILESTONES[milestone]["bonus"]


def next_milestone(streak: int) -> Optional[int]:
    """Smallest milestone above the current streak, None past the last one"""
    upcoming: List[int] = [m for m in sorted(STREAK_MILESTONES) if m > streak]
    return upcoming[0] if upcoming else None


def format_streak_display(state: ProgressionState) -> str:
    """
    Format streak for a text display

    Args:
        state: Progression state

    Returns:
        One-line summary
    """
    if state.streak == 0:
        return "No active streak yet. Log in tomorrow to start one! 💪"

    line = f"🔥 {state.streak} day streak"
    if state.longest_streak > state.streak:
        line += f" (best: {state.longest_streak})"

    upcoming = next_milestone(state.streak)
    if upcoming:
        line += f" - {upcoming - state.streak} days to the {upcoming}-day milestone"

    return line
