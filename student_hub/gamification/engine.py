"""
Progression Engine

Owns every write to the progression state:
- Point awards and level-ups
- Daily streak updates and milestone bonuses
- Achievement sweeps, unlocks and unlock bonuses

State is re-read from storage at the start of each operation and written
back before any side effect (activity log, events) happens, so a failed write
leaves nothing half-applied. Achievement and milestone bonuses re-enter
award_points(); the recursion ends because each threshold pays out once.
update_streak() pays its bonuses first and writes the new streak last, onto
a freshly loaded state.

Single-writer: two processes sharing one storage namespace can overwrite
each other's updates (last write wins per key).
"""

from typing import Any, Dict, List, Optional
from datetime import date
import logging

from pydantic import ValidationError as PydanticValidationError

from student_hub import config
from student_hub.events.bus import EventBus, Topic
from student_hub.exceptions import ValidationError
from student_hub.gamification.achievement_system import (
    ACHIEVEMENTS,
    get_achievement_progress,
    is_achievement_earned,
)
from student_hub.gamification.activity_log import ActivityLog
from student_hub.gamification.points_system import (
    POINTS_CONFIG,
    apply_points,
    get_level_progress,
)
from student_hub.gamification.streak_system import (
    STREAK_MILESTONES,
    advance_streak,
    get_milestone_bonus,
)
from student_hub.models.achievement import Achievement
from student_hub.models.activity import AggregateStats
from student_hub.models.progression import ProgressionState
from student_hub.storage.adapter import StorageAdapter
from student_hub.storage.keys import CATEGORY_COUNTER_KEYS, StorageKey

logger = logging.getLogger(__name__)


class ProgressionEngine:
    """
    Points, levels, streaks and achievements for the local user.

    Every public operation returns None/False instead of raising when input is
    invalid or storage rejects a write.
    """

    def __init__(
        self,
        storage: StorageAdapter,
        bus: EventBus,
        activity_log: Optional[ActivityLog] = None,
        points_per_level: int = config.POINTS_PER_LEVEL,
        achievement_bonus: int = config.ACHIEVEMENT_BONUS_POINTS,
        catalog: Optional[List[Achievement]] = None,
    ):
        self.storage = storage
        self.bus = bus
        self.activity_log = activity_log or ActivityLog(storage)
        self.points_per_level = points_per_level
        self.achievement_bonus = achievement_bonus
        self.catalog = catalog if catalog is not None else ACHIEVEMENTS
        logger.debug("ProgressionEngine initialized")

    # ------------------------------------------------------------------
    # State access
    # ------------------------------------------------------------------

    def load_state(self) -> ProgressionState:
        """Current progression state (defaults when nothing is stored)"""
        raw = self.storage.get(StorageKey.PROGRESSION) or {}
        achievements = self.storage.get(StorageKey.ACHIEVEMENTS) or []

        if not isinstance(raw, dict):
            logger.error(f"Stored progression is {type(raw).__name__}, expected object")
            raw = {}
        if not isinstance(achievements, list):
            logger.error(f"Stored achievements are {type(achievements).__name__}, expected list")
            achievements = []

        try:
            return ProgressionState.model_validate({
                **raw,
                "achievements": list(dict.fromkeys(achievements)),
            })
        except PydanticValidationError as e:
            logger.error(f"Stored progression is invalid, using defaults: {e}")
            return ProgressionState()

    def _save_progression(self, state: ProgressionState) -> bool:
        return self.storage.set(
            StorageKey.PROGRESSION,
            state.model_dump(mode="json", exclude={"achievements"}),
        )

    def _save_achievements(self, achievement_ids: List[str]) -> bool:
        return self.storage.set(StorageKey.ACHIEVEMENTS, achievement_ids)

    def _read_counter(self, key: StorageKey) -> int:
        value = self.storage.get(key, 0)
        if isinstance(value, bool) or not isinstance(value, int):
            logger.warning(f"Counter {key.value} holds {value!r}, treating as 0")
            return 0
        return value

    def get_user_stats(self) -> AggregateStats:
        """Completion counters maintained by the task modules"""
        return AggregateStats(
            total_tasks_completed=self._read_counter(StorageKey.TOTAL_TASKS_COMPLETED),
            by_category={
                category: self._read_counter(key)
                for category, key in CATEGORY_COUNTER_KEYS.items()
            },
        )

    # ------------------------------------------------------------------
    # Points
    # ------------------------------------------------------------------

    @staticmethod
    def _validate_points(points: Any) -> None:
        if isinstance(points, bool) or not isinstance(points, int):
            raise ValidationError(
                message="Points must be an integer",
                field="points",
                value=points,
                operation="award_points",
            )

    def award_points(self, points: int, reason: str) -> Optional[Dict[str, Any]]:
        """
        Award points and level up on overflow

        Args:
            points: Point delta (negative values drain the current level's
                balance but never remove a level)
            reason: Activity log label

        Returns:
            {
                'points': int,          # balance inside the current level
                'level': int,
                'leveled_up': bool,     # this award crossed a level boundary
                'old_level': int,
                'total_points': int,
                'points_awarded': int
            }
            Values are re-read after the achievement sweep, so bonuses paid by
            unlocks triggered here are included. None on invalid input or
            storage failure.
        """
        try:
            self._validate_points(points)
        except ValidationError:
            return None

        state = self.load_state()
        new_state, leveled_up = apply_points(state, points, self.points_per_level)

        if not self._save_progression(new_state):
            logger.error(f"Failed to persist {points} points for '{reason}'")
            return None

        self.activity_log.log(reason, points)

        logger.info(
            f"Awarded {points} points for '{reason}'. "
            f"Total: {new_state.total_points}, Level: {new_state.level}"
        )
        if leveled_up:
            logger.info(f"Leveled up from {state.level} to {new_state.level}!")

        self.check_achievements()

        self.bus.publish(Topic.POINTS_AWARDED, {
            "points": points,
            "reason": reason,
            "total_points": new_state.total_points,
        })
        if leveled_up:
            self.bus.publish(Topic.LEVEL_UP, {
                "level": new_state.level,
                "old_level": state.level,
            })

        final = self.load_state()
        return {
            "points": final.points,
            "level": final.level,
            "leveled_up": leveled_up,
            "old_level": state.level,
            "total_points": final.total_points,
            "points_awarded": points,
        }

    def get_progress(self) -> Dict[str, Any]:
        """
        Dashboard summary

        Returns:
            get_level_progress() fields plus 'streak', 'longest_streak',
            'last_login' and 'achievements_unlocked'
        """
        state = self.load_state()
        progress = get_level_progress(state, self.points_per_level)
        progress.update({
            "streak": state.streak,
            "longest_streak": state.longest_streak,
            "last_login": state.last_login,
            "achievements_unlocked": len(state.achievements),
        })
        return progress

    # ------------------------------------------------------------------
    # Streaks
    # ------------------------------------------------------------------

    def update_streak(self, activity_date: Optional[date] = None) -> Optional[Dict[str, Any]]:
        """
        Register today's activation

        Called once per session/day by whatever detects the app opening.

        Args:
            activity_date: Local calendar day (defaults to today)

        Returns:
            {
                'streak': int,
                'longest_streak': int,
                'continued': bool,          # False if this day (or a later one) was already counted
                'streak_broken': bool,
                'milestone_reached': bool,
                'milestone': Optional[int]
            }
            None on storage failure.
        """
        if activity_date is None:
            activity_date = date.today()

        state = self.load_state()
        transition = advance_streak(state, activity_date)

        if not transition["changed"]:
            return {
                "streak": state.streak,
                "longest_streak": state.longest_streak,
                "continued": False,
                "streak_broken": False,
                "milestone_reached": False,
                "milestone": None,
            }

        # Bonuses are paid against the stored (old) streak; streak achievements
        # are picked up by the next sweep
        milestone = transition["milestone"]
        if milestone:
            self.award_points(get_milestone_bonus(milestone), STREAK_MILESTONES[milestone]["reason"])

        self.award_points(POINTS_CONFIG["DAILY_LOGIN"], "Daily login")

        new_streak = transition["state"]
        final = self.load_state().model_copy(update={
            "streak": new_streak.streak,
            "longest_streak": new_streak.longest_streak,
            "last_login": new_streak.last_login,
        })
        if not self._save_progression(final):
            logger.error(f"Failed to persist streak update for {activity_date}")
            return None

        logger.info(f"Updated streak: {transition['old_streak']} → {final.streak} days")

        self.bus.publish(Topic.STREAK_UPDATED, {
            "streak": final.streak,
            "longest_streak": final.longest_streak,
            "streak_broken": transition["streak_broken"],
        })

        return {
            "streak": final.streak,
            "longest_streak": final.longest_streak,
            "continued": True,
            "streak_broken": transition["streak_broken"],
            "milestone_reached": milestone is not None,
            "milestone": milestone,
        }

    # ------------------------------------------------------------------
    # Achievements
    # ------------------------------------------------------------------

    def check_achievements(self) -> List[Achievement]:
        """
        Unlock every achievement whose requirement is met

        Achievements are evaluated in catalog order. Membership is re-read
        before each candidate because an unlock bonus can itself unlock later
        entries through the nested sweep.

        Returns:
            Achievements unlocked during this sweep (nested ones included),
            in unlock order
        """
        before = set(self.load_state().achievements)
        stats = self.get_user_stats()

        for achievement in self.catalog:
            state = self.load_state()
            if state.has_achievement(achievement.id):
                continue
            if is_achievement_earned(achievement, stats, state):
                self.unlock_achievement(achievement)

        after = self.load_state().achievements
        by_id = {a.id: a for a in self.catalog}
        return [by_id[a_id] for a_id in after if a_id not in before and a_id in by_id]

    def unlock_achievement(self, achievement: Achievement) -> bool:
        """
        Mark an achievement unlocked, notify and pay the unlock bonus

        Does not check whether it was already unlocked: calling it twice pays
        the bonus twice. check_achievements() is the guarded entry point.

        Returns:
            False if the unlock could not be persisted
        """
        state = self.load_state()
        achievement_ids = list(dict.fromkeys(state.achievements + [achievement.id]))

        if not self._save_achievements(achievement_ids):
            logger.error(f"Failed to persist achievement {achievement.id}")
            return False

        logger.info(
            f"Unlocked achievement: {achievement.id} "
            f"({achievement.name}) +{self.achievement_bonus} points"
        )

        self.bus.publish(Topic.ACHIEVEMENT_UNLOCKED, achievement.model_dump(mode="json"))
        self.award_points(self.achievement_bonus, f"Achievement unlocked: {achievement.name}")
        return True

    def get_achievement_progress(self) -> List[Dict[str, Any]]:
        return get_achievement_progress(self.get_user_stats(), self.load_state(), self.catalog)
