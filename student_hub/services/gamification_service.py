"""
GamificationService - Gamification Business Logic

Entry points the task modules (meals, study, cleaning, DIY, budget) call when
something happens. Maintains the completion counters the achievement rules
read, then drives ProgressionEngine and builds user-facing messages.
"""

import logging
from typing import Dict, List, Any, Optional
from datetime import date

from student_hub.exceptions import ValidationError
from student_hub.gamification.engine import ProgressionEngine
from student_hub.gamification.points_system import POINTS_CONFIG, get_points_for_activity
from student_hub.gamification.streak_system import format_streak_display
from student_hub.models.achievement import TaskCategory
from student_hub.storage.adapter import StorageAdapter
from student_hub.storage.keys import CATEGORY_COUNTER_KEYS, StorageKey

logger = logging.getLogger(__name__)

TASK_LABELS = {
    TaskCategory.MEAL: "Cooked a meal",
    TaskCategory.STUDY: "Completed a study session",
    TaskCategory.CLEANING: "Completed a cleaning task",
    TaskCategory.DIY: "Completed a DIY task",
    TaskCategory.EXPENSE: "Logged an expense",
}


class GamificationService:
    """
    Service for gamification features.

    Responsibilities:
    - Task completion counters
    - Point awards per task category
    - Daily activation (streak) processing
    - Result messages for the presentation layer
    """

    def __init__(self, storage: StorageAdapter, engine: ProgressionEngine):
        """
        Initialize GamificationService.

        Args:
            storage: Storage adapter holding the counters
            engine: Progression engine sharing the same storage
        """
        self.storage = storage
        self.engine = engine
        logger.debug("GamificationService initialized")

    def process_task_completion(
        self,
        category: TaskCategory,
        item_name: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Process gamification for a completed task.

        Counters are incremented before points are awarded so the
        achievement sweep inside the award already sees the new totals.

        Args:
            category: Task category (or its string value)
            item_name: Optional task title for the activity log

        Returns:
            {
                'success': bool,
                'points_awarded': int,
                'level_up': bool,
                'new_level': int,
                'achievements_unlocked': list of achievement dicts,
                'message': str
            }
        """
        try:
            category = self._parse_category(category)
        except ValidationError:
            return self._empty_result()

        before = set(self.engine.load_state().achievements)

        if not self._increment_counters(category):
            logger.error(f"Failed to record {category.value} completion")
            return self._empty_result()

        points = get_points_for_activity(category)
        reason = TASK_LABELS[category]
        if item_name:
            reason = f"{reason}: {item_name}"

        award = self.engine.award_points(points, reason)
        if award is None:
            return self._empty_result()

        result = {
            'success': True,
            'points_awarded': points,
            'level_up': award['leveled_up'],
            'new_level': award['level'],
            'achievements_unlocked': self._unlocked_since(before),
            'message': ''
        }
        result['message'] = self._build_task_message(result)

        logger.info(
            f"Gamification processed for {category.value} completion: "
            f"points={points}, level={award['level']}, "
            f"achievements={len(result['achievements_unlocked'])}"
        )
        return result

    def process_daily_activation(self, activity_date: Optional[date] = None) -> Dict[str, Any]:
        """
        Process the first app activation of a day (streak + login bonus).

        Returns:
            {
                'success': bool,
                'streak': int,
                'continued': bool,
                'milestone_reached': bool,
                'achievements_unlocked': list,
                'message': str
            }
        """
        before = set(self.engine.load_state().achievements)
        streak_result = self.engine.update_streak(activity_date)

        if streak_result is None:
            return {
                'success': False,
                'streak': 0,
                'continued': False,
                'milestone_reached': False,
                'achievements_unlocked': [],
                'message': ''
            }

        result = {
            'success': True,
            'streak': streak_result['streak'],
            'continued': streak_result['continued'],
            'milestone_reached': streak_result['milestone_reached'],
            'achievements_unlocked': self._unlocked_since(before),
            'message': ''
        }
        result['message'] = self._build_activation_message(result, streak_result)
        return result

    def process_all_tasks_complete(self) -> Dict[str, Any]:
        """Award the bonus for finishing every task planned for today."""
        before = set(self.engine.load_state().achievements)
        points = POINTS_CONFIG["ALL_TASKS_COMPLETE"]

        award = self.engine.award_points(points, "All tasks complete! 🎯")
        if award is None:
            return self._empty_result()

        result = {
            'success': True,
            'points_awarded': points,
            'level_up': award['leveled_up'],
            'new_level': award['level'],
            'achievements_unlocked': self._unlocked_since(before),
            'message': ''
        }
        result['message'] = self._build_task_message(result)
        return result

    def get_dashboard(self, recent_limit: int = 5) -> Dict[str, Any]:
        """
        Everything the dashboard shows in one call.

        Returns:
            {
                'progress': engine.get_progress(),
                'stats': AggregateStats as dict,
                'recent_activity': list of entry dicts,
                'achievements': engine.get_achievement_progress()
            }
        """
        return {
            'progress': self.engine.get_progress(),
            'stats': self.engine.get_user_stats().model_dump(mode="json"),
            'recent_activity': [
                entry.model_dump(mode="json")
                for entry in self.engine.activity_log.get_entries(recent_limit)
            ],
            'achievements': self.engine.get_achievement_progress(),
        }

    def _parse_category(self, category: Any) -> TaskCategory:
        try:
            return TaskCategory(category)
        except ValueError:
            raise ValidationError(
                message=f"Unknown task category '{category}'",
                field="category",
                value=category,
                operation="process_task_completion",
            )

    def _increment_counters(self, category: TaskCategory) -> bool:
        """Bump the category counter and the all-tasks total (both or neither)."""
        stats = self.engine.get_user_stats()
        category_key = CATEGORY_COUNTER_KEYS[category]
        had_category_count = self.storage.exists(category_key)

        if not self.storage.set(category_key, stats.count_for(category) + 1):
            return False
        if self.storage.set(StorageKey.TOTAL_TASKS_COMPLETED, stats.total_tasks_completed + 1):
            return True

        if had_category_count:
            restored = self.storage.set(category_key, stats.count_for(category))
        else:
            restored = self.storage.remove(category_key)
        if not restored:
            logger.error(f"Could not roll back {category_key.value} after a failed total update")
        return False

    def _unlocked_since(self, before: set) -> List[Dict[str, Any]]:
        unlocked = []
        for achievement_id in self.engine.load_state().achievements:
            if achievement_id in before:
                continue
            achievement = next((a for a in self.engine.catalog if a.id == achievement_id), None)
            if achievement:
                unlocked.append(achievement.model_dump(mode="json"))
        return unlocked

    def _empty_result(self) -> Dict[str, Any]:
        return {
            'success': False,
            'points_awarded': 0,
            'level_up': False,
            'new_level': self.engine.load_state().level,
            'achievements_unlocked': [],
            'message': ''
        }

    def _build_task_message(self, result: Dict) -> str:
        """Build task completion message."""
        message_parts = [f"⭐ +{result['points_awarded']} points"]

        if result['level_up']:
            message_parts.append(f"🎉 Level {result['new_level']}!")

        for achievement in result['achievements_unlocked']:
            message_parts.append(f"{achievement['icon']} Achievement unlocked: {achievement['name']}")

        return '\n'.join(message_parts)

    def _build_activation_message(self, result: Dict, streak_result: Dict) -> str:
        """Build daily activation message."""
        if not result['continued']:
            return f"Welcome back! Day {result['streak']} 🔥"

        message_parts = []
        if streak_result['streak_broken']:
            message_parts.append("Streak reset. Starting fresh! Day 1 💪")
        else:
            message_parts.append(f"⭐ +{POINTS_CONFIG['DAILY_LOGIN']} points for logging in")

        if result['milestone_reached']:
            message_parts.append(f"🏆 {streak_result['milestone']}-day milestone reached!")

        message_parts.append(format_streak_display(self.engine.load_state()))

        for achievement in result['achievements_unlocked']:
            message_parts.append(f"{achievement['icon']} Achievement unlocked: {achievement['name']}")

        return '\n'.join(message_parts)
