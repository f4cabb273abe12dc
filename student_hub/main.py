"""Command-line entry point for Student Life Hub"""
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from student_hub.config import validate_config, LOG_LEVEL
from student_hub.exceptions import ConfigurationError
from student_hub.gamification.achievement_system import format_achievements_display
from student_hub.gamification.streak_system import format_streak_display
from student_hub.models.achievement import TaskCategory
from student_hub.services.container import ServiceContainer, build_container

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="student_hub", description="Student Life Hub progression tools")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("status", help="Show level, points, streak and achievements")

    complete = subparsers.add_parser("complete", help="Record a completed task")
    complete.add_argument("category", choices=[c.value for c in TaskCategory])
    complete.add_argument("--name", help="Task title for the activity log")

    export = subparsers.add_parser("export", help="Write a JSON backup")
    export.add_argument("path", type=Path)

    restore = subparsers.add_parser("import", help="Restore a JSON backup")
    restore.add_argument("path", type=Path)

    subparsers.add_parser("reset", help="Delete all stored data")

    return parser


def print_status(container: ServiceContainer) -> None:
    engine = container.engine
    progress = engine.get_progress()
    user = container.session_manager.current_user

    print(f"👋 {user.name if user else 'Student'} ({container.session_manager.get_tier().value})")
    print(
        f"⭐ Level {progress['level']} - {progress['points']} points "
        f"({progress['points_to_next_level']} to next level, {progress['total_points']} total)"
    )
    print(format_streak_display(engine.load_state()))
    print()
    print(format_achievements_display(engine.get_achievement_progress()))


def run(args: argparse.Namespace, container: ServiceContainer) -> int:
    """Execute one command; returns the process exit code"""
    session = container.session_manager
    service = container.gamification_service

    if args.command == "reset":
        return 0 if session.delete_account() else 1

    if args.command == "import":
        try:
            payload = args.path.read_text(encoding="utf-8")
        except OSError as e:
            logger.error(f"Could not read {args.path}: {e}")
            return 1
        ok = container.storage.import_all(payload)
        print("✅ Backup restored" if ok else "❌ Backup could not be restored")
        return 0 if ok else 1

    session.initialize()
    activation = service.process_daily_activation()
    if activation["continued"] and activation["message"]:
        print(activation["message"])

    if args.command == "status":
        print_status(container)
    elif args.command == "complete":
        result = service.process_task_completion(args.category, args.name)
        if not result["success"]:
            return 1
        print(result["message"])
    elif args.command == "export":
        try:
            args.path.write_text(container.storage.export_json(), encoding="utf-8")
        except OSError as e:
            logger.error(f"Could not write {args.path}: {e}")
            return 1
        print(f"✅ Data exported to {args.path}")

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main application entry point"""
    # Configure logging
    logging.basicConfig(
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        level=getattr(logging, LOG_LEVEL.upper(), logging.INFO)
    )

    args = build_parser().parse_args(argv)

    try:
        validate_config()
    except ConfigurationError:
        return 2

    container = build_container()
    if not container.storage.is_available():
        print("⚠️ Storage is not available - progress will not be saved", file=sys.stderr)

    return run(args, container)


if __name__ == "__main__":
    sys.exit(main())
