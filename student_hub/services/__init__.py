"""
Service Layer Package

Business logic between the presentation layer and storage.

Core Services:
- SessionManager: Session lifecycle, profile, tier, account deletion
- GamificationService: Task completions, daily activation, dashboard data
"""

from student_hub.services.container import ServiceContainer, build_container, create_backend
from student_hub.services.gamification_service import GamificationService
from student_hub.services.session_service import SessionContext, SessionManager

__all__ = [
    "ServiceContainer",
    "build_container",
    "create_backend",
    "GamificationService",
    "SessionContext",
    "SessionManager",
]
