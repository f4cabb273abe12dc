"""
SessionManager - Session & Profile Business Logic

Handles the local user's session lifecycle, profile updates and tier.

Authentication is a stub: no credential is ever verified. Logging in without
a stored profile creates one. The active session lives in a SessionContext
owned by the manager, created at login and discarded at logout.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Dict, Any

from pydantic import ValidationError as PydanticValidationError

from student_hub.events.bus import EventBus, Topic
from student_hub.exceptions import SessionError, ValidationError
from student_hub.models.user import Tier, UserProfile
from student_hub.storage.adapter import StorageAdapter
from student_hub.storage.keys import StorageKey

logger = logging.getLogger(__name__)


@dataclass
class SessionContext:
    """The authenticated user and when the session began"""
    user: UserProfile
    started_at: datetime = field(default_factory=datetime.now)


class SessionManager:
    """
    Service for the local session.

    Responsibilities:
    - Session lifecycle (initialize, login, signup, Google stub, logout)
    - Profile updates
    - Tier lookup and upgrade
    - Account deletion
    """

    def __init__(self, storage: StorageAdapter, bus: EventBus):
        """
        Initialize SessionManager.

        Args:
            storage: Storage adapter for the profile and tier keys
            bus: Event bus that receives lifecycle events
        """
        self.storage = storage
        self.bus = bus
        self._context: Optional[SessionContext] = None

    # ------------------------------------------------------------------
    # Session state
    # ------------------------------------------------------------------

    @property
    def context(self) -> Optional[SessionContext]:
        return self._context

    @property
    def current_user(self) -> Optional[UserProfile]:
        return self._context.user if self._context else None

    @property
    def is_authenticated(self) -> bool:
        return self._context is not None

    def _require_session(self, operation: str) -> SessionContext:
        if self._context is None:
            raise SessionError(operation=operation)
        return self._context

    def _start_session(self, user: UserProfile, event: Topic) -> UserProfile:
        self._context = SessionContext(user=user)
        self.storage.update_last_active()
        self.bus.publish(event, user.model_dump(mode="json"))
        return user

    def load_profile(self) -> Optional[UserProfile]:
        """Stored profile, None if absent or unreadable"""
        raw = self.storage.get(StorageKey.USER_PROFILE)
        if raw is None:
            return None

        try:
            return UserProfile.model_validate(raw)
        except PydanticValidationError as e:
            logger.error(f"Stored profile is invalid: {e}")
            return None

    def _save_profile(self, user: UserProfile) -> bool:
        return self.storage.set(StorageKey.USER_PROFILE, user.model_dump(mode="json"))

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def initialize(self) -> Optional[UserProfile]:
        """
        Restore the stored profile on app start, or create a default one.

        Returns:
            The session user, None if nothing could be stored
        """
        user = self.load_profile()
        if user:
            logger.info(f"User authenticated: {user.name}")
            return self._start_session(user, Topic.LOGIN)

        logger.info("No user logged in, initializing storage for a new user")
        self.storage.initialize_defaults()
        user = self.load_profile()
        if user is None:
            logger.error("Could not create a default profile")
            return None

        self._context = SessionContext(user=user)
        return user

    def login(self, email: str, password: str) -> Optional[UserProfile]:
        """
        Log in (stub: the password is not checked).

        Args:
            email: User email
            password: Ignored until a real auth provider exists

        Returns:
            The stored profile, or a newly created one if none exists.
            None if the email is unusable or the new profile cannot be saved.
        """
        try:
            self._validate_email(email, operation="login")
        except ValidationError:
            return None

        user = self.load_profile()
        if user is None:
            user = UserProfile.from_email(email)
            if not self._save_profile(user):
                logger.error(f"Could not save new profile for {email}")
                return None
            self.storage.initialize_defaults(user)

        logger.info(f"Login successful: {user.name}")
        return self._start_session(user, Topic.LOGIN)

    def signup(self, email: str, password: str, name: str) -> Optional[UserProfile]:
        """
        Create a fresh profile and log in with it.

        Args:
            email: User email
            password: Ignored until a real auth provider exists
            name: Display name

        Returns:
            The new profile, None on invalid input or storage failure
        """
        try:
            self._validate_email(email, operation="signup")
            if not name or not name.strip():
                raise ValidationError("Name is required", field="name", value=name, operation="signup")
        except ValidationError:
            return None

        user = UserProfile(email=email, name=name.strip())
        if not self._save_profile(user):
            return None
        self.storage.initialize_defaults(user)

        logger.info(f"Signup successful: {user.name}")
        return self._start_session(user, Topic.SIGNUP)

    def sign_in_with_google(self) -> Optional[UserProfile]:
        """
        Google sign-in stub: always signs in a placeholder Google account.

        Replaces any stored profile.
        """
        user = UserProfile(email="user@gmail.com", name="Google User", provider="google")
        if not self._save_profile(user):
            return None
        self.storage.initialize_defaults(user)

        logger.info("Google Sign-In successful")
        return self._start_session(user, Topic.LOGIN)

    def logout(self) -> bool:
        """
        End the session. Stored data is kept for the next login.

        Returns:
            False if no session was active
        """
        if self._context is None:
            logger.info("Logout requested with no active session")
            return False

        user = self._context.user
        self._context = None
        self.bus.publish(Topic.LOGOUT, user.model_dump(mode="json"))

        logger.info("Logged out successfully")
        return True

    def reset_password(self, email: str) -> bool:
        """Password reset stub: nothing is sent."""
        try:
            self._validate_email(email, operation="reset_password")
        except ValidationError:
            return False

        logger.info(f"Password reset requested for {email} (no auth provider configured)")
        return True

    def delete_account(self) -> bool:
        """
        Delete every stored key and end the session.

        WARNING: cannot be undone.

        Returns:
            True if all data was removed; the session ends either way
        """
        user = self.current_user
        purged = self.storage.clear_all()

        self.bus.publish(Topic.ACCOUNT_DELETED, user.model_dump(mode="json") if user else None)
        self.logout()

        if purged:
            logger.info("Account deleted")
        else:
            logger.error("Account deletion left some data behind")
        return purged

    # ------------------------------------------------------------------
    # Profile & tier
    # ------------------------------------------------------------------

    def update_profile(self, updates: Dict[str, Any]) -> bool:
        """
        Shallow-merge fields into the current profile.

        Args:
            updates: Fields to overwrite or add

        Returns:
            False while logged out, on invalid fields, or if the profile
            could not be saved (the session keeps the old profile)
        """
        try:
            context = self._require_session("update_profile")
        except SessionError:
            return False

        merged = {**context.user.model_dump(), **updates}
        try:
            user = UserProfile.model_validate(merged)
        except PydanticValidationError as e:
            logger.warning(f"Profile update rejected: {e}")
            return False

        if not self._save_profile(user):
            return False

        context.user = user
        self.bus.publish(Topic.PROFILE_UPDATED, user.model_dump(mode="json"))
        logger.info("Profile updated")
        return True

    def get_tier(self) -> Tier:
        raw = self.storage.get(StorageKey.USER_TIER, Tier.FREE.value)
        try:
            return Tier(raw)
        except ValueError:
            logger.warning(f"Unknown stored tier {raw!r}, treating as free")
            return Tier.FREE

    def is_premium(self) -> bool:
        return self.get_tier() == Tier.PREMIUM

    def upgrade_to_premium(self) -> bool:
        """
        Switch the tier flag (and the session profile, if any) to premium.

        Returns:
            False if the tier flag could not be saved
        """
        if not self.storage.set(StorageKey.USER_TIER, Tier.PREMIUM.value):
            return False

        if self._context:
            user = self._context.user.model_copy(update={"tier": Tier.PREMIUM})
            if self._save_profile(user):
                self._context.user = user

        self.bus.publish(Topic.TIER_UPGRADED, {"tier": Tier.PREMIUM.value})
        logger.info("Upgraded to premium")
        return True

    @staticmethod
    def _validate_email(email: str, operation: str) -> None:
        if not email or "@" not in email:
            raise ValidationError("Email address is required", field="email", value=email, operation=operation)
