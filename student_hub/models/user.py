"""User-related Pydantic models"""
from datetime import datetime
from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field


class Tier(str, Enum):
    """Account class"""
    FREE = "free"
    PREMIUM = "premium"


class UserProfile(BaseModel):
    """User profile information

    Extra keys are kept so profile updates can merge arbitrary fields.
    """
    model_config = ConfigDict(extra="allow")

    email: Optional[str] = None
    name: str = "Student"
    join_date: datetime = Field(default_factory=datetime.now)
    tier: Tier = Tier.FREE
    preferences: dict[str, Any] = Field(default_factory=dict)
    provider: Optional[str] = None  # google, or None for local accounts

    @classmethod
    def from_email(cls, email: str, **fields: Any) -> "UserProfile":
        """Build a profile whose display name is the email prefix"""
        fields.setdefault("name", email.split("@")[0])
        return cls(email=email, **fields)
