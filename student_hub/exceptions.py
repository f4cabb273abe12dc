"""
Standardized exception hierarchy for student_hub
Provides rich context, consistent logging, and user-friendly error messages
"""

from datetime import datetime, timezone
from typing import Optional, Dict, Any
from uuid import uuid4
import logging

logger = logging.getLogger(__name__)


class StudentHubError(Exception):
    """
    Base exception for all student_hub errors

    Provides:
    - Automatic timestamping
    - Request ID for tracing
    - User-friendly messages
    - Structured context
    - Automatic logging

    Example:
        raise StudentHubError(
            message="Failed to save progression",
            operation="award_points",
            context={"points": 10}
        )
    """

    def __init__(
        self,
        message: str,
        request_id: Optional[str] = None,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        user_message: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.request_id = request_id or str(uuid4())
        self.operation = operation
        self.context = context or {}
        self.cause = cause
        self.user_message = user_message or "An error occurred. Please try again."
        self.timestamp = datetime.now(timezone.utc)

        # Auto-log on creation
        self._log_error()

    def _log_error(self) -> None:
        """Log error with full context"""
        log_data = {
            "error_type": self.__class__.__name__,
            "error_message": self.message,  # Avoid conflict with logging's 'message' field
            "request_id": self.request_id,
            "operation": self.operation,
            "error_context": self.context,
            "timestamp": self.timestamp.isoformat()
        }

        if self.cause:
            log_data["cause"] = str(self.cause)
            logger.error(f"{self.__class__.__name__}: {self.message}", extra=log_data, exc_info=self.cause)
        else:
            logger.error(f"{self.__class__.__name__}: {self.message}", extra=log_data)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize exception for presentation layers"""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "user_message": self.user_message,
            "request_id": self.request_id,
            "timestamp": self.timestamp.isoformat()
        }


# ==========================================
# Validation Errors (User Input)
# ==========================================

class ValidationError(StudentHubError):
    """
    Raised when caller input fails validation

    Examples:
    - Non-integer point amount
    - Unknown task category
    - Empty email on login

    Example:
        raise ValidationError(
            message="Points must be an integer",
            field="points",
            value="ten"
        )
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        **kwargs
    ):
        self.field = field
        self.value = value
        super().__init__(
            message=message,
            user_message=f"Invalid {field}: {message}" if field else message,
            context={"field": field, "value": value},
            **kwargs
        )


# ==========================================
# Storage Errors
# ==========================================

class StorageError(StudentHubError):
    """
    Base class for persistence failures
    """

    def __init__(
        self,
        message: str,
        key: Optional[str] = None,
        user_message: Optional[str] = None,
        **kwargs
    ):
        self.key = key
        super().__init__(
            message=message,
            user_message=user_message or "We couldn't save your data. Please try again.",
            context={"key": key},
            **kwargs
        )


class StorageQuotaExceededError(StorageError):
    """Write would exceed the storage quota"""

    def __init__(
        self,
        message: str = "Storage quota exceeded",
        quota_bytes: Optional[int] = None,
        **kwargs
    ):
        self.quota_bytes = quota_bytes
        super().__init__(
            message=message,
            user_message="Storage is full. Consider clearing old data.",
            **kwargs
        )


class SerializationError(StorageError):
    """Value could not be converted to or from JSON"""

    def __init__(self, message: str, **kwargs):
        super().__init__(
            message=message,
            user_message="Some of your data could not be saved in a readable format.",
            **kwargs
        )


class StorageUnavailableError(StorageError):
    """Underlying storage cannot be read or written"""

    def __init__(self, message: str = "Storage is not available", **kwargs):
        super().__init__(
            message=message,
            user_message="Local storage is not available. Your progress will not be saved.",
            **kwargs
        )


class ImportPayloadError(StorageError):
    """Backup payload is malformed"""

    def __init__(self, message: str, **kwargs):
        super().__init__(
            message=message,
            user_message="That backup file could not be read.",
            **kwargs
        )


# ==========================================
# Session Errors
# ==========================================

class SessionError(StudentHubError):
    """Operation requires an authenticated session"""

    def __init__(
        self,
        message: str = "No user logged in",
        **kwargs
    ):
        super().__init__(
            message=message,
            user_message="Please log in first.",
            **kwargs
        )


# ==========================================
# Configuration Errors
# ==========================================

class ConfigurationError(StudentHubError):
    """System configuration is invalid or missing"""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        **kwargs
    ):
        self.config_key = config_key
        super().__init__(
            message=message,
            user_message="The app is not properly configured.",
            context={"config_key": config_key},
            **kwargs
        )


# ==========================================
# Helpers
# ==========================================

def wrap_storage_exception(
    error: Exception,
    operation: str,
    key: Optional[str] = None
) -> StorageError:
    """
    Convert a low-level exception into the storage hierarchy

    Args:
        error: Original exception
        operation: Operation that failed (e.g. "set", "remove")
        key: Storage key involved, if any

    Returns:
        StorageError subclass wrapping the original exception

    Example:
        try:
            path.write_text(data)
        except OSError as e:
            raise wrap_storage_exception(e, operation="set", key=key)
    """
    if isinstance(error, StorageError):
        return error

    if isinstance(error, (TypeError, ValueError)):
        return SerializationError(
            message=f"{operation} failed for {key}: {str(error)}",
            key=key,
            operation=operation,
            cause=error
        )
    elif isinstance(error, OSError):
        return StorageUnavailableError(
            message=f"{operation} failed for {key}: {str(error)}",
            key=key,
            operation=operation,
            cause=error
        )

    # Generic fallback
    return StorageError(
        message=f"{operation} failed: {str(error)}",
        key=key,
        operation=operation,
        cause=error
    )
