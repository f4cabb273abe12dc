"""Configuration management"""
import os
from pathlib import Path
from dotenv import load_dotenv

from student_hub.exceptions import ConfigurationError

load_dotenv()

# Storage
# - 'file' (default): one JSON document per namespace under DATA_PATH
# - 'memory': process-local dict, nothing survives a restart
STORAGE_BACKEND: str = os.getenv("STORAGE_BACKEND", "file")
DATA_PATH: Path = Path(os.getenv("DATA_PATH", "./data"))
STORAGE_NAMESPACE: str = os.getenv("STORAGE_NAMESPACE", "default")
# Browsers give localStorage roughly 5MB per origin
STORAGE_QUOTA_BYTES: int = int(os.getenv("STORAGE_QUOTA_BYTES", str(5 * 1024 * 1024)))

# Logging
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

# Progression
POINTS_PER_LEVEL: int = int(os.getenv("POINTS_PER_LEVEL", "100"))
ACHIEVEMENT_BONUS_POINTS: int = int(os.getenv("ACHIEVEMENT_BONUS_POINTS", "50"))
ACTIVITY_LOG_LIMIT: int = int(os.getenv("ACTIVITY_LOG_LIMIT", "100"))

# Written into backups as the export schema version
APP_VERSION: str = os.getenv("APP_VERSION", "2.0")

VALID_STORAGE_BACKENDS = {"file", "memory"}


# Validation
def validate_config() -> None:
    """Validate configuration values"""
    if STORAGE_BACKEND not in VALID_STORAGE_BACKENDS:
        raise ConfigurationError(
            f"Unknown STORAGE_BACKEND '{STORAGE_BACKEND}'",
            config_key="STORAGE_BACKEND",
        )
    if not STORAGE_NAMESPACE:
        raise ConfigurationError("STORAGE_NAMESPACE is required", config_key="STORAGE_NAMESPACE")
    if POINTS_PER_LEVEL <= 0:
        raise ConfigurationError("POINTS_PER_LEVEL must be positive", config_key="POINTS_PER_LEVEL")
    if ACTIVITY_LOG_LIMIT <= 0:
        raise ConfigurationError("ACTIVITY_LOG_LIMIT must be positive", config_key="ACTIVITY_LOG_LIMIT")
    if STORAGE_QUOTA_BYTES <= 0:
        raise ConfigurationError("STORAGE_QUOTA_BYTES must be positive", config_key="STORAGE_QUOTA_BYTES")
    if LOG_LEVEL.upper() not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
        raise ConfigurationError(f"Invalid LOG_LEVEL '{LOG_LEVEL}'", config_key="LOG_LEVEL")
