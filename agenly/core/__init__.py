"""Core module - configuration and utilities."""

from agenly.core.config import settings
from agenly.core.exceptions import (
    AgentNotFound,
    AppException,
    NotOwner,
    PackageSyncError,
    ValidationFailed,
)

__all__ = [
    "settings",
    "AppException",
    "AgentNotFound",
    "NotOwner",
    "PackageSyncError",
    "ValidationFailed",
]
