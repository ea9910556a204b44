"""Custom exceptions for the application.

Every exception carries the HTTP status it maps to, so the API layer can
render it without a lookup table.
"""

from typing import Any


class AppException(Exception):
    """Base exception for application errors."""

    status_code: int = 500
    # Whether `message` is safe to show to API callers
    public: bool = True

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}


# ==================== 400 ====================


class ValidationFailed(AppException):
    """Raised when a request is missing required fields or carries bad values."""

    status_code = 400

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, code="VALIDATION_ERROR", details=details)


class PlatformNotFound(AppException):
    """Raised when a deployment platform id is not in the catalog."""

    status_code = 400

    def __init__(self, platform_id: str) -> None:
        super().__init__(
            f"Unsupported platform: {platform_id}",
            code="PLATFORM_NOT_FOUND",
            details={"platform_id": platform_id},
        )


class UnsupportedService(AppException):
    """Raised for an unknown Google service name."""

    status_code = 400

    def __init__(self, service_name: str) -> None:
        super().__init__(
            "Unsupported service",
            code="UNSUPPORTED_SERVICE",
            details={"service_name": service_name},
        )


class AgentNotDeployable(AppException):
    """Raised when an agent's status does not allow deployment."""

    status_code = 400

    def __init__(self, agent_id: str, status: str) -> None:
        super().__init__(
            "Agent is not ready for deployment",
            code="AGENT_NOT_DEPLOYABLE",
            details={"agent_id": agent_id, "status": status},
        )


# ==================== 403 ====================


class NotOwner(AppException):
    """Raised when the caller is not the recorded owner of an entity."""

    status_code = 403

    def __init__(self, entity: str, entity_id: str) -> None:
        super().__init__(
            "Unauthorized",
            code="NOT_OWNER",
            details={"entity": entity, "id": entity_id},
        )


# ==================== 404 ====================


class NotFound(AppException):
    """Base class for missing entities."""

    status_code = 404
    entity = "Entity"

    def __init__(self, entity_id: str) -> None:
        super().__init__(
            f"{self.entity} not found",
            code=f"{self.entity.upper().replace(' ', '_')}_NOT_FOUND",
            details={"id": entity_id},
        )


class AgentNotFound(NotFound):
    entity = "Agent"


class ConversationNotFound(NotFound):
    entity = "Conversation"


class DeploymentNotFound(NotFound):
    entity = "Deployment"


class PackageNotFound(NotFound):
    entity = "Package"


class ServiceNotConnected(NotFound):
    """Raised when a user has no stored grant for a Google service."""

    entity = "Service"

    def __init__(self, entity_id: str) -> None:
        super().__init__(entity_id)
        self.message = "Service not connected"


# ==================== 500 ====================


class LLMError(AppException):
    """Raised when LLM provider fails."""

    public = False

    def __init__(self, message: str, provider: str | None = None) -> None:
        super().__init__(
            message,
            code="LLM_ERROR",
            details={"provider": provider} if provider else {},
        )


class BillingError(AppException):
    """Raised when a Stripe call fails."""

    def __init__(self, message: str, action: str | None = None) -> None:
        super().__init__(
            message,
            code="BILLING_ERROR",
            details={"action": action} if action else {},
        )


class IntegrationError(AppException):
    """Raised when a third-party API (Google) fails."""

    def __init__(self, message: str, service: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            message,
            code="INTEGRATION_ERROR",
            details={"service": service, **(details or {})},
        )


class PackageSyncError(AppException):
    """Raised when no package backend accepted a write."""

    public = False

    def __init__(self, package_id: str, errors: dict[str, str]) -> None:
        super().__init__(
            f"Package {package_id} could not be stored in any backend",
            code="PACKAGE_SYNC_ERROR",
            details={"package_id": package_id, "errors": errors},
        )
