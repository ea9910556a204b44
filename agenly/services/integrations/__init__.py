"""Third-party integrations."""

from agenly.services.integrations.google import GoogleIntegrationService

__all__ = ["GoogleIntegrationService"]
