"""Abstract base class for storage backends."""

from abc import ABC, abstractmethod

from agenly.models import (
    Agent,
    ConnectedService,
    Conversation,
    DeploymentConfig,
    DeploymentPackage,
)


class StorageBackend(ABC):
    """Abstract storage backend interface."""

    # ==================== Agent Operations ====================

    @abstractmethod
    async def get_agent(self, agent_id: str) -> Agent | None:
        """Get an agent by ID."""
        ...

    @abstractmethod
    async def save_agent(self, agent: Agent) -> Agent:
        """Save or update an agent."""
        ...

    @abstractmethod
    async def list_agents(self, user_id: str) -> list[Agent]:
        """List agents created by a user."""
        ...

    @abstractmethod
    async def delete_agent(self, agent_id: str) -> bool:
        """Delete an agent."""
        ...

    # ==================== Conversation Operations ====================

    @abstractmethod
    async def get_conversation(self, conversation_id: str) -> Conversation | None:
        """Get a conversation (with its messages) by ID."""
        ...

    @abstractmethod
    async def save_conversation(self, conversation: Conversation) -> Conversation:
        """Save or update a conversation."""
        ...

    @abstractmethod
    async def list_agent_conversations(
        self,
        agent_id: str,
        user_id: str | None = None,
        limit: int = 10,
    ) -> list[Conversation]:
        """Most recently updated conversations for an agent, optionally only one user's."""
        ...

    # ==================== Deployment Operations ====================

    @abstractmethod
    async def get_deployment(self, deployment_id: str) -> DeploymentConfig | None:
        """Get a channel deployment by ID."""
        ...

    @abstractmethod
    async def save_deployment(self, deployment: DeploymentConfig) -> DeploymentConfig:
        """Save or update a channel deployment."""
        ...

    @abstractmethod
    async def list_deployments(self, agent_id: str) -> list[DeploymentConfig]:
        """List channel deployments for an agent."""
        ...

    # ==================== Package Operations ====================

    @abstractmethod
    async def get_package(self, package_id: str) -> DeploymentPackage | None:
        """Get a deployment package by ID."""
        ...

    @abstractmethod
    async def save_package(self, package: DeploymentPackage) -> DeploymentPackage:
        """Store a deployment package."""
        ...

    @abstractmethod
    async def delete_package(self, package_id: str) -> bool:
        """Delete a deployment package."""
        ...

    # ==================== Connected Service Operations ====================

    @abstractmethod
    async def get_connected_service(self, service_id: str) -> ConnectedService | None:
        """Get an OAuth grant by ID."""
        ...

    @abstractmethod
    async def save_connected_service(self, service: ConnectedService) -> ConnectedService:
        """Save or replace an OAuth grant."""
        ...

    @abstractmethod
    async def list_connected_services(self, user_id: str) -> list[ConnectedService]:
        """List a user's OAuth grants."""
        ...

    @abstractmethod
    async def delete_connected_service(self, service_id: str) -> bool:
        """Delete an OAuth grant."""
        ...

    # ==================== Health Check ====================

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if storage is healthy."""
        ...
