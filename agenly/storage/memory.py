"""In-memory storage backend for development and testing."""

from datetime import datetime

from agenly.models import (
    Agent,
    AgentStatus,
    ConnectedService,
    Conversation,
    DeploymentConfig,
    DeploymentPackage,
)
from agenly.storage.base import StorageBackend


class InMemoryStorage(StorageBackend):
    """In-memory storage implementation for development."""

    def __init__(self) -> None:
        self._agents: dict[str, Agent] = {}
        self._conversations: dict[str, Conversation] = {}
        self._deployments: dict[str, DeploymentConfig] = {}
        self._packages: dict[str, DeploymentPackage] = {}
        self._services: dict[str, ConnectedService] = {}

    # ==================== Agent Operations ====================

    async def get_agent(self, agent_id: str) -> Agent | None:
        return self._agents.get(agent_id)

    async def save_agent(self, agent: Agent) -> Agent:
        self._agents[agent.id] = agent
        return agent

    async def list_agents(self, user_id: str) -> list[Agent]:
        agents = [a for a in self._agents.values() if a.created_by == user_id]
        agents.sort(key=lambda x: x.updated_at, reverse=True)
        return agents

    async def delete_agent(self, agent_id: str) -> bool:
        if agent_id in self._agents:
            del self._agents[agent_id]
            return True
        return False

    # ==================== Conversation Operations ====================

    async def get_conversation(self, conversation_id: str) -> Conversation | None:
        return self._conversations.get(conversation_id)

    async def save_conversation(self, conversation: Conversation) -> Conversation:
        conversation.updated_at = datetime.utcnow()
        self._conversations[conversation.id] = conversation
        return conversation

    async def list_agent_conversations(
        self,
        agent_id: str,
        user_id: str | None = None,
        limit: int = 10,
    ) -> list[Conversation]:
        convs = [c for c in self._conversations.values() if c.agent_id == agent_id]
        if user_id is not None:
            convs = [c for c in convs if c.user_id == user_id]
        convs.sort(key=lambda x: x.updated_at, reverse=True)
        return convs[:limit]

    # ==================== Deployment Operations ====================

    async def get_deployment(self, deployment_id: str) -> DeploymentConfig | None:
        return self._deployments.get(deployment_id)

    async def save_deployment(self, deployment: DeploymentConfig) -> DeploymentConfig:
        self._deployments[deployment.id] = deployment
        return deployment

    async def list_deployments(self, agent_id: str) -> list[DeploymentConfig]:
        deployments = [d for d in self._deployments.values() if d.agent_id == agent_id]
        deployments.sort(key=lambda x: x.created_at)
        return deployments

    # ==================== Package Operations ====================

    async def get_package(self, package_id: str) -> DeploymentPackage | None:
        return self._packages.get(package_id)

    async def save_package(self, package: DeploymentPackage) -> DeploymentPackage:
        self._packages[package.id] = package
        return package

    async def delete_package(self, package_id: str) -> bool:
        return self._packages.pop(package_id, None) is not None

    # ==================== Connected Service Operations ====================

    async def get_connected_service(self, service_id: str) -> ConnectedService | None:
        return self._services.get(service_id)

    async def save_connected_service(self, service: ConnectedService) -> ConnectedService:
        self._services[service.id] = service
        return service

    async def list_connected_services(self, user_id: str) -> list[ConnectedService]:
        return [s for s in self._services.values() if s.user_id == user_id]

    async def delete_connected_service(self, service_id: str) -> bool:
        return self._services.pop(service_id, None) is not None

    # ==================== Health Check ====================

    async def health_check(self) -> bool:
        return True

    # ==================== Development Helpers ====================

    async def clear_all(self) -> None:
        """Clear all data (for testing)."""
        self._agents.clear()
        self._conversations.clear()
        self._deployments.clear()
        self._packages.clear()
        self._services.clear()

    async def seed_demo_agent(self) -> Agent:
        """Create a demo agent for local development."""
        demo_agent = Agent(
            id="demo-agent",
            created_by="demo-user",
            name="Demo Assistant",
            description="Demo agent seeded for local development",
            business_type="service",
            capabilities=["chat", "quick-replies"],
            status=AgentStatus.ACTIVE,
        )
        return await self.save_agent(demo_agent)
