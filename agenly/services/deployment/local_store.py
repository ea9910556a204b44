"""Process-local store for agents and deployment packages.

Used as a seed source for agents that primary storage does not have yet, and
as one of the package fallback backends. Nothing here survives a restart.
"""

from datetime import datetime

import structlog

from agenly.models import Agent, DeploymentPackage

logger = structlog.get_logger()


class LocalDeploymentStore:
    """In-memory agents and packages for the deployment flow."""

    def __init__(self) -> None:
        self._agents: dict[str, Agent] = {}
        self._packages: dict[str, DeploymentPackage] = {}

    # ==================== Agents ====================

    async def get_agent(self, agent_id: str) -> Agent | None:
        agent = self._agents.get(agent_id)
        logger.debug("Local store agent lookup", agent_id=agent_id, found=agent is not None)
        return agent

    def add_agent(self, agent: Agent) -> None:
        self._agents[agent.id] = agent
        logger.debug("Agent mirrored into local store", agent_id=agent.id)

    async def update_agent(self, agent: Agent) -> Agent | None:
        """Replace a mirrored agent. Agents never mirrored are left alone."""
        if agent.id not in self._agents:
            return None
        agent.updated_at = datetime.utcnow()
        self._agents[agent.id] = agent
        return agent

    async def remove_agent(self, agent_id: str) -> bool:
        return self._agents.pop(agent_id, None) is not None

    async def agents_for_user(self, user_id: str) -> list[Agent]:
        return [a for a in self._agents.values() if a.created_by == user_id]

    # ==================== Packages ====================

    async def force_sync_package(self, package: DeploymentPackage) -> None:
        self._packages[package.id] = package
        logger.info("Package forced into local store", package_id=package.id)

    async def get_package(self, package_id: str) -> DeploymentPackage | None:
        return self._packages.get(package_id)

    async def delete_package(self, package_id: str) -> bool:
        return self._packages.pop(package_id, None) is not None
