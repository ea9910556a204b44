"""Agent lookups, ownership checks and persistence."""

import structlog

from agenly.core.exceptions import AgentNotFound, NotOwner
from agenly.models import Agent, AgentUpdate
from agenly.services.deployment.local_store import LocalDeploymentStore
from agenly.storage.base import StorageBackend

logger = structlog.get_logger()


class AgentService:
    """Agent CRUD on primary storage, backed by the local store for unsynced agents."""

    def __init__(self, storage: StorageBackend, local_store: LocalDeploymentStore) -> None:
        self.storage = storage
        self.local_store = local_store

    async def get_agent(self, agent_id: str) -> Agent | None:
        agent = await self.storage.get_agent(agent_id)
        if agent:
            return agent
        return await self.local_store.get_agent(agent_id)

    async def require_agent(self, agent_id: str) -> Agent:
        agent = await self.get_agent(agent_id)
        if not agent:
            raise AgentNotFound(agent_id)
        return agent

    async def get_owned_agent(self, agent_id: str, user_id: str) -> Agent:
        """Fetch an agent and check that ``user_id`` created it.

        Raises:
            AgentNotFound: if no store has the agent
            NotOwner: if the agent belongs to someone else
        """
        agent = await self.require_agent(agent_id)
        if not agent.is_owned_by(user_id):
            logger.warning("Ownership check failed", agent_id=agent_id, user_id=user_id)
            raise NotOwner("agent", agent_id)
        return agent

    async def list_agents(self, user_id: str) -> list[Agent]:
        """User's agents from storage, plus any that only the local store has."""
        agents = await self.storage.list_agents(user_id)
        known = {a.id for a in agents}
        agents.extend(a for a in await self.local_store.agents_for_user(user_id) if a.id not in known)
        return agents

    async def create_agent(self, agent: Agent) -> Agent:
        await self.storage.save_agent(agent)
        self.local_store.add_agent(agent)
        logger.info("Agent created", agent_id=agent.id, user_id=agent.created_by)
        return agent

    async def save_agent(self, agent: Agent) -> Agent:
        """Persist an already-mutated agent everywhere it lives."""
        await self.storage.save_agent(agent)
        await self.local_store.update_agent(agent)
        return agent

    async def update_agent(self, agent_id: str, user_id: str, updates: AgentUpdate) -> Agent:
        agent = await self.get_owned_agent(agent_id, user_id)
        updates.apply_to(agent)
        await self.save_agent(agent)
        logger.info(
            "Agent updated",
            agent_id=agent_id,
            fields=sorted(updates.model_dump(exclude_unset=True, exclude_none=True)),
        )
        return agent

    async def delete_agent(self, agent_id: str, user_id: str) -> None:
        await self.get_owned_agent(agent_id, user_id)
        await self.storage.delete_agent(agent_id)
        await self.local_store.remove_agent(agent_id)
        logger.info("Agent deleted", agent_id=agent_id, user_id=user_id)

    async def record_usage(
        self,
        agent: Agent,
        response_time_ms: float,
        new_conversation: bool = False,
    ) -> None:
        """Fold one reply into the agent's usage stats. Failures are logged only."""
        if new_conversation:
            agent.usage_stats.total_conversations += 1
        agent.usage_stats.record_response(response_time_ms)
        try:
            await self.save_agent(agent)
        except Exception as e:
            logger.warning("Failed to update usage stats", agent_id=agent.id, error=str(e))
