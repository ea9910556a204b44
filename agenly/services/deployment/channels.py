"""Channel deployments: hosted page, iframe embed and API key access."""

import secrets
import string
import time
from datetime import datetime
from typing import Any

import structlog

from agenly.core.config import Settings
from agenly.core.exceptions import AgentNotDeployable, DeploymentNotFound, NotOwner
from agenly.models import Agent, AgentStatus, DeploymentConfig, DeploymentStats, DeploymentType
from agenly.services.agents.service import AgentService
from agenly.storage.base import StorageBackend

logger = structlog.get_logger()

_BASE36 = string.digits + string.ascii_lowercase


def _base36(number: int) -> str:
    digits = []
    while number:
        number, rem = divmod(number, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits)) or "0"


def generate_api_key(agent_id: str) -> str:
    """ak_{first 8 chars of agent id}_{base36 ms timestamp}_{8 random base36}"""
    random_part = "".join(secrets.choice(_BASE36) for _ in range(8))
    return f"ak_{agent_id[:8]}_{_base36(int(time.time() * 1000))}_{random_part}"


def generate_embed_code(
    agent_id: str,
    app_url: str,
    custom_css: str | None = None,
    custom_js: str | None = None,
) -> str:
    """Iframe snippet pointing at the hosted agent page."""
    snippet = (
        f"<!-- AI agent - {agent_id} -->\n"
        '<div id="agent-chat-container">\n'
        "  <iframe\n"
        f'    src="{app_url}/agent/{agent_id}"\n'
        '    width="100%"\n'
        '    height="600"\n'
        '    frameborder="0"\n'
        '    title="AI Assistant"\n'
        '    style="border-radius: 8px; box-shadow: 0 4px 6px rgba(0, 0, 0, 0.1);"\n'
        "  ></iframe>\n"
        "</div>"
    )
    if custom_css:
        snippet += f"\n  <style>{custom_css}</style>"
    if custom_js:
        snippet += f"\n  <script>{custom_js}</script>"
    return snippet


class AgentDeploymentService:
    """Creates and manages web, iframe and api deployments of an agent."""

    def __init__(self, settings: Settings, storage: StorageBackend, agents: AgentService) -> None:
        self.settings = settings
        self.storage = storage
        self.agents = agents

    async def deploy_agent(
        self,
        agent_id: str,
        user_id: str,
        deployment_type: DeploymentType,
        options: dict[str, Any] | None = None,
    ) -> DeploymentConfig:
        """Create a deployment for an owned, deployable agent.

        Raises:
            AgentNotFound: unknown agent
            NotOwner: caller did not create the agent
            AgentNotDeployable: agent is inactive
        """
        agent = await self.agents.get_owned_agent(agent_id, user_id)
        if not agent.is_deployable():
            raise AgentNotDeployable(agent_id, agent.status.value)

        options = options or {}
        base_url = self.settings.app_url
        deployment = DeploymentConfig(
            id=f"deploy_{agent_id}_{int(time.time() * 1000)}_{secrets.token_hex(3)}",
            agent_id=agent_id,
            user_id=user_id,
            type=deployment_type,
            domain=options.get("domain"),
            custom_css=options.get("customCss") or options.get("custom_css"),
            custom_js=options.get("customJs") or options.get("custom_js"),
        )

        if deployment_type == DeploymentType.WEB:
            deployment.url = f"{base_url}/agent/{agent_id}"
        elif deployment_type == DeploymentType.IFRAME:
            deployment.embed_code = generate_embed_code(
                agent_id, base_url, deployment.custom_css, deployment.custom_js
            )
        elif deployment_type == DeploymentType.API:
            deployment.api_key = generate_api_key(agent_id)

        await self.storage.save_deployment(deployment)
        await self._set_channel_flag(agent, deployment_type, True, activate=True)

        logger.info(
            "Agent deployed",
            deployment_id=deployment.id,
            agent_id=agent_id,
            type=deployment_type.value,
        )
        return deployment

    async def list_agent_deployments(self, agent_id: str, user_id: str) -> list[DeploymentConfig]:
        """Deployments of an agent the caller owns. Empty for anyone else."""
        agent = await self.agents.get_agent(agent_id)
        if not agent or not agent.is_owned_by(user_id):
            return []
        deployments = await self.storage.list_deployments(agent_id)
        return [d for d in deployments if d.user_id == user_id]

    async def disable_deployment(self, deployment_id: str, user_id: str) -> DeploymentConfig:
        deployment = await self._get_owned_deployment(deployment_id, user_id)

        deployment.is_active = False
        deployment.updated_at = datetime.utcnow()
        await self.storage.save_deployment(deployment)

        agent = await self.agents.get_agent(deployment.agent_id)
        if agent:
            await self._set_channel_flag(agent, deployment.type, False)

        logger.info("Deployment disabled", deployment_id=deployment_id)
        return deployment

    async def validate_agent_access(self, agent_id: str, api_key: str | None = None) -> Agent:
        """Check an agent can be reached, and that ``api_key`` is live if given."""
        agent = await self.agents.require_agent(agent_id)
        if not agent.is_deployable():
            raise AgentNotDeployable(agent_id, agent.status.value)

        if api_key:
            deployments = await self.storage.list_deployments(agent_id)
            if not any(d.api_key == api_key and d.is_active for d in deployments):
                raise NotOwner("api_key", agent_id)
        return agent

    async def get_deployment_stats(self, deployment_id: str, user_id: str) -> DeploymentStats:
        deployment = await self._get_owned_deployment(deployment_id, user_id, hide_foreign=True)
        agent = await self.agents.require_agent(deployment.agent_id)
        usage = agent.usage_stats
        return DeploymentStats(
            total_requests=usage.total_messages,
            active_users=usage.total_conversations,
            avg_response_time=usage.avg_response_time,
            last_used=usage.last_used,
        )

    async def _get_owned_deployment(
        self,
        deployment_id: str,
        user_id: str,
        hide_foreign: bool = False,
    ) -> DeploymentConfig:
        deployment = await self.storage.get_deployment(deployment_id)
        if not deployment:
            raise DeploymentNotFound(deployment_id)
        if deployment.user_id != user_id:
            if hide_foreign:
                raise DeploymentNotFound(deployment_id)
            raise NotOwner("deployment", deployment_id)
        return deployment

    async def _set_channel_flag(
        self,
        agent: Agent,
        deployment_type: DeploymentType,
        enabled: bool,
        activate: bool = False,
    ) -> None:
        """Mirror a channel toggle onto the agent. Failures are logged only."""
        setattr(agent.deployments, deployment_type.value, enabled)
        if activate:
            agent.status = AgentStatus.ACTIVE
        agent.updated_at = datetime.utcnow()
        try:
            await self.agents.save_agent(agent)
        except Exception as e:
            logger.warning(
                "Could not update agent deployment flags",
                agent_id=agent.id,
                error=str(e),
            )
