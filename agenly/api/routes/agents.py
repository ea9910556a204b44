"""Agent endpoints: CRUD, agent chat and agent generation."""

from typing import Annotated, Any

import structlog
from fastapi import APIRouter, Query
from pydantic import Field

from agenly.api.dependencies import AgentServiceDep, ChatDep, GeneratorDep
from agenly.api.responses import ok
from agenly.models import AgentUpdate
from agenly.models.deployment import CamelModel

logger = structlog.get_logger()

router = APIRouter(tags=["Agents"])

UserIdQuery = Annotated[str, Query(alias="userId", min_length=1)]


# ==================== Pydantic Schemas ====================


class AgentUpdateRequest(CamelModel):
    """Body of PUT /agents/{agentId}."""

    user_id: str = Field(..., min_length=1)
    updates: AgentUpdate = Field(default_factory=AgentUpdate)


class AgentChatRequest(CamelModel):
    message: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)
    conversation_id: str | None = None


class GenerateAgentRequest(CamelModel):
    business_type: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    objectives: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)
    features: list[str] | None = None
    personality: str | None = None
    conversation_id: str | None = None


# ==================== Agent Endpoints ====================


@router.get("/agents")
async def list_agents(user_id: UserIdQuery, agents: AgentServiceDep) -> dict[str, Any]:
    """List the caller's agents."""
    items = await agents.list_agents(user_id)
    return ok([a.model_dump(mode="json") for a in items])


@router.get("/agents/{agent_id}")
async def get_agent(agent_id: str, agents: AgentServiceDep) -> dict[str, Any]:
    agent = await agents.require_agent(agent_id)
    return ok(agent.summary())


@router.put("/agents/{agent_id}")
async def update_agent(
    agent_id: str,
    body: AgentUpdateRequest,
    agents: AgentServiceDep,
) -> dict[str, Any]:
    """Apply an owner's changes. Identity and ownership never change."""
    agent = await agents.update_agent(agent_id, body.user_id, body.updates)
    return ok(agent.model_dump(mode="json"))


@router.delete("/agents/{agent_id}")
async def delete_agent(agent_id: str, user_id: UserIdQuery, agents: AgentServiceDep) -> dict[str, Any]:
    await agents.delete_agent(agent_id, user_id)
    return ok(message="Agent deleted successfully")


# ==================== Agent Chat ====================


@router.post("/agents/{agent_id}/chat")
async def chat_with_agent(agent_id: str, body: AgentChatRequest, chat: ChatDep) -> dict[str, Any]:
    reply = await chat.chat_with_agent(
        agent_id=agent_id,
        user_id=body.user_id,
        message=body.message,
        conversation_id=body.conversation_id,
    )
    return ok(reply.to_dict())


@router.get("/agents/{agent_id}/chat")
async def agent_chat_history(agent_id: str, user_id: UserIdQuery, chat: ChatDep) -> dict[str, Any]:
    """The agent plus its most recent conversations."""
    agent, conversations = await chat.agent_chat_history(agent_id, user_id)
    return ok(
        {
            "agent": agent.model_dump(mode="json"),
            "conversations": [c.listing() for c in conversations],
        }
    )


# ==================== Generation ====================


@router.post("/generate-agent")
async def generate_agent(body: GenerateAgentRequest, generator: GeneratorDep) -> dict[str, Any]:
    """Create a draft agent from a short business description."""
    agent = await generator.generate_agent(
        business_type=body.business_type,
        name=body.name,
        objectives=body.objectives,
        user_id=body.user_id,
        features=body.features,
        personality=body.personality,
        conversation_id=body.conversation_id,
    )
    return ok(agent.model_dump(mode="json"))
