"""Agent models - user-configured AI personas."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class AgentStatus(str, Enum):
    """Agent lifecycle status."""

    DRAFT = "draft"
    ACTIVE = "active"
    INACTIVE = "inactive"


class AgentPersonality(BaseModel):
    """How the agent talks."""

    tone: str = "professional"
    expertise_level: str = "intermediate"
    response_style: str = "conversational"
    communication_style: str = "Professional and helpful"
    proactivity: int = Field(default=50, ge=0, le=100)


class AgentIntegration(BaseModel):
    """An external service the agent is wired to."""

    type: str
    name: str = ""
    config: dict[str, Any] = Field(default_factory=dict)
    status: str = "active"


class KnowledgeBase(BaseModel):
    """Documents attached to the agent."""

    documents: list[str] = Field(default_factory=list)
    embeddings_id: str = ""
    last_updated: datetime = Field(default_factory=datetime.utcnow)


class UsageStats(BaseModel):
    """Per-agent usage counters."""

    total_conversations: int = 0
    total_messages: int = 0
    avg_response_time: float = 0.0  # milliseconds
    last_used: datetime | None = None

    def record_response(self, response_time_ms: float) -> None:
        """Fold one assistant reply into the running average."""
        replies = self.total_messages
        self.avg_response_time = (
            (self.avg_response_time * replies + response_time_ms) / (replies + 1)
        )
        self.total_messages += 1
        self.last_used = datetime.utcnow()


class DeploymentFlags(BaseModel):
    """Which channels the agent is currently deployed on."""

    web: bool = False
    iframe: bool = False
    api: bool = False


class Agent(BaseModel):
    """A user-defined AI agent."""

    id: str = Field(..., description="Unique agent identifier")
    created_by: str = Field(..., description="Owner user id, never changes")

    name: str
    description: str = ""
    business_type: str = ""
    personality: AgentPersonality = Field(default_factory=AgentPersonality)
    capabilities: list[str] = Field(default_factory=list)
    integrations: list[AgentIntegration] = Field(default_factory=list)
    knowledge_base: KnowledgeBase = Field(default_factory=KnowledgeBase)

    # Prompting
    system_prompt: str = ""
    prompt: str = ""
    model: str | None = None
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(default=2048, ge=50, le=8000)

    version: str = "1.0.0"
    status: AgentStatus = AgentStatus.DRAFT

    usage_stats: UsageStats = Field(default_factory=UsageStats)
    deployments: DeploymentFlags = Field(default_factory=DeploymentFlags)

    # Timestamps
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def effective_prompt(self) -> str:
        """Prompt sent to the LLM as the system message."""
        return self.system_prompt or self.prompt or f"You are {self.name}, a helpful AI assistant."

    def is_owned_by(self, user_id: str) -> bool:
        return self.created_by == user_id

    def is_deployable(self) -> bool:
        return self.status in (AgentStatus.ACTIVE, AgentStatus.DRAFT)

    def summary(self) -> dict[str, Any]:
        """Public view returned by GET /api/agents/{id}."""
        return self.model_dump(
            mode="json",
            include={
                "id",
                "name",
                "description",
                "personality",
                "capabilities",
                "status",
                "version",
                "created_at",
                "system_prompt",
            },
        )


class AgentUpdate(BaseModel):
    """Fields an owner may change. Identity and ownership are excluded."""

    name: str | None = None
    description: str | None = None
    business_type: str | None = None
    personality: AgentPersonality | None = None
    capabilities: list[str] | None = None
    integrations: list[AgentIntegration] | None = None
    system_prompt: str | None = None
    prompt: str | None = None
    model: str | None = None
    temperature: float | None = Field(default=None, ge=0.0, le=2.0)
    max_tokens: int | None = Field(default=None, ge=50, le=8000)
    version: str | None = None
    status: AgentStatus | None = None
    deployments: DeploymentFlags | None = None

    def apply_to(self, agent: Agent) -> Agent:
        """Apply set fields and refresh the update timestamp."""
        for field_name, value in self.model_dump(exclude_unset=True).items():
            if value is None:
                continue
            setattr(agent, field_name, getattr(self, field_name))
        agent.updated_at = datetime.utcnow()
        return agent
