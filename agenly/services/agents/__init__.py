"""Agent services - CRUD with ownership checks and agent generation."""

from agenly.services.agents.generation import AgentGenerator
from agenly.services.agents.service import AgentService

__all__ = ["AgentGenerator", "AgentService"]
