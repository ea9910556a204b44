"""Agent generation from a short business description."""

from uuid import uuid4

import structlog

from agenly.core.exceptions import LLMError
from agenly.models import Agent, AgentPersonality, AgentStatus
from agenly.services.agents.service import AgentService
from agenly.services.llm.provider import LLMProvider

logger = structlog.get_logger()

DEFAULT_CAPABILITIES: dict[str, list[str]] = {
    "restaurant": ["Reservations", "Menu and dishes", "Opening hours and location", "Special events"],
    "ecommerce": ["Products and orders", "Shipping", "Returns and exchanges", "Technical support"],
    "health": ["Appointments", "Medical services", "Emergencies", "Practical information"],
    "education": ["Courses and training", "Enrolment", "Programmes", "Student support"],
    "real estate": ["Available properties", "Viewings", "Financing", "Advice"],
    "finance": ["Financial products", "Advice", "Customer support", "Security"],
    "technology": ["Technical support", "Products", "Training", "Integration"],
    "default": ["Customer support", "General information", "Advice", "Assistance"],
}

GENERATOR_SYSTEM_PROMPT = (
    "You are an expert at designing AI agents. "
    "Reply only with the requested system prompt."
)

GENERATOR_PROMPT = """Write a detailed system prompt for an AI agent specialised in "{business_type}".

CONTEXT:
- Agent name: {name}
- Business type: {business_type}
- Objectives: {objectives}
- Personality: {personality}
- Features: {features}

REQUIREMENTS:
1. The agent is a specialist in this field
2. It is professional and helpful
3. It answers sector-specific questions
4. It proposes concrete solutions
5. At most 500 words

Output only the system prompt, with no extra explanation."""

DEFAULT_PERSONALITY = "Professional and helpful"


def default_capabilities(business_type: str) -> list[str]:
    return DEFAULT_CAPABILITIES.get(business_type.lower(), DEFAULT_CAPABILITIES["default"])


def default_system_prompt(
    name: str,
    business_type: str,
    objectives: str,
    personality: str | None = None,
    features: list[str] | None = None,
) -> str:
    """Deterministic prompt used whenever the LLM cannot write one."""
    return f"""You are {name}, an AI assistant specialised in {business_type}.

YOUR ROLE:
- You are an expert in {business_type}
- You help customers with their questions and needs
- You give professional, useful answers
- You propose concrete, practical solutions

OBJECTIVES:
{objectives}

PERSONALITY:
- Tone: {personality or "Professional, helpful and kind"}
- Style: Expert and detailed
- Communication: Warm and professional

FEATURES:
{", ".join(features) if features else "Customer support, advice, assistance"}

INSTRUCTIONS:
1. Be precise and professional
2. Propose concrete solutions
3. If you do not know something, say so honestly
4. Point the user to the right resources

Ready to help! How can I assist you today?"""


class AgentGenerator:
    """Creates draft agents with an LLM-written system prompt."""

    def __init__(self, llm: LLMProvider, agents: AgentService) -> None:
        self.llm = llm
        self.agents = agents

    async def generate_agent(
        self,
        business_type: str,
        name: str,
        objectives: str,
        user_id: str,
        features: list[str] | None = None,
        personality: str | None = None,
        conversation_id: str | None = None,
    ) -> Agent:
        """Build, store and mirror a new draft agent."""
        system_prompt = await self.generate_system_prompt(
            business_type, name, objectives, personality, features
        )

        agent = Agent(
            id=f"agent_{uuid4().hex[:16]}",
            created_by=user_id,
            name=name,
            description=f"AI agent specialised in {business_type}",
            business_type=business_type,
            system_prompt=system_prompt,
            personality=AgentPersonality(
                tone="professional",
                expertise_level="expert",
                response_style="detailed",
                communication_style=personality or DEFAULT_PERSONALITY,
            ),
            capabilities=features or default_capabilities(business_type),
            status=AgentStatus.DRAFT,
        )

        await self.agents.create_agent(agent)
        logger.info(
            "Agent generated",
            agent_id=agent.id,
            business_type=business_type,
            conversation_id=conversation_id,
        )
        return agent

    async def generate_system_prompt(
        self,
        business_type: str,
        name: str,
        objectives: str,
        personality: str | None = None,
        features: list[str] | None = None,
    ) -> str:
        prompt = GENERATOR_PROMPT.format(
            business_type=business_type,
            name=name,
            objectives=objectives,
            personality=personality or DEFAULT_PERSONALITY,
            features=", ".join(features) if features else "General customer support",
        )
        try:
            response = await self.llm.complete(
                messages=[{"role": "user", "content": prompt}],
                system_prompt=GENERATOR_SYSTEM_PROMPT,
                max_tokens=800,
                temperature=0.7,
            )
        except LLMError as e:
            logger.warning("System prompt generation failed, using default", error=e.message)
            return default_system_prompt(name, business_type, objectives, personality, features)

        return response.content.strip() or default_system_prompt(
            name, business_type, objectives, personality, features
        )

    async def improve_agent(self, agent_id: str, user_id: str, improvements: list[str]) -> Agent:
        """Rewrite an owned agent's system prompt to include ``improvements``."""
        agent = await self.agents.get_owned_agent(agent_id, user_id)
        prompt = (
            f"Improve the following system prompt by adding: {', '.join(improvements)}\n\n"
            f"CURRENT PROMPT:\n{agent.system_prompt}\n\n"
            "Write the improved prompt, at most 500 words."
        )
        try:
            response = await self.llm.complete(
                messages=[{"role": "user", "content": prompt}],
                system_prompt="You improve AI agents. Reply only with the improved prompt.",
                max_tokens=800,
            )
        except LLMError as e:
            logger.warning("Agent improvement failed", agent_id=agent_id, error=e.message)
            return agent

        if response.content.strip():
            agent.system_prompt = response.content.strip()
            await self.agents.save_agent(agent)
        return agent
