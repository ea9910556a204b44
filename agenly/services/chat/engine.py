"""Chat engine - agent chat and the general assistant chat."""

import time
from dataclasses import dataclass, field
from typing import Any
from uuid import uuid4

import structlog

from agenly.core.config import Settings
from agenly.core.exceptions import ConversationNotFound, LLMError, NotOwner
from agenly.models import (
    Agent,
    ChatMessage,
    Conversation,
    MessageMetadata,
    MessageRole,
)
from agenly.services.agents.generation import AgentGenerator
from agenly.services.agents.service import AgentService
from agenly.services.llm.provider import LLMProvider
from agenly.storage.base import StorageBackend

logger = structlog.get_logger()

ASSISTANT_SYSTEM_PROMPT = (
    "You are AGENLY, an intelligent and helpful AI assistant. "
    "You help users create, connect and deploy their own AI agents."
)

FALLBACK_REPLY = "Sorry, I'm having a technical problem. Could you try again?"
SUMMARY_UNAVAILABLE = "Summary unavailable"
EMPTY_CONVERSATION = "Empty conversation"

# Keyword groups are (all of these words) alternatives, English and French
CREATE_AGENT_INTENTS = [
    ("create", "agent"),
    ("créer", "agent"),
    ("new", "assistant"),
    ("nouveau", "assistant"),
]
GENERATE_AGENT_INTENTS = CREATE_AGENT_INTENTS + [
    ("customize", "help"),
    ("personnaliser", "aide"),
]
INTEGRATION_KEYWORDS = [
    "connect", "connecter", "integrate", "intégrer", "google", "calendar", "gmail", "drive",
]
DEPLOY_KEYWORDS = ["deploy", "déployer", "publish", "publier", "share", "partager", "embed"]


def _matches_all(text: str, groups: list[tuple[str, ...]]) -> bool:
    return any(all(word in text for word in group) for group in groups)


def determine_next_step(user_message: str, ai_response: str) -> str | None:
    """Suggested UI step implied by the user's message."""
    message = user_message.lower()
    response = ai_response.lower()

    if _matches_all(message, CREATE_AGENT_INTENTS) or "create an agent" in response:
        return "create_agent"
    if any(keyword in message for keyword in INTEGRATION_KEYWORDS):
        return "connect_integration"
    if any(keyword in message for keyword in DEPLOY_KEYWORDS):
        return "deploy_agent"
    return None


def should_generate_agent(user_message: str, agent: Agent | None) -> bool:
    if agent:
        return False
    return _matches_all(user_message.lower(), GENERATE_AGENT_INTENTS)


@dataclass
class AgentChatReply:
    message: str
    conversation_id: str
    agent: Agent

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "conversationId": self.conversation_id,
            "agent": {"id": self.agent.id, "name": self.agent.name, "model": self.agent.model},
        }


@dataclass
class ChatReply:
    message: str
    conversation_id: str
    should_generate_agent: bool = False
    next_step: str | None = None
    agent_data: dict[str, Any] | None = field(default=None)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "message": self.message,
            "shouldGenerateAgent": self.should_generate_agent,
            "conversationId": self.conversation_id,
        }
        if self.next_step:
            data["nextStep"] = self.next_step
        if self.agent_data is not None:
            data["agentData"] = self.agent_data
        return data


class ChatEngine:
    """Runs chat turns and keeps conversation history.

    Handles:
    - Chat with a specific owned agent
    - The general assistant chat with next-step hints
    - Conversation context and summaries
    """

    def __init__(
        self,
        settings: Settings,
        storage: StorageBackend,
        llm: LLMProvider,
        agents: AgentService,
        generator: AgentGenerator,
    ) -> None:
        self.settings = settings
        self.storage = storage
        self.llm = llm
        self.agents = agents
        self.generator = generator

    async def get_or_create_conversation(
        self,
        user_id: str,
        conversation_id: str | None = None,
        agent_id: str | None = None,
        title: str | None = None,
    ) -> tuple[Conversation, bool]:
        """Load the caller's conversation, or start one. Returns (conversation, created)."""
        if conversation_id:
            conversation = await self.storage.get_conversation(conversation_id)
            if not conversation:
                raise ConversationNotFound(conversation_id)
            if conversation.user_id != user_id:
                raise NotOwner("conversation", conversation_id)
            return conversation, False

        conversation = Conversation(
            id=str(uuid4()),
            user_id=user_id,
            agent_id=agent_id,
            title=title or "New conversation",
        )
        logger.info("Created new conversation", conversation_id=conversation.id, agent_id=agent_id)
        return conversation, True

    # ==================== Agent chat ====================

    async def chat_with_agent(
        self,
        agent_id: str,
        user_id: str,
        message: str,
        conversation_id: str | None = None,
    ) -> AgentChatReply:
        """One turn with an owned agent. LLM failures propagate."""
        agent = await self.agents.get_owned_agent(agent_id, user_id)
        conversation, created = await self.get_or_create_conversation(
            user_id, conversation_id, agent_id, title=f"Chat with {agent.name}"
        )
        if not created and conversation.agent_id != agent_id:
            raise ConversationNotFound(conversation.id)

        history = conversation.history(self.settings.chat_history_limit)
        conversation.append(self._message(MessageRole.USER, message))

        start = time.perf_counter()
        response = await self.llm.generate_response(
            user_message=message,
            system_prompt=agent.effective_prompt,
            conversation_history=history,
            temperature=agent.temperature,
            max_tokens=agent.max_tokens,
            model=agent.model,
        )
        elapsed_ms = (time.perf_counter() - start) * 1000

        conversation.append(
            self._message(
                MessageRole.ASSISTANT,
                response.content,
                MessageMetadata(
                    model=agent.model or response.model,
                    temperature=agent.temperature,
                    tokens=response.tokens_output,
                    processing_time_ms=int(elapsed_ms),
                ),
            )
        )
        await self.storage.save_conversation(conversation)
        await self.agents.record_usage(agent, elapsed_ms, new_conversation=created)

        logger.info(
            "Agent chat turn completed",
            agent_id=agent_id,
            conversation_id=conversation.id,
            latency_ms=round(elapsed_ms, 2),
        )
        return AgentChatReply(message=response.content, conversation_id=conversation.id, agent=agent)

    async def agent_chat_history(self, agent_id: str, user_id: str) -> tuple[Agent, list[Conversation]]:
        agent = await self.agents.get_owned_agent(agent_id, user_id)
        conversations = await self.storage.list_agent_conversations(
            agent_id, user_id=user_id, limit=self.settings.agent_conversations_limit
        )
        return agent, conversations

    # ==================== General chat ====================

    async def process_chat(
        self,
        message: str,
        user_id: str,
        conversation_id: str | None = None,
        agent_id: str | None = None,
    ) -> ChatReply:
        """One turn of the general assistant, optionally voiced by an agent."""
        conversation, _ = await self.get_or_create_conversation(user_id, conversation_id, agent_id)

        agent = await self.agents.get_agent(agent_id) if agent_id else None

        history = conversation.history(self.settings.chat_history_limit)
        conversation.append(self._message(MessageRole.USER, message))

        system_prompt = agent.effective_prompt if agent else ASSISTANT_SYSTEM_PROMPT
        start = time.perf_counter()
        next_step = None
        try:
            response = await self.llm.generate_response(
                user_message=message,
                system_prompt=system_prompt,
                conversation_history=history,
            )
            reply = response.content
            model_used = response.model
            next_step = determine_next_step(message, reply)
        except LLMError as e:
            logger.error("Assistant reply failed", conversation_id=conversation.id, error=e.message)
            reply = FALLBACK_REPLY
            model_used = None
        elapsed_ms = (time.perf_counter() - start) * 1000

        conversation.append(
            self._message(
                MessageRole.ASSISTANT,
                reply,
                MessageMetadata(model=model_used, processing_time_ms=int(elapsed_ms)),
            )
        )
        await self.storage.save_conversation(conversation)

        generate = should_generate_agent(message, agent)
        agent_data = await self.draft_agent_from_conversation(conversation) if generate else None

        return ChatReply(
            message=reply,
            conversation_id=conversation.id,
            should_generate_agent=generate,
            next_step=next_step,
            agent_data=agent_data,
        )

    async def draft_agent_from_conversation(self, conversation: Conversation) -> dict[str, Any]:
        """Unsaved agent proposal built from what the user has said so far."""
        context = " ".join(m.content for m in conversation.messages if m.role == MessageRole.USER)
        name = "Custom AI Agent"
        business_type = "custom"
        objectives = f"Assist the user with their specific needs: {context}"
        features = ["Smart chat", "Personalised answers", "Conversation context"]

        system_prompt = await self.generator.generate_system_prompt(
            business_type, name, objectives, features=features
        )
        return {
            "name": name,
            "description": "AI agent tailored to this conversation",
            "businessType": business_type,
            "capabilities": features,
            "systemPrompt": system_prompt,
            "userId": conversation.user_id,
            "conversationId": conversation.id,
        }

    async def get_conversation_context(self, conversation_id: str, user_id: str) -> dict[str, Any]:
        conversation = await self.storage.get_conversation(conversation_id)
        if not conversation:
            raise ConversationNotFound(conversation_id)
        if conversation.user_id != user_id:
            raise NotOwner("conversation", conversation_id)

        agent = None
        if conversation.agent_id:
            agent = await self.agents.get_agent(conversation.agent_id)

        return {
            "messages": [m.model_dump(mode="json") for m in conversation.messages],
            "agent": agent.summary() if agent else None,
            "summary": await self.summarize(conversation),
        }

    async def summarize(self, conversation: Conversation) -> str:
        if not conversation.messages:
            return EMPTY_CONVERSATION

        text = "\n".join(f"{m.role.value}: {m.content}" for m in conversation.messages)
        try:
            return await self.llm.summarize(text)
        except LLMError as e:
            logger.warning("Conversation summary failed", conversation_id=conversation.id, error=e.message)
            return SUMMARY_UNAVAILABLE

    def _message(
        self,
        role: MessageRole,
        content: str,
        metadata: MessageMetadata | None = None,
    ) -> ChatMessage:
        return ChatMessage(id=str(uuid4()), role=role, content=content, metadata=metadata)
