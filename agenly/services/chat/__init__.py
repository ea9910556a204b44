"""Chat service - agent chat and the general assistant."""

from agenly.services.chat.engine import AgentChatReply, ChatEngine, ChatReply

__all__ = ["AgentChatReply", "ChatEngine", "ChatReply"]
