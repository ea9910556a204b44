"""Conversation models for chat history."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class MessageRole(str, Enum):
    """Who authored a message."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class MessageMetadata(BaseModel):
    """Model details attached to assistant replies."""

    model: str | None = None
    temperature: float | None = None
    tokens: int | None = None
    processing_time_ms: int | None = None


class ChatMessage(BaseModel):
    """A single role-tagged message."""

    id: str = Field(..., description="Unique message identifier")
    role: MessageRole
    content: str
    timestamp: datetime = Field(default_factory=datetime.utcnow)
    metadata: MessageMetadata | None = None

    def to_llm_message(self) -> dict[str, str]:
        """Convert to LLM message format for context."""
        return {"role": self.role.value, "content": self.content}


class Conversation(BaseModel):
    """An append-only sequence of messages between a user and an agent."""

    id: str = Field(..., description="Unique conversation identifier")
    user_id: str
    agent_id: str | None = None
    title: str = "New conversation"

    messages: list[ChatMessage] = Field(default_factory=list)
    is_active: bool = True

    # Timestamps
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    # Metadata
    metadata: dict[str, Any] = Field(default_factory=dict)

    def append(self, message: ChatMessage) -> ChatMessage:
        """Append a message. Existing messages are never reordered."""
        self.messages.append(message)
        self.updated_at = datetime.utcnow()
        return message

    def history(self, limit: int = 10) -> list[dict[str, str]]:
        """Last ``limit`` messages in LLM format, oldest first."""
        return [m.to_llm_message() for m in self.messages[-limit:]]

    def listing(self) -> dict[str, Any]:
        """Short form used in conversation lists."""
        return {
            "id": self.id,
            "title": self.title,
            "agent_id": self.agent_id,
            "message_count": len(self.messages),
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }
