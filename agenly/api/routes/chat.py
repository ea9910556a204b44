"""General assistant chat endpoints."""

from typing import Annotated, Any

from fastapi import APIRouter, Query
from pydantic import Field

from agenly.api.dependencies import ChatDep
from agenly.api.responses import ok
from agenly.models.deployment import CamelModel

router = APIRouter(tags=["Chat"])


class ChatRequest(CamelModel):
    message: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)
    conversation_id: str | None = None
    agent_id: str | None = None


async def _process(body: ChatRequest, chat: ChatDep) -> dict[str, Any]:
    reply = await chat.process_chat(
        message=body.message,
        user_id=body.user_id,
        conversation_id=body.conversation_id,
        agent_id=body.agent_id,
    )
    return ok(reply.to_dict())


@router.post("/chat")
async def post_chat(body: ChatRequest, chat: ChatDep) -> dict[str, Any]:
    return await _process(body, chat)


@router.post("/intelligent-chat")
async def intelligent_chat(body: ChatRequest, chat: ChatDep) -> dict[str, Any]:
    """Same turn as /chat, kept for clients of the older path."""
    return await _process(body, chat)


@router.get("/chat")
async def conversation_context(
    chat: ChatDep,
    conversation_id: Annotated[str, Query(alias="conversationId", min_length=1)],
    user_id: Annotated[str, Query(alias="userId", min_length=1)],
) -> dict[str, Any]:
    """Messages, agent and a short summary of one conversation."""
    return ok(await chat.get_conversation_context(conversation_id, user_id))
