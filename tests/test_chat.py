"""Tests for agent chat and the general assistant chat."""

import pytest

from agenly.models import Agent, AgentStatus, MessageRole
from agenly.services.chat.engine import (
    FALLBACK_REPLY,
    SUMMARY_UNAVAILABLE,
    determine_next_step,
    should_generate_agent,
)


# ==================== Agent chat ====================


@pytest.mark.asyncio
async def test_chat_with_agent(client, agent, llm, storage):
    response = await client.post(
        "/api/agents/agent-1/chat",
        json={"message": "Are you open on Sunday?", "userId": "user-1"},
    )
    assert response.status_code == 200

    data = response.json()["data"]
    assert data["message"] == llm.reply
    assert data["agent"] == {"id": "agent-1", "name": "Bistro Bot", "model": None}

    conversation = await storage.get_conversation(data["conversationId"])
    assert [m.role for m in conversation.messages] == [MessageRole.USER, MessageRole.ASSISTANT]
    assert conversation.messages[0].content == "Are you open on Sunday?"
    assert conversation.agent_id == "agent-1"

    call = llm.calls[0]
    assert call["system_prompt"] == "You are Bistro Bot."
    assert call["messages"] == [{"role": "user", "content": "Are you open on Sunday?"}]


@pytest.mark.asyncio
async def test_chat_with_agent_keeps_history_in_order(client, agent, llm, storage):
    first = await client.post(
        "/api/agents/agent-1/chat",
        json={"message": "Hi", "userId": "user-1"},
    )
    conversation_id = first.json()["data"]["conversationId"]

    llm.reply = "We open at noon."
    second = await client.post(
        "/api/agents/agent-1/chat",
        json={"message": "When do you open?", "userId": "user-1", "conversationId": conversation_id},
    )
    assert second.status_code == 200
    assert second.json()["data"]["conversationId"] == conversation_id

    assert llm.calls[1]["messages"] == [
        {"role": "user", "content": "Hi"},
        {"role": "assistant", "content": "Hello! How can I help you today?"},
        {"role": "user", "content": "When do you open?"},
    ]

    conversation = await storage.get_conversation(conversation_id)
    assert [m.content for m in conversation.messages] == [
        "Hi",
        "Hello! How can I help you today?",
        "When do you open?",
        "We open at noon.",
    ]

    stored = await storage.get_agent("agent-1")
    assert stored.usage_stats.total_conversations == 1
    assert stored.usage_stats.total_messages == 2
    assert stored.usage_stats.last_used is not None


@pytest.mark.asyncio
async def test_chat_with_agent_not_owner(client, agent, llm, storage):
    response = await client.post(
        "/api/agents/agent-1/chat",
        json={"message": "Hi", "userId": "user-2"},
    )
    assert response.status_code == 403
    assert llm.calls == []
    assert await storage.list_agent_conversations("agent-1") == []


@pytest.mark.asyncio
async def test_chat_with_agent_unknown_conversation(client, agent):
    response = await client.post(
        "/api/agents/agent-1/chat",
        json={"message": "Hi", "userId": "user-1", "conversationId": "nope"},
    )
    assert response.status_code == 404
    assert response.json()["error"] == "Conversation not found"


@pytest.mark.asyncio
async def test_chat_with_agent_llm_failure(client, agent, llm):
    llm.fail = True

    response = await client.post(
        "/api/agents/agent-1/chat",
        json={"message": "Hi", "userId": "user-1"},
    )
    assert response.status_code == 500

    body = response.json()
    assert body["success"] is False
    assert body["error"] == "Internal server error"


@pytest.mark.asyncio
async def test_chat_with_agent_missing_message(client, agent, llm):
    response = await client.post("/api/agents/agent-1/chat", json={"userId": "user-1"})
    assert response.status_code == 400
    assert llm.calls == []


@pytest.mark.asyncio
async def test_agent_chat_history(client, agent):
    await client.post("/api/agents/agent-1/chat", json={"message": "Hi", "userId": "user-1"})

    response = await client.get("/api/agents/agent-1/chat", params={"userId": "user-1"})
    assert response.status_code == 200

    data = response.json()["data"]
    assert data["agent"]["id"] == "agent-1"
    assert len(data["conversations"]) == 1
    assert data["conversations"][0]["message_count"] == 2

    forbidden = await client.get("/api/agents/agent-1/chat", params={"userId": "user-2"})
    assert forbidden.status_code == 403


@pytest.mark.asyncio
async def test_agent_chat_history_lists_only_callers_conversations(client, agent):
    own = await client.post("/api/agents/agent-1/chat", json={"message": "Hi", "userId": "user-1"})
    await client.post("/api/chat", json={"message": "Hello", "userId": "user-2", "agentId": "agent-1"})

    response = await client.get("/api/agents/agent-1/chat", params={"userId": "user-1"})
    assert response.status_code == 200

    conversations = response.json()["data"]["conversations"]
    assert len(conversations) == 1
    assert conversations[0]["id"] == own.json()["data"]["conversationId"]


@pytest.mark.asyncio
async def test_chat_with_agent_rejects_conversation_of_another_agent(client, agent, llm, storage):
    await storage.save_agent(
        Agent(
            id="agent-2",
            created_by="user-1",
            name="Barber Bot",
            system_prompt="You are Barber Bot.",
            status=AgentStatus.ACTIVE,
        )
    )
    first = await client.post(
        "/api/agents/agent-1/chat",
        json={"message": "secret about bistro", "userId": "user-1"},
    )
    conversation_id = first.json()["data"]["conversationId"]

    response = await client.post(
        "/api/agents/agent-2/chat",
        json={"message": "What did I say?", "userId": "user-1", "conversationId": conversation_id},
    )
    assert response.status_code == 404
    assert len(llm.calls) == 1

    conversation = await storage.get_conversation(conversation_id)
    assert conversation.agent_id == "agent-1"
    assert len(conversation.messages) == 2


# ==================== General chat ====================


@pytest.mark.asyncio
async def test_general_chat_suggests_agent_creation(client, llm):
    response = await client.post(
        "/api/chat",
        json={"message": "I want to create an agent for my bakery", "userId": "user-1"},
    )
    assert response.status_code == 200

    data = response.json()["data"]
    assert data["message"] == llm.reply
    assert data["shouldGenerateAgent"] is True
    assert data["nextStep"] == "create_agent"
    assert data["agentData"]["userId"] == "user-1"
    assert data["agentData"]["conversationId"] == data["conversationId"]
    assert data["agentData"]["name"] == "Custom AI Agent"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "message,next_step",
    [
        ("Can you connect my Google Calendar?", "connect_integration"),
        ("How do I deploy this on my site?", "deploy_agent"),
        ("What's the weather like?", None),
    ],
)
async def test_general_chat_next_step(client, message, next_step):
    response = await client.post("/api/chat", json={"message": message, "userId": "user-1"})
    assert response.status_code == 200

    data = response.json()["data"]
    assert data.get("nextStep") == next_step
    assert data["shouldGenerateAgent"] is False
    assert "agentData" not in data


@pytest.mark.asyncio
async def test_general_chat_llm_failure_returns_apology(client, llm, storage):
    llm.fail = True

    response = await client.post("/api/chat", json={"message": "Hello", "userId": "user-1"})
    assert response.status_code == 200

    data = response.json()["data"]
    assert data["message"] == FALLBACK_REPLY
    assert "nextStep" not in data

    conversation = await storage.get_conversation(data["conversationId"])
    assert [m.content for m in conversation.messages] == ["Hello", FALLBACK_REPLY]


@pytest.mark.asyncio
async def test_general_chat_uses_agent_prompt(client, agent, llm):
    response = await client.post(
        "/api/intelligent-chat",
        json={"message": "create a new agent", "userId": "user-1", "agentId": "agent-1"},
    )
    assert response.status_code == 200
    assert response.json()["data"]["shouldGenerateAgent"] is False
    assert llm.calls[0]["system_prompt"] == "You are Bistro Bot."


@pytest.mark.asyncio
async def test_general_chat_rejects_foreign_conversation(client):
    first = await client.post("/api/chat", json={"message": "Hello", "userId": "user-1"})
    conversation_id = first.json()["data"]["conversationId"]

    response = await client.post(
        "/api/chat",
        json={"message": "Hello", "userId": "user-2", "conversationId": conversation_id},
    )
    assert response.status_code == 403


# ==================== Conversation context ====================


@pytest.mark.asyncio
async def test_conversation_context(client, agent, llm):
    chat = await client.post(
        "/api/agents/agent-1/chat",
        json={"message": "Book a table", "userId": "user-1"},
    )
    conversation_id = chat.json()["data"]["conversationId"]

    llm.reply = "  The user booked a table.  "
    response = await client.get(
        "/api/chat",
        params={"conversationId": conversation_id, "userId": "user-1"},
    )
    assert response.status_code == 200

    data = response.json()["data"]
    assert len(data["messages"]) == 2
    assert data["agent"]["id"] == "agent-1"
    assert data["summary"] == "The user booked a table."


@pytest.mark.asyncio
async def test_conversation_context_summary_unavailable(client, llm):
    chat = await client.post("/api/chat", json={"message": "Hello", "userId": "user-1"})
    conversation_id = chat.json()["data"]["conversationId"]

    llm.fail = True
    response = await client.get(
        "/api/chat",
        params={"conversationId": conversation_id, "userId": "user-1"},
    )
    assert response.status_code == 200

    data = response.json()["data"]
    assert data["agent"] is None
    assert data["summary"] == SUMMARY_UNAVAILABLE


@pytest.mark.asyncio
async def test_conversation_context_errors(client):
    chat = await client.post("/api/chat", json={"message": "Hello", "userId": "user-1"})
    conversation_id = chat.json()["data"]["conversationId"]

    forbidden = await client.get(
        "/api/chat",
        params={"conversationId": conversation_id, "userId": "user-2"},
    )
    assert forbidden.status_code == 403

    missing = await client.get("/api/chat", params={"conversationId": "nope", "userId": "user-1"})
    assert missing.status_code == 404

    no_params = await client.get("/api/chat")
    assert no_params.status_code == 400


# ==================== Intent detection ====================


def test_determine_next_step_french():
    assert determine_next_step("Je veux créer un agent", "") == "create_agent"
    assert determine_next_step("Comment intégrer Gmail ?", "") == "connect_integration"
    assert determine_next_step("Je veux publier mon agent", "") == "deploy_agent"


def test_determine_next_step_from_response():
    assert determine_next_step("help me", "Sure, let's create an agent together") == "create_agent"


def test_should_generate_agent():
    assert should_generate_agent("I need a new assistant", None) is True
    assert should_generate_agent("Can you help me customize it?", None) is True
    assert should_generate_agent("hello there", None) is False
