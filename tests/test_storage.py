"""Tests for storage backends."""

from datetime import datetime, timedelta

import pytest

from agenly.models import (
    Agent,
    ChatMessage,
    ConnectedService,
    Conversation,
    DeploymentConfig,
    DeploymentPackage,
    DeploymentType,
    GoogleService,
    MessageRole,
    PackageType,
)


@pytest.mark.asyncio
async def test_agent_crud(storage):
    """Test agent CRUD operations."""
    # Create
    agent = Agent(id="agent-x", created_by="user-1", name="Test Agent")
    saved = await storage.save_agent(agent)
    assert saved.id == "agent-x"

    # Read
    retrieved = await storage.get_agent("agent-x")
    assert retrieved is not None
    assert retrieved.name == "Test Agent"

    # List only returns the owner's agents
    await storage.save_agent(Agent(id="agent-y", created_by="user-2", name="Other"))
    agents = await storage.list_agents("user-1")
    assert [a.id for a in agents] == ["agent-x"]

    # Delete
    deleted = await storage.delete_agent("agent-x")
    assert deleted is True

    # Verify deleted
    assert await storage.get_agent("agent-x") is None
    assert await storage.delete_agent("agent-x") is False


@pytest.mark.asyncio
async def test_conversation_crud(storage):
    """Test conversation CRUD operations."""
    conv = Conversation(id="conv-1", user_id="user-1", agent_id="agent-1")
    conv.append(ChatMessage(id="m1", role=MessageRole.USER, content="Hello"))
    saved = await storage.save_conversation(conv)
    assert saved.id == "conv-1"

    retrieved = await storage.get_conversation("conv-1")
    assert retrieved is not None
    assert retrieved.messages[0].content == "Hello"


@pytest.mark.asyncio
async def test_agent_conversations_sorted_and_limited(storage):
    for i in range(3):
        await storage.save_conversation(
            Conversation(id=f"conv-{i}", user_id="user-1", agent_id="agent-1")
        )
    await storage.save_conversation(Conversation(id="other", user_id="user-1", agent_id="agent-2"))

    convs = await storage.list_agent_conversations("agent-1", limit=2)
    assert len(convs) == 2
    assert all(c.agent_id == "agent-1" for c in convs)
    assert convs[0].updated_at >= convs[1].updated_at


@pytest.mark.asyncio
async def test_deployment_crud(storage):
    first = DeploymentConfig(id="d1", agent_id="agent-1", user_id="user-1", type=DeploymentType.WEB)
    second = DeploymentConfig(
        id="d2",
        agent_id="agent-1",
        user_id="user-1",
        type=DeploymentType.API,
        created_at=first.created_at + timedelta(seconds=1),
    )
    await storage.save_deployment(second)
    await storage.save_deployment(first)

    assert (await storage.get_deployment("d1")).type == DeploymentType.WEB
    assert [d.id for d in await storage.list_deployments("agent-1")] == ["d1", "d2"]
    assert await storage.list_deployments("agent-2") == []


@pytest.mark.asyncio
async def test_package_crud(storage):
    package = DeploymentPackage(
        id="pkg-1",
        agent_id="agent-1",
        platform_id="website-widget",
        package_type=PackageType.WIDGET,
    )
    await storage.save_package(package)

    assert (await storage.get_package("pkg-1")).platform_id == "website-widget"
    assert await storage.delete_package("pkg-1") is True
    assert await storage.get_package("pkg-1") is None
    assert await storage.delete_package("pkg-1") is False


@pytest.mark.asyncio
async def test_connected_service_crud(storage):
    service = ConnectedService(
        id=ConnectedService.make_id("user-1", "gmail"),
        user_id="user-1",
        service_name=GoogleService.GMAIL,
        access_token="token",
        expires_at=datetime.utcnow() + timedelta(hours=1),
    )
    await storage.save_connected_service(service)

    assert (await storage.get_connected_service("user-1_gmail")).access_token == "token"
    assert len(await storage.list_connected_services("user-1")) == 1
    assert await storage.list_connected_services("user-2") == []

    assert await storage.delete_connected_service("user-1_gmail") is True
    assert await storage.get_connected_service("user-1_gmail") is None


@pytest.mark.asyncio
async def test_seed_demo_agent(storage):
    agent = await storage.seed_demo_agent()
    assert agent.id == "demo-agent"
    assert await storage.get_agent("demo-agent") is not None

    await storage.clear_all()
    assert await storage.get_agent("demo-agent") is None


@pytest.mark.asyncio
async def test_health_check(storage):
    """Test storage health check."""
    healthy = await storage.health_check()
    assert healthy is True
