"""Pytest configuration and fixtures."""

import os

# Use litellm's bundled model cost map instead of fetching it over the network at import.
os.environ.setdefault("LITELLM_LOCAL_MODEL_COST_MAP", "True")

import json
from types import SimpleNamespace
from unittest.mock import MagicMock

import httpx
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from agenly.api.dependencies import build_services
from agenly.api.main import create_app
from agenly.core.config import Settings
from agenly.core.exceptions import LLMError
from agenly.models import Agent, AgentStatus
from agenly.services.billing import BillingService
from agenly.services.llm import LLMProvider, LLMResponse
from agenly.storage.memory import InMemoryStorage


class FakeLLM(LLMProvider):
    """LLM provider that answers from a canned reply and records every call."""

    def __init__(self, settings: Settings) -> None:
        super().__init__(settings)
        self.reply = "Hello! How can I help you today?"
        self.fail = False
        self.calls: list[dict] = []

    async def complete(self, messages, system_prompt=None, **kwargs) -> LLMResponse:
        self.calls.append({"messages": messages, "system_prompt": system_prompt, **kwargs})
        if self.fail:
            raise LLMError("All LLM providers failed: boom", provider="fake")
        return LLMResponse(content=self.reply, model="fake-model", tokens_output=7)


def google_api(request: httpx.Request) -> httpx.Response:
    """Canned Google token and data endpoints."""
    host_path = f"{request.url.host}{request.url.path}"

    if host_path == "oauth2.googleapis.com/token":
        form = dict(httpx.QueryParams(request.content.decode()))
        if form.get("grant_type") == "refresh_token":
            if form.get("refresh_token") != "1//refresh":
                return httpx.Response(400, json={"error": "invalid_grant"})
            return httpx.Response(200, json={"access_token": "ya29.token", "expires_in": 3600})
        if form.get("code") == "bad-code":
            return httpx.Response(400, json={"error": "invalid_grant"})
        if form.get("code") == "html-code":
            return httpx.Response(200, content=b"<html>Service Unavailable</html>")
        return httpx.Response(
            200,
            json={
                "access_token": "ya29.token",
                "refresh_token": "1//refresh",
                "expires_in": 3600,
                "scope": "https://www.googleapis.com/auth/gmail.readonly",
            },
        )

    if request.headers.get("Authorization") != "Bearer ya29.token":
        return httpx.Response(401, json={"error": "unauthorized"})

    if host_path == "gmail.googleapis.com/gmail/v1/users/me/messages":
        return httpx.Response(200, json={"messages": [{"id": "m1"}], "resultSizeEstimate": 1})
    if host_path == "www.googleapis.com/calendar/v3/users/me/calendarList":
        return httpx.Response(200, json={"items": [{"id": "primary"}]})
    if host_path == "www.googleapis.com/drive/v3/files":
        return httpx.Response(200, json={"files": [{"id": "f1", "name": "notes.txt"}]})
    if host_path == "people.googleapis.com/v1/people/me/connections":
        return httpx.Response(200, json={"connections": []})

    return httpx.Response(404, content=json.dumps({"error": "unknown"}))


@pytest.fixture
def settings():
    """Settings isolated from the developer's environment."""
    return Settings(
        _env_file=None,
        app_env="development",
        app_url="http://app.test",
        api_url="http://app.test/api",
        google_client_id="google-client",
        google_client_secret="google-secret",
        google_calendar_client_id="calendar-client",
        google_calendar_client_secret="calendar-secret",
        stripe_secret_key="sk_test_123",
        log_format="text",
    )


@pytest.fixture
def storage():
    """Create in-memory storage for tests."""
    return InMemoryStorage()


@pytest.fixture
def llm(settings):
    return FakeLLM(settings)


@pytest.fixture
def stripe_client():
    """Stripe client double with successful default responses."""
    client = MagicMock()
    client.customers.create.return_value = SimpleNamespace(id="cus_123")
    client.subscriptions.create.return_value = SimpleNamespace(
        id="sub_123",
        latest_invoice=SimpleNamespace(payment_intent=SimpleNamespace(client_secret="pi_secret")),
    )
    client.checkout.sessions.create.return_value = SimpleNamespace(
        id="cs_123", url="https://checkout.stripe.com/c/cs_123"
    )
    return client


@pytest.fixture
def services(settings, storage, llm, stripe_client):
    return build_services(
        settings,
        storage=storage,
        llm=llm,
        billing=BillingService(settings, client=stripe_client),
        google_transport=httpx.MockTransport(google_api),
    )


@pytest.fixture
def app(services):
    """Create test application."""
    return create_app(services)


@pytest_asyncio.fixture
async def client(app):
    """Create test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def agent(storage):
    """An active agent owned by user-1."""
    agent = Agent(
        id="agent-1",
        created_by="user-1",
        name="Bistro Bot",
        description="Answers questions for a bistro",
        business_type="restaurant",
        capabilities=["chat", "quick-replies"],
        system_prompt="You are Bistro Bot.",
        status=AgentStatus.ACTIVE,
    )
    await storage.save_agent(agent)
    return agent
