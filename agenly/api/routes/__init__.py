"""API routes."""

from agenly.api.routes.agents import router as agents_router
from agenly.api.routes.billing import router as billing_router
from agenly.api.routes.chat import router as chat_router
from agenly.api.routes.deploy import router as deploy_router
from agenly.api.routes.health import router as health_router
from agenly.api.routes.integrations import router as integrations_router

__all__ = [
    "agents_router",
    "billing_router",
    "chat_router",
    "deploy_router",
    "health_router",
    "integrations_router",
]
