"""Data models for the application."""

from agenly.models.agent import (
    Agent,
    AgentIntegration,
    AgentPersonality,
    AgentStatus,
    AgentUpdate,
    DeploymentFlags,
    KnowledgeBase,
    UsageStats,
)
from agenly.models.conversation import (
    ChatMessage,
    Conversation,
    MessageMetadata,
    MessageRole,
)
from agenly.models.deployment import (
    CompatibilityReport,
    CostEstimate,
    Customizations,
    DeploymentConfig,
    DeploymentMethod,
    DeploymentOptions,
    DeploymentPackage,
    DeploymentRequest,
    DeploymentStats,
    DeploymentType,
    FileType,
    PackageFile,
    PackageType,
    PlatformConfig,
    PlatformType,
)
from agenly.models.integration import ConnectedService, GoogleService

__all__ = [
    # Agent
    "Agent",
    "AgentIntegration",
    "AgentPersonality",
    "AgentStatus",
    "AgentUpdate",
    "DeploymentFlags",
    "KnowledgeBase",
    "UsageStats",
    # Conversation
    "ChatMessage",
    "Conversation",
    "MessageMetadata",
    "MessageRole",
    # Deployment
    "CompatibilityReport",
    "CostEstimate",
    "Customizations",
    "DeploymentConfig",
    "DeploymentMethod",
    "DeploymentOptions",
    "DeploymentPackage",
    "DeploymentRequest",
    "DeploymentStats",
    "DeploymentType",
    "FileType",
    "PackageFile",
    "PackageType",
    "PlatformConfig",
    "PlatformType",
    # Integrations
    "ConnectedService",
    "GoogleService",
]
