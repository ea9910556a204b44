"""Firestore storage backend for production."""

import os
from datetime import datetime

import structlog

from agenly.models import (
    Agent,
    ConnectedService,
    Conversation,
    DeploymentConfig,
    DeploymentPackage,
)
from agenly.storage.base import StorageBackend

logger = structlog.get_logger()


class FirestoreStorage(StorageBackend):
    """Firestore storage implementation for production.

    Collection structure:
    - agents/{agent_id}
    - conversations/{conversation_id}  (messages embedded, insertion order)
    - deployments/{deployment_id}
    - deployment_packages/{package_id}
    - connected_services/{user_id}_{service_name}
    """

    def __init__(self, project_id: str | None = None) -> None:
        self._project_id = project_id
        self._db = None
        self._initialized = False

    async def _ensure_initialized(self) -> None:
        """Lazy initialization of Firestore client."""
        if self._initialized:
            return

        try:
            from google.cloud import firestore

            # Check if using emulator
            if os.environ.get("FIRESTORE_EMULATOR_HOST"):
                logger.info("Using Firestore emulator")

            self._db = firestore.AsyncClient(project=self._project_id)
            self._initialized = True
            logger.info("Firestore client initialized", project=self._project_id)
        except Exception as e:
            logger.error("Failed to initialize Firestore", error=str(e))
            raise

    async def _get(self, collection: str, doc_id: str) -> dict | None:
        await self._ensure_initialized()
        doc = await self._db.collection(collection).document(doc_id).get()
        if not doc.exists:
            return None
        return doc.to_dict()

    async def _delete(self, collection: str, doc_id: str) -> bool:
        await self._ensure_initialized()
        ref = self._db.collection(collection).document(doc_id)
        doc = await ref.get()
        if not doc.exists:
            return False
        await ref.delete()
        return True

    # ==================== Agent Operations ====================

    async def get_agent(self, agent_id: str) -> Agent | None:
        data = await self._get("agents", agent_id)
        return Agent(**data) if data else None

    async def save_agent(self, agent: Agent) -> Agent:
        await self._ensure_initialized()
        await self._db.collection("agents").document(agent.id).set(
            agent.model_dump(mode="json")
        )
        return agent

    async def list_agents(self, user_id: str) -> list[Agent]:
        await self._ensure_initialized()
        query = (
            self._db.collection("agents")
            .where("created_by", "==", user_id)
            .order_by("updated_at", direction="DESCENDING")
        )
        docs = await query.get()
        return [Agent(**doc.to_dict()) for doc in docs]

    async def delete_agent(self, agent_id: str) -> bool:
        return await self._delete("agents", agent_id)

    # ==================== Conversation Operations ====================

    async def get_conversation(self, conversation_id: str) -> Conversation | None:
        data = await self._get("conversations", conversation_id)
        return Conversation(**data) if data else None

    async def save_conversation(self, conversation: Conversation) -> Conversation:
        await self._ensure_initialized()
        conversation.updated_at = datetime.utcnow()
        await self._db.collection("conversations").document(conversation.id).set(
            conversation.model_dump(mode="json")
        )
        return conversation

    async def list_agent_conversations(
        self,
        agent_id: str,
        user_id: str | None = None,
        limit: int = 10,
    ) -> list[Conversation]:
        await self._ensure_initialized()
        query = self._db.collection("conversations").where("agent_id", "==", agent_id)
        if user_id is not None:
            query = query.where("user_id", "==", user_id)
        query = query.order_by("updated_at", direction="DESCENDING").limit(limit)
        docs = await query.get()
        return [Conversation(**doc.to_dict()) for doc in docs]

    # ==================== Deployment Operations ====================

    async def get_deployment(self, deployment_id: str) -> DeploymentConfig | None:
        data = await self._get("deployments", deployment_id)
        return DeploymentConfig(**data) if data else None

    async def save_deployment(self, deployment: DeploymentConfig) -> DeploymentConfig:
        await self._ensure_initialized()
        await self._db.collection("deployments").document(deployment.id).set(
            deployment.model_dump(mode="json", by_alias=True)
        )
        return deployment

    async def list_deployments(self, agent_id: str) -> list[DeploymentConfig]:
        await self._ensure_initialized()
        query = (
            self._db.collection("deployments")
            .where("agentId", "==", agent_id)
            .order_by("createdAt")
        )
        docs = await query.get()
        return [DeploymentConfig(**doc.to_dict()) for doc in docs]

    # ==================== Package Operations ====================

    async def get_package(self, package_id: str) -> DeploymentPackage | None:
        data = await self._get("deployment_packages", package_id)
        return DeploymentPackage(**data) if data else None

    async def save_package(self, package: DeploymentPackage) -> DeploymentPackage:
        await self._ensure_initialized()
        await self._db.collection("deployment_packages").document(package.id).set(
            package.model_dump(mode="json", by_alias=True)
        )
        return package

    async def delete_package(self, package_id: str) -> bool:
        return await self._delete("deployment_packages", package_id)

    # ==================== Connected Service Operations ====================

    async def get_connected_service(self, service_id: str) -> ConnectedService | None:
        data = await self._get("connected_services", service_id)
        return ConnectedService(**data) if data else None

    async def save_connected_service(self, service: ConnectedService) -> ConnectedService:
        await self._ensure_initialized()
        await self._db.collection("connected_services").document(service.id).set(
            service.model_dump(mode="json", by_alias=True)
        )
        return service

    async def list_connected_services(self, user_id: str) -> list[ConnectedService]:
        await self._ensure_initialized()
        query = self._db.collection("connected_services").where("userId", "==", user_id)
        docs = await query.get()
        return [ConnectedService(**doc.to_dict()) for doc in docs]

    async def delete_connected_service(self, service_id: str) -> bool:
        return await self._delete("connected_services", service_id)

    # ==================== Health Check ====================

    async def health_check(self) -> bool:
        try:
            await self._ensure_initialized()
            # Simple health check - try to access a collection
            await self._db.collection("_health").document("check").get()
            return True
        except Exception as e:
            logger.error("Firestore health check failed", error=str(e))
            return False
