"""Universal deployment: package an agent for any catalog platform."""

from dataclasses import dataclass

import structlog

from agenly.core.exceptions import AgentNotFound, PackageSyncError, PlatformNotFound
from agenly.models import (
    Agent,
    CompatibilityReport,
    DeploymentPackage,
    DeploymentRequest,
    PlatformConfig,
)
from agenly.services.deployment.builder import PackageBuilder
from agenly.services.deployment.local_store import LocalDeploymentStore
from agenly.services.deployment.persistence import PersistentPackageService
from agenly.services.deployment.platforms import PlatformCatalog
from agenly.storage import StorageBackend

logger = structlog.get_logger()


@dataclass
class UniversalDeployResult:
    """Outcome of a universal deploy. ``package`` is None when incompatible."""

    platform: PlatformConfig
    compatibility: CompatibilityReport
    package: DeploymentPackage | None = None


class UniversalDeploymentService:
    """Resolves the agent, checks the platform, builds and persists the package."""

    def __init__(
        self,
        storage: StorageBackend,
        local_store: LocalDeploymentStore,
        catalog: PlatformCatalog,
        builder: PackageBuilder,
        packages: PersistentPackageService,
    ) -> None:
        self.storage = storage
        self.local_store = local_store
        self.catalog = catalog
        self.builder = builder
        self.packages = packages

    async def resolve_agent(self, agent_id: str) -> Agent:
        """Local store first, then primary storage."""
        agent = await self.local_store.get_agent(agent_id)
        if agent:
            return agent

        agent = await self.storage.get_agent(agent_id)
        if not agent:
            raise AgentNotFound(agent_id)
        return agent

    async def deploy(self, request: DeploymentRequest) -> UniversalDeployResult:
        agent = await self.resolve_agent(request.agent_id)

        platform = self.catalog.get_platform(request.platform_id)
        if not platform:
            raise PlatformNotFound(request.platform_id)

        compatibility = self.catalog.validate_compatibility(agent, platform)
        if not compatibility.compatible:
            logger.info(
                "Agent incompatible with platform",
                agent_id=agent.id,
                platform_id=platform.id,
                issues=compatibility.issues,
            )
            return UniversalDeployResult(platform=platform, compatibility=compatibility)

        package = await self.builder.create_deployment_package(request, agent)

        try:
            await self.packages.create_and_sync_package(package)
        except PackageSyncError as e:
            logger.warning(
                "Package sync failed, running manual fallbacks",
                package_id=package.id,
                errors=e.details.get("errors"),
            )
            await self._manual_fallback(package)

        return UniversalDeployResult(
            platform=platform,
            compatibility=compatibility,
            package=package,
        )

    async def _manual_fallback(self, package: DeploymentPackage) -> None:
        """Best-effort copies into the local store and the builder cache."""
        try:
            await self.local_store.force_sync_package(package)
            logger.info("Fallback local store sync succeeded", package_id=package.id)
        except Exception as e:
            logger.warning("Fallback local store sync failed", package_id=package.id, error=str(e))

        try:
            await self.builder.store_package(package)
            logger.info("Fallback builder cache store succeeded", package_id=package.id)
        except Exception as e:
            logger.warning("Fallback builder cache store failed", package_id=package.id, error=str(e))
