"""Write-through package persistence with ordered fallback reads.

A package is written to every backend. Reads walk the backends in priority
order and return the first hit, so a package survives the loss of any single
store.
"""

from abc import ABC, abstractmethod

import structlog

from agenly.core.exceptions import PackageSyncError
from agenly.models import DeploymentPackage
from agenly.services.deployment.builder import PackageBuilder
from agenly.services.deployment.local_store import LocalDeploymentStore
from agenly.storage import StorageBackend

logger = structlog.get_logger()


class PackageBackend(ABC):
    """One place a deployment package can live."""

    name: str = "backend"

    @abstractmethod
    async def put(self, package: DeploymentPackage) -> None:
        """Store a package, overwriting any previous copy."""
        pass

    @abstractmethod
    async def get(self, package_id: str) -> DeploymentPackage | None:
        """Return the package or None."""
        pass

    @abstractmethod
    async def delete(self, package_id: str) -> bool:
        """Remove a package. Returns True if it was present."""
        pass


class BuilderCacheBackend(PackageBackend):
    name = "builder_cache"

    def __init__(self, builder: PackageBuilder) -> None:
        self.builder = builder

    async def put(self, package: DeploymentPackage) -> None:
        await self.builder.store_package(package)

    async def get(self, package_id: str) -> DeploymentPackage | None:
        return await self.builder.get_package(package_id)

    async def delete(self, package_id: str) -> bool:
        return await self.builder.delete_package(package_id)


class LocalPackageStore(PackageBackend):
    name = "local_store"

    def __init__(self, store: LocalDeploymentStore) -> None:
        self.store = store

    async def put(self, package: DeploymentPackage) -> None:
        await self.store.force_sync_package(package)

    async def get(self, package_id: str) -> DeploymentPackage | None:
        return await self.store.get_package(package_id)

    async def delete(self, package_id: str) -> bool:
        return await self.store.delete_package(package_id)


class StoragePackageBackend(PackageBackend):
    name = "primary_storage"

    def __init__(self, storage: StorageBackend) -> None:
        self.storage = storage

    async def put(self, package: DeploymentPackage) -> None:
        await self.storage.save_package(package)

    async def get(self, package_id: str) -> DeploymentPackage | None:
        return await self.storage.get_package(package_id)

    async def delete(self, package_id: str) -> bool:
        return await self.storage.delete_package(package_id)


class PersistentPackageService:
    """Keeps deployment packages in sync across all backends."""

    def __init__(self, backends: list[PackageBackend]) -> None:
        self.backends = backends

    async def create_and_sync_package(self, package: DeploymentPackage) -> DeploymentPackage:
        """Write ``package`` to every backend.

        Individual backend failures are logged. Raises PackageSyncError only
        when no backend accepted the write.
        """
        errors: dict[str, str] = {}
        for backend in self.backends:
            try:
                await backend.put(package)
            except Exception as e:
                errors[backend.name] = str(e)
                logger.warning(
                    "Package sync failed on backend",
                    package_id=package.id,
                    backend=backend.name,
                    error=str(e),
                )

        if self.backends and len(errors) == len(self.backends):
            raise PackageSyncError(package.id, errors)

        logger.info(
            "Package synced",
            package_id=package.id,
            backends=[b.name for b in self.backends if b.name not in errors],
        )
        return package

    async def get_package_with_fallback(self, package_id: str) -> DeploymentPackage | None:
        """First hit in backend priority order, or None."""
        for backend in self.backends:
            try:
                package = await backend.get(package_id)
            except Exception as e:
                logger.warning(
                    "Package lookup failed on backend",
                    package_id=package_id,
                    backend=backend.name,
                    error=str(e),
                )
                continue

            if package:
                logger.debug("Package found", package_id=package_id, backend=backend.name)
                return package

        logger.info("Package not found in any backend", package_id=package_id)
        return None

    async def delete_package(self, package_id: str) -> bool:
        """Remove the package everywhere. True if any backend held it."""
        deleted = False
        for backend in self.backends:
            try:
                deleted = await backend.delete(package_id) or deleted
            except Exception as e:
                logger.warning(
                    "Package delete failed on backend",
                    package_id=package_id,
                    backend=backend.name,
                    error=str(e),
                )
        return deleted
