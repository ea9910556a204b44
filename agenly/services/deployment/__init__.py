"""Deployment services - platform catalog, package builder and package persistence.

Channel deployments live in ``agenly.services.deployment.channels``.
"""

from agenly.services.deployment.builder import PackageBuilder
from agenly.services.deployment.local_store import LocalDeploymentStore
from agenly.services.deployment.persistence import (
    BuilderCacheBackend,
    LocalPackageStore,
    PackageBackend,
    PersistentPackageService,
    StoragePackageBackend,
)
from agenly.services.deployment.platforms import PlatformCatalog
from agenly.services.deployment.universal import UniversalDeploymentService, UniversalDeployResult

__all__ = [
    "BuilderCacheBackend",
    "LocalDeploymentStore",
    "LocalPackageStore",
    "PackageBackend",
    "PackageBuilder",
    "PersistentPackageService",
    "PlatformCatalog",
    "StoragePackageBackend",
    "UniversalDeployResult",
    "UniversalDeploymentService",
]
