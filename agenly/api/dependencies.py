"""FastAPI dependencies for dependency injection.

Services are built once by the app factory and kept on ``app.state``;
dependencies hand out those shared instances.
"""

from dataclasses import dataclass
from typing import Annotated

import httpx
from fastapi import Depends, Request

from agenly.core.config import Settings
from agenly.services.agents import AgentGenerator, AgentService
from agenly.services.billing import BillingService
from agenly.services.chat import ChatEngine
from agenly.services.deployment import (
    BuilderCacheBackend,
    LocalDeploymentStore,
    LocalPackageStore,
    PackageBuilder,
    PersistentPackageService,
    PlatformCatalog,
    StoragePackageBackend,
    UniversalDeploymentService,
)
from agenly.services.deployment.channels import AgentDeploymentService
from agenly.services.integrations import GoogleIntegrationService
from agenly.services.llm import LLMProvider
from agenly.storage.base import StorageBackend
from agenly.storage.memory import InMemoryStorage


@dataclass
class Services:
    """Everything a request handler may need, wired together."""

    settings: Settings
    storage: StorageBackend
    llm: LLMProvider
    local_store: LocalDeploymentStore
    catalog: PlatformCatalog
    builder: PackageBuilder
    packages: PersistentPackageService
    agents: AgentService
    generator: AgentGenerator
    chat: ChatEngine
    deployments: AgentDeploymentService
    universal: UniversalDeploymentService
    google: GoogleIntegrationService
    billing: BillingService


def create_storage(settings: Settings) -> StorageBackend:
    """Firestore in production, in-memory storage everywhere else."""
    if settings.is_production and settings.gcp_project_id:
        from agenly.storage.firestore import FirestoreStorage

        return FirestoreStorage(project_id=settings.gcp_project_id)
    return InMemoryStorage()


def build_services(
    settings: Settings,
    storage: StorageBackend | None = None,
    llm: LLMProvider | None = None,
    billing: BillingService | None = None,
    google_transport: httpx.AsyncBaseTransport | None = None,
) -> Services:
    """Wire the service graph. Collaborators can be swapped for tests."""
    storage = storage or create_storage(settings)
    llm = llm or LLMProvider(settings)

    local_store = LocalDeploymentStore()
    catalog = PlatformCatalog()
    builder = PackageBuilder(settings, catalog)
    packages = PersistentPackageService(
        [
            BuilderCacheBackend(builder),
            LocalPackageStore(local_store),
            StoragePackageBackend(storage),
        ]
    )
    agents = AgentService(storage, local_store)
    generator = AgentGenerator(llm, agents)

    return Services(
        settings=settings,
        storage=storage,
        llm=llm,
        local_store=local_store,
        catalog=catalog,
        builder=builder,
        packages=packages,
        agents=agents,
        generator=generator,
        chat=ChatEngine(settings, storage, llm, agents, generator),
        deployments=AgentDeploymentService(settings, storage, agents),
        universal=UniversalDeploymentService(storage, local_store, catalog, builder, packages),
        google=GoogleIntegrationService(settings, storage, transport=google_transport),
        billing=billing or BillingService(settings),
    )


def get_services(request: Request) -> Services:
    return request.app.state.services


ServicesDep = Annotated[Services, Depends(get_services)]


def get_settings_dep(services: ServicesDep) -> Settings:
    return services.settings


def get_storage(services: ServicesDep) -> StorageBackend:
    return services.storage


def get_agent_service(services: ServicesDep) -> AgentService:
    return services.agents


def get_generator(services: ServicesDep) -> AgentGenerator:
    return services.generator


def get_chat_engine(services: ServicesDep) -> ChatEngine:
    return services.chat


def get_deployment_service(services: ServicesDep) -> AgentDeploymentService:
    return services.deployments


def get_universal_service(services: ServicesDep) -> UniversalDeploymentService:
    return services.universal


def get_package_service(services: ServicesDep) -> PersistentPackageService:
    return services.packages


def get_catalog(services: ServicesDep) -> PlatformCatalog:
    return services.catalog


def get_google_service(services: ServicesDep) -> GoogleIntegrationService:
    return services.google


def get_billing_service(services: ServicesDep) -> BillingService:
    return services.billing


# Type aliases for cleaner dependency injection
SettingsDep = Annotated[Settings, Depends(get_settings_dep)]
StorageDep = Annotated[StorageBackend, Depends(get_storage)]
AgentServiceDep = Annotated[AgentService, Depends(get_agent_service)]
GeneratorDep = Annotated[AgentGenerator, Depends(get_generator)]
ChatDep = Annotated[ChatEngine, Depends(get_chat_engine)]
DeploymentDep = Annotated[AgentDeploymentService, Depends(get_deployment_service)]
UniversalDep = Annotated[UniversalDeploymentService, Depends(get_universal_service)]
PackagesDep = Annotated[PersistentPackageService, Depends(get_package_service)]
CatalogDep = Annotated[PlatformCatalog, Depends(get_catalog)]
GoogleDep = Annotated[GoogleIntegrationService, Depends(get_google_service)]
BillingDep = Annotated[BillingService, Depends(get_billing_service)]
