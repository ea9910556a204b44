"""Deployment endpoints: channel deployments, universal packages and downloads."""

from typing import Annotated, Any, Literal

from fastapi import APIRouter, Query, status
from fastapi.responses import Response
from pydantic import Field

from agenly.api.dependencies import CatalogDep, DeploymentDep, PackagesDep, UniversalDep
from agenly.api.responses import fail, ok
from agenly.core.exceptions import PackageNotFound, ValidationFailed
from agenly.models import (
    Customizations,
    DeploymentOptions,
    DeploymentRequest,
    DeploymentType,
)
from agenly.models.deployment import CamelModel

router = APIRouter(prefix="/deploy", tags=["Deployment"])

MIME_TYPES = {
    "html": "text/html",
    "css": "text/css",
    "js": "application/javascript",
    "json": "application/json",
    "php": "application/x-httpd-php",
    "py": "text/x-python",
    "java": "text/x-java-source",
    "dockerfile": "text/plain",
    "yaml": "application/x-yaml",
    "yml": "application/x-yaml",
}


# ==================== Pydantic Schemas ====================


class ChannelDeployRequest(CamelModel):
    agent_id: str = Field(..., min_length=1)
    deployment_type: DeploymentType
    user_id: str = Field(..., min_length=1)
    options: dict[str, Any] | None = None


class DisableRequest(CamelModel):
    user_id: str = Field(..., min_length=1)


class UniversalDeployRequest(CamelModel):
    agent_id: str = Field(..., min_length=1)
    platform_id: str = Field(..., min_length=1)
    customizations: Customizations | None = None
    deployment_options: DeploymentOptions | None = None


# ==================== Universal deployment ====================


@router.post("/universal")
async def universal_deploy(body: UniversalDeployRequest, universal: UniversalDep) -> Any:
    """Package an agent for a catalog platform."""
    result = await universal.deploy(
        DeploymentRequest(
            agent_id=body.agent_id,
            platform_id=body.platform_id,
            customizations=body.customizations,
            deployment_options=body.deployment_options,
        )
    )

    if result.package is None:
        return fail(
            status.HTTP_400_BAD_REQUEST,
            "Incompatibility detected",
            issues=result.compatibility.issues,
            recommendations=result.compatibility.recommendations,
        )

    return ok(
        {
            "package": result.package.to_json(),
            "compatibility": result.compatibility.to_json(),
            "platform": result.platform.to_json(),
        }
    )


@router.get("/universal")
async def universal_catalog(
    catalog: CatalogDep,
    action: Literal["platforms", "recommendations", "detect", "estimate"],
    business_type: Annotated[str | None, Query(alias="businessType")] = None,
    message: str | None = None,
    platform_id: Annotated[str | None, Query(alias="platformId")] = None,
    interactions: Annotated[int, Query(ge=0)] = 1000,
) -> Any:
    """Catalog queries selected by ``action``."""
    if action == "platforms":
        return ok([p.to_json() for p in catalog.get_all_platforms()])

    if action == "recommendations":
        if not business_type:
            raise ValidationFailed("businessType is required")
        return ok([p.to_json() for p in catalog.recommend_platforms(business_type)])

    if action == "detect":
        if not message:
            raise ValidationFailed("message is required")
        return ok([p.to_json() for p in catalog.detect_platform_from_conversation(message)])

    if not platform_id:
        raise ValidationFailed("platformId is required")
    platform = catalog.get_platform(platform_id)
    if not platform:
        return fail(status.HTTP_404_NOT_FOUND, "Platform not found")
    return ok(catalog.estimate_costs(platform, interactions).to_json())


# ==================== Packages ====================


@router.get("/packages/{package_id}")
async def get_package(package_id: str, packages: PackagesDep) -> dict[str, Any]:
    package = await packages.get_package_with_fallback(package_id)
    if not package:
        raise PackageNotFound(package_id)
    return ok(package.to_json())


@router.delete("/packages/{package_id}")
async def delete_package(package_id: str, packages: PackagesDep) -> dict[str, Any]:
    if not await packages.delete_package(package_id):
        raise PackageNotFound(package_id)
    return ok(message="Package deleted successfully")


@router.get("/packages/{package_id}/download")
async def download_package(
    package_id: str,
    packages: PackagesDep,
    file: str | None = None,
) -> Any:
    """File listing, or one file's raw content as an attachment."""
    package = await packages.get_package_with_fallback(package_id)
    if not package:
        raise PackageNotFound(package_id)

    if not file:
        return ok(
            {"files": [{"name": f.name, "type": f.type.value, "size": f.size} for f in package.files]}
        )

    package_file = package.find_file(file)
    if not package_file:
        return fail(status.HTTP_404_NOT_FOUND, "File not found")

    return Response(
        content=package_file.content,
        media_type=MIME_TYPES.get(package_file.type.value, "text/plain"),
        headers={"Content-Disposition": f'attachment; filename="{package_file.name}"'},
    )


# ==================== Channel deployments ====================


@router.post("")
async def deploy_agent(body: ChannelDeployRequest, deployments: DeploymentDep) -> dict[str, Any]:
    deployment = await deployments.deploy_agent(
        agent_id=body.agent_id,
        user_id=body.user_id,
        deployment_type=body.deployment_type,
        options=body.options,
    )
    return ok(deployment.to_json())


@router.get("")
async def list_deployments(
    deployments: DeploymentDep,
    agent_id: Annotated[str, Query(alias="agentId", min_length=1)],
    user_id: Annotated[str, Query(alias="userId", min_length=1)],
) -> dict[str, Any]:
    items = await deployments.list_agent_deployments(agent_id, user_id)
    return ok([d.to_json() for d in items])


@router.post("/{deployment_id}/disable")
async def disable_deployment(
    deployment_id: str,
    body: DisableRequest,
    deployments: DeploymentDep,
) -> dict[str, Any]:
    deployment = await deployments.disable_deployment(deployment_id, body.user_id)
    return ok(deployment.to_json(), message="Deployment disabled")


@router.get("/{deployment_id}/stats")
async def deployment_stats(
    deployment_id: str,
    deployments: DeploymentDep,
    user_id: Annotated[str, Query(alias="userId", min_length=1)],
) -> dict[str, Any]:
    stats = await deployments.get_deployment_stats(deployment_id, user_id)
    return ok(stats.to_json())
