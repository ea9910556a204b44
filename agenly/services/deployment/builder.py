"""Deployment package builder.

Turns an agent plus a target platform into a ready-to-install bundle of files,
instructions and a configuration guide.
"""

import secrets
import time
from datetime import datetime, timedelta
from string import Template

import structlog

from agenly.core.config import Settings
from agenly.core.exceptions import PlatformNotFound
from agenly.models import (
    Agent,
    DeploymentMethod,
    DeploymentPackage,
    DeploymentRequest,
    FileType,
    PackageFile,
    PackageType,
    PlatformConfig,
)
from agenly.services.deployment import templates
from agenly.services.deployment.platforms import PlatformCatalog

logger = structlog.get_logger()

DEFAULT_PRIMARY_COLOR = "#3B82F6"
DEFAULT_FONT_FAMILY = "Inter, sans-serif"

PACKAGE_TYPES: dict[DeploymentMethod, PackageType] = {
    DeploymentMethod.EMBED: PackageType.WIDGET,
    DeploymentMethod.API: PackageType.API,
    DeploymentMethod.PLUGIN: PackageType.PLUGIN,
    DeploymentMethod.SDK: PackageType.SDK,
    DeploymentMethod.CONTAINER: PackageType.CONTAINER,
}


def generate_package_id(agent_id: str, platform_id: str) -> str:
    """deploy_{agent}_{platform}_{epoch ms}_{8 hex}"""
    return f"deploy_{agent_id}_{platform_id}_{int(time.time() * 1000)}_{secrets.token_hex(4)}"


class PackageBuilder:
    """Builds deployment packages and caches them in-process."""

    def __init__(self, settings: Settings, catalog: PlatformCatalog) -> None:
        self.settings = settings
        self.catalog = catalog
        self._cache: dict[str, DeploymentPackage] = {}

    async def create_deployment_package(
        self,
        request: DeploymentRequest,
        agent: Agent,
    ) -> DeploymentPackage:
        """Build a package for ``agent`` on ``request.platform_id``.

        Raises:
            PlatformNotFound: if the platform id is not in the catalog
        """
        platform = self.catalog.get_platform(request.platform_id)
        if not platform:
            raise PlatformNotFound(request.platform_id)

        created_at = datetime.utcnow()
        package = DeploymentPackage(
            id=generate_package_id(agent.id, platform.id),
            agent_id=agent.id,
            platform_id=platform.id,
            package_type=PACKAGE_TYPES[platform.deployment_method],
            files=self._generate_files(agent, platform, request),
            installation_instructions=self._installation_instructions(platform),
            configuration_guide=self._configuration_guide(agent, platform, request),
            customizations=request.customizations,
            deployment_options=request.deployment_options,
            support_contact=self.settings.support_contact,
            version="1.0.0",
            created_at=created_at,
            expires_at=created_at + timedelta(days=self.settings.package_ttl_days),
        )

        self._cache[package.id] = package
        logger.info(
            "Deployment package built",
            package_id=package.id,
            agent_id=agent.id,
            platform_id=platform.id,
            files=len(package.files),
        )
        return package

    # ==================== Cache ====================

    async def store_package(self, package: DeploymentPackage) -> None:
        self._cache[package.id] = package

    async def get_package(self, package_id: str) -> DeploymentPackage | None:
        return self._cache.get(package_id)

    async def list_packages(self, agent_id: str | None = None) -> list[DeploymentPackage]:
        packages = list(self._cache.values())
        if agent_id:
            packages = [p for p in packages if p.agent_id == agent_id]
        return packages

    async def delete_package(self, package_id: str) -> bool:
        return self._cache.pop(package_id, None) is not None

    # ==================== Generation ====================

    def _generate_files(
        self,
        agent: Agent,
        platform: PlatformConfig,
        request: DeploymentRequest,
    ) -> list[PackageFile]:
        values = self._template_values(agent, request)
        method = platform.deployment_method

        if method == DeploymentMethod.EMBED:
            return [
                PackageFile.of("widget.html", templates.WIDGET_HTML.substitute(values), FileType.HTML),
                PackageFile.of(
                    "embed-code.html", templates.EMBED_SNIPPET.substitute(values), FileType.HTML
                ),
            ]

        if method == DeploymentMethod.API:
            return [
                PackageFile.of(
                    "api-documentation.json",
                    templates.render_openapi(agent.name, self.settings.api_url),
                    FileType.JSON,
                ),
                PackageFile.of(
                    "example-usage.js", templates.EXAMPLE_USAGE_JS.substitute(values), FileType.JS
                ),
            ]

        if method == DeploymentMethod.PLUGIN:
            if platform.id == "wordpress-plugin":
                return [
                    PackageFile.of(
                        "agenly-chat.php", templates.WORDPRESS_PLUGIN.substitute(values), FileType.PHP
                    )
                ]
            return [
                PackageFile.of(
                    "shopify-app.json",
                    templates.render_app_manifest(
                        platform.name, agent.name, agent.id, self.settings.api_url
                    ),
                    FileType.JSON,
                )
            ]

        if method == DeploymentMethod.SDK:
            if platform.id == "flutter-sdk":
                return [
                    PackageFile.of(
                        "agenly_chat.dart", templates.FLUTTER_SDK.substitute(values), FileType.DART
                    )
                ]
            return [
                PackageFile.of(
                    "AgenlyChat.js", templates.REACT_NATIVE_SDK.substitute(values), FileType.JS
                )
            ]

        if method == DeploymentMethod.CONTAINER:
            return [
                PackageFile.of("Dockerfile", templates.DOCKERFILE.substitute(values), FileType.DOCKERFILE),
                PackageFile.of(
                    "docker-compose.yml", templates.DOCKER_COMPOSE.substitute(values), FileType.YAML
                ),
            ]

        return []

    def _template_values(self, agent: Agent, request: DeploymentRequest) -> dict[str, str]:
        branding = request.customizations.branding if request.customizations else None
        return {
            "agent_id": agent.id,
            **templates.name_values(agent.name),
            "api_url": self.settings.api_url,
            "app_url": self.settings.app_url,
            "primary_color": (branding and branding.primary_color) or DEFAULT_PRIMARY_COLOR,
            "font_family": (branding and branding.font_family) or DEFAULT_FONT_FAMILY,
        }

    def _installation_instructions(self, platform: PlatformConfig) -> str:
        instructions = templates.INSTALLATION.get(platform.deployment_method.value, "")
        if isinstance(instructions, Template):
            return instructions.substitute(
                api_url=self.settings.api_url,
                support_contact=self.settings.support_contact,
            )
        return instructions

    def _configuration_guide(
        self,
        agent: Agent,
        platform: PlatformConfig,
        request: DeploymentRequest,
    ) -> str:
        lines = [
            f"# Configuration Guide - {agent.name}",
            "",
            "## Agent",
            f"- Agent ID: {agent.id}",
            f"- Name: {agent.name}",
            f"- Capabilities: {', '.join(agent.capabilities) or 'none'}",
            "",
            "## Platform",
            f"- Platform: {platform.name} ({platform.id})",
            f"- Deployment method: {platform.deployment_method.value}",
            "",
            "## Customizations",
        ]

        customizations = request.customizations
        if customizations and customizations.branding:
            branding = customizations.branding
            lines.append(f"- Primary colour: {branding.primary_color or DEFAULT_PRIMARY_COLOR}")
            lines.append(f"- Font: {branding.font_family or DEFAULT_FONT_FAMILY}")
            if branding.logo:
                lines.append(f"- Logo: {branding.logo}")
        else:
            lines.append("- Default branding")

        if customizations and customizations.features:
            enabled = [
                name for name, on in customizations.features.model_dump().items() if on
            ]
            lines.append(f"- Features: {', '.join(enabled) or 'none'}")

        lines.extend(["", "## Integrations"])
        if agent.integrations:
            lines.extend(f"- {i.name or i.type} ({i.type})" for i in agent.integrations)
        else:
            lines.append("- No integrations configured")

        lines.extend(["", "## Support", f"Contact: {self.settings.support_contact}"])
        return "\n".join(lines) + "\n"
