#!/usr/bin/env python3
"""Script to build a deployment package for an agent and write it to disk."""

import argparse
import asyncio
import json
import sys
from pathlib import Path

from agenly.core.config import settings
from agenly.core.exceptions import PlatformNotFound
from agenly.models import Agent, Customizations, DeploymentRequest
from agenly.services.deployment import PackageBuilder, PlatformCatalog


def load_agent(file_path: Path) -> Agent:
    """Load an agent from a JSON export.

    Expected format is the body of GET /api/agents/{id} with at least
    ``id``, ``name`` and ``created_by``.
    """
    with open(file_path, 'r', encoding='utf-8') as f:
        return Agent.model_validate(json.load(f))


async def export_package(
    agent: Agent,
    platform_id: str,
    output_dir: Path,
    customizations: Customizations | None = None,
) -> int:
    """Build the package and write every file plus its guides."""
    builder = PackageBuilder(settings, PlatformCatalog())
    package = await builder.create_deployment_package(
        DeploymentRequest(
            agent_id=agent.id,
            platform_id=platform_id,
            customizations=customizations,
        ),
        agent,
    )

    target = output_dir / package.id
    target.mkdir(parents=True, exist_ok=True)

    for package_file in package.files:
        (target / package_file.name).write_text(package_file.content, encoding='utf-8')
        print(f"  Wrote {package_file.name} ({package_file.size} bytes)")

    (target / "INSTALL.md").write_text(package.installation_instructions, encoding='utf-8')
    (target / "CONFIGURATION.md").write_text(package.configuration_guide, encoding='utf-8')

    print(f"\nPackage {package.id} written to {target}")
    return len(package.files)


async def main():
    parser = argparse.ArgumentParser(description="Export an agent deployment package")
    parser.add_argument("agent_file", nargs="?", help="Agent JSON file")
    parser.add_argument("platform_id", nargs="?", help="Target platform, e.g. website-widget")
    parser.add_argument("--output", default="dist/packages", help="Output directory")
    parser.add_argument("--primary-color", help="Widget primary colour")
    parser.add_argument("--font-family", help="Widget font family")
    parser.add_argument("--list-platforms", action="store_true", help="List platforms and exit")

    args = parser.parse_args()

    if args.list_platforms:
        for platform in PlatformCatalog().get_all_platforms():
            print(f"{platform.id:20} {platform.deployment_method.value:10} {platform.name}")
        return

    if not args.agent_file or not args.platform_id:
        parser.error("agent_file and platform_id are required")

    agent_file = Path(args.agent_file)
    if not agent_file.exists():
        print(f"Error: File does not exist: {agent_file}")
        sys.exit(1)

    customizations = None
    if args.primary_color or args.font_family:
        customizations = Customizations.model_validate(
            {"branding": {"primaryColor": args.primary_color, "fontFamily": args.font_family}}
        )

    agent = load_agent(agent_file)
    print(f"Building {args.platform_id} package for {agent.name} ({agent.id})")

    try:
        await export_package(agent, args.platform_id, Path(args.output), customizations)
    except PlatformNotFound as e:
        print(f"Error: {e.message}")
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
