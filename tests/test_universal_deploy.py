"""Tests for universal deployment packages and the platform catalog endpoints."""

import pytest

from agenly.core.exceptions import PackageSyncError
from agenly.models import Agent, AgentStatus


async def universal(client, platform_id="website-widget", agent_id="agent-1", **extra):
    return await client.post(
        "/api/deploy/universal",
        json={"agentId": agent_id, "platformId": platform_id, **extra},
    )


# ==================== Universal deploy ====================


@pytest.mark.asyncio
async def test_universal_deploy_website_widget(client, agent):
    response = await universal(
        client,
        customizations={"branding": {"primaryColor": "#FF0000"}},
    )
    assert response.status_code == 200

    data = response.json()["data"]
    package = data["package"]
    assert package["id"].startswith("deploy_agent-1_website-widget_")
    assert package["packageType"] == "widget"
    assert [f["name"] for f in package["files"]] == ["widget.html", "embed-code.html"]
    assert "#FF0000" in package["files"][0]["content"]
    assert package["configurationGuide"].startswith("# Configuration Guide - Bistro Bot")
    assert package["supportContact"] == "support@agenly.com"
    assert data["compatibility"]["compatible"] is True
    assert data["platform"]["id"] == "website-widget"


@pytest.mark.asyncio
async def test_universal_deploy_recommendations_for_ecommerce(client, agent):
    response = await universal(client, platform_id="shopify-app")
    assert response.status_code == 200

    data = response.json()["data"]
    assert [f["name"] for f in data["package"]["files"]] == ["shopify-app.json"]
    assert data["compatibility"]["recommendations"] == [
        "Consider adding product recommendations for this e-commerce platform"
    ]


@pytest.mark.asyncio
async def test_universal_deploy_incompatible(client, storage):
    await storage.save_agent(
        Agent(
            id="agent-files",
            created_by="user-1",
            name="Uploader",
            capabilities=["chat", "file-upload"],
            status=AgentStatus.ACTIVE,
        )
    )

    response = await universal(client, agent_id="agent-files")
    assert response.status_code == 400

    body = response.json()
    assert body["success"] is False
    assert body["error"] == "Incompatibility detected"
    assert body["issues"] == ["The agent needs file support but the platform does not support it"]
    assert "recommendations" in body


@pytest.mark.asyncio
async def test_universal_deploy_unknown_platform(client, agent):
    response = await universal(client, platform_id="myspace")
    assert response.status_code == 400
    assert response.json()["error"] == "Unsupported platform: myspace"


@pytest.mark.asyncio
async def test_universal_deploy_unknown_agent(client):
    response = await universal(client, agent_id="ghost")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_universal_deploy_missing_fields(client):
    response = await client.post("/api/deploy/universal", json={"agentId": "agent-1"})
    assert response.status_code == 400
    assert "platformId" in response.json()["details"]


@pytest.mark.asyncio
async def test_universal_deploy_prefers_local_store_agent(client, services):
    services.local_store.add_agent(
        Agent(id="local-only", created_by="user-1", name="Local Agent", status=AgentStatus.ACTIVE)
    )

    response = await universal(client, platform_id="docker-container", agent_id="local-only")
    assert response.status_code == 200
    assert [f["name"] for f in response.json()["data"]["package"]["files"]] == [
        "Dockerfile",
        "docker-compose.yml",
    ]


@pytest.mark.asyncio
async def test_universal_deploy_writes_every_backend(client, agent, services, storage):
    response = await universal(client)
    package_id = response.json()["data"]["package"]["id"]

    assert await services.builder.get_package(package_id) is not None
    assert await services.local_store.get_package(package_id) is not None
    assert await storage.get_package(package_id) is not None


@pytest.mark.asyncio
async def test_universal_deploy_sync_failure_runs_fallbacks(client, agent, services, monkeypatch):
    async def sync_fails(package):
        raise PackageSyncError(package.id, {"primary_storage": "down"})

    monkeypatch.setattr(services.packages, "create_and_sync_package", sync_fails)

    response = await universal(client)
    assert response.status_code == 200

    package_id = response.json()["data"]["package"]["id"]
    assert await services.local_store.get_package(package_id) is not None
    assert await services.builder.get_package(package_id) is not None


@pytest.mark.asyncio
async def test_universal_deploy_fallback_errors_are_swallowed(client, agent, services, monkeypatch):
    async def sync_fails(package):
        raise PackageSyncError(package.id, {})

    async def broken(package):
        raise RuntimeError("disk full")

    monkeypatch.setattr(services.packages, "create_and_sync_package", sync_fails)
    monkeypatch.setattr(services.local_store, "force_sync_package", broken)
    monkeypatch.setattr(services.builder, "store_package", broken)

    response = await universal(client)
    assert response.status_code == 200
    assert response.json()["data"]["package"]["files"]


# ==================== Packages ====================


@pytest.mark.asyncio
async def test_get_package_returns_same_files(client, agent):
    created = await universal(client, platform_id="whatsapp-business")
    package = created.json()["data"]["package"]

    response = await client.get(f"/api/deploy/packages/{package['id']}")
    assert response.status_code == 200
    assert response.json()["data"]["files"] == package["files"]


@pytest.mark.asyncio
async def test_get_package_falls_back_to_primary_storage(client, agent, services):
    created = await universal(client)
    package_id = created.json()["data"]["package"]["id"]

    await services.builder.delete_package(package_id)
    await services.local_store.delete_package(package_id)

    response = await client.get(f"/api/deploy/packages/{package_id}")
    assert response.status_code == 200
    assert response.json()["data"]["id"] == package_id


@pytest.mark.asyncio
async def test_get_unknown_package(client):
    response = await client.get("/api/deploy/packages/deploy_missing")
    assert response.status_code == 404
    assert response.json()["error"] == "Package not found"


@pytest.mark.asyncio
async def test_delete_package(client, agent, services):
    created = await universal(client)
    package_id = created.json()["data"]["package"]["id"]

    response = await client.delete(f"/api/deploy/packages/{package_id}")
    assert response.status_code == 200

    assert (await client.get(f"/api/deploy/packages/{package_id}")).status_code == 404
    assert (await client.delete(f"/api/deploy/packages/{package_id}")).status_code == 404


@pytest.mark.asyncio
async def test_download_package(client, agent):
    created = await universal(client)
    package = created.json()["data"]["package"]

    listing = await client.get(f"/api/deploy/packages/{package['id']}/download")
    assert listing.status_code == 200
    files = listing.json()["data"]["files"]
    assert [f["name"] for f in files] == ["widget.html", "embed-code.html"]
    assert all(set(f) == {"name", "type", "size"} for f in files)

    response = await client.get(
        f"/api/deploy/packages/{package['id']}/download",
        params={"file": "widget.html"},
    )
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert response.headers["content-disposition"] == 'attachment; filename="widget.html"'
    assert response.text == package["files"][0]["content"]


@pytest.mark.asyncio
async def test_download_container_file_types(client, agent):
    created = await universal(client, platform_id="docker-container")
    package_id = created.json()["data"]["package"]["id"]

    compose = await client.get(
        f"/api/deploy/packages/{package_id}/download",
        params={"file": "docker-compose.yml"},
    )
    assert compose.headers["content-type"].startswith("application/x-yaml")

    dockerfile = await client.get(
        f"/api/deploy/packages/{package_id}/download",
        params={"file": "Dockerfile"},
    )
    assert dockerfile.headers["content-type"].startswith("text/plain")
    assert "ENV AGENT_ID=agent-1" in dockerfile.text


@pytest.mark.asyncio
async def test_download_unknown_file(client, agent):
    created = await universal(client)
    package_id = created.json()["data"]["package"]["id"]

    response = await client.get(
        f"/api/deploy/packages/{package_id}/download",
        params={"file": "missing.txt"},
    )
    assert response.status_code == 404
    assert response.json()["error"] == "File not found"


# ==================== Catalog ====================


@pytest.mark.asyncio
async def test_catalog_platforms(client):
    response = await client.get("/api/deploy/universal", params={"action": "platforms"})
    assert response.status_code == 200
    assert len(response.json()["data"]) == 12


@pytest.mark.asyncio
async def test_catalog_recommendations(client):
    response = await client.get(
        "/api/deploy/universal",
        params={"action": "recommendations", "businessType": "restaurant"},
    )
    assert [p["id"] for p in response.json()["data"]] == [
        "website-widget",
        "whatsapp-business",
        "facebook-messenger",
    ]

    missing = await client.get("/api/deploy/universal", params={"action": "recommendations"})
    assert missing.status_code == 400


@pytest.mark.asyncio
async def test_catalog_detect(client):
    response = await client.get(
        "/api/deploy/universal",
        params={"action": "detect", "message": "Put it on WhatsApp and on my website"},
    )
    assert [p["id"] for p in response.json()["data"]] == ["website-widget", "whatsapp-business"]


@pytest.mark.asyncio
async def test_catalog_estimate(client):
    response = await client.get(
        "/api/deploy/universal",
        params={"action": "estimate", "platformId": "whatsapp-business", "interactions": 1000},
    )
    assert response.status_code == 200
    assert response.json()["data"]["total"] == 5.0

    unknown = await client.get(
        "/api/deploy/universal",
        params={"action": "estimate", "platformId": "myspace"},
    )
    assert unknown.status_code == 404
    assert unknown.json()["error"] == "Platform not found"


@pytest.mark.asyncio
async def test_catalog_invalid_action(client):
    response = await client.get("/api/deploy/universal", params={"action": "dance"})
    assert response.status_code == 400
