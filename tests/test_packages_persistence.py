"""Tests for write-through package persistence."""

import pytest

from agenly.core.exceptions import PackageSyncError
from agenly.models import DeploymentPackage, PackageType
from agenly.services.deployment.persistence import PackageBackend, PersistentPackageService


class DictBackend(PackageBackend):
    """Package backend over a dict, with switchable failures."""

    def __init__(self, name: str, fail_writes: bool = False, fail_reads: bool = False) -> None:
        self.name = name
        self.fail_writes = fail_writes
        self.fail_reads = fail_reads
        self.packages: dict[str, DeploymentPackage] = {}
        self.reads = 0

    async def put(self, package):
        if self.fail_writes:
            raise RuntimeError(f"{self.name} unavailable")
        self.packages[package.id] = package

    async def get(self, package_id):
        self.reads += 1
        if self.fail_reads:
            raise RuntimeError(f"{self.name} unavailable")
        return self.packages.get(package_id)

    async def delete(self, package_id):
        if self.fail_writes:
            raise RuntimeError(f"{self.name} unavailable")
        return self.packages.pop(package_id, None) is not None


@pytest.fixture
def package():
    return DeploymentPackage(
        id="deploy_a_web_1_abcd",
        agent_id="a",
        platform_id="website-widget",
        package_type=PackageType.WIDGET,
    )


@pytest.mark.asyncio
async def test_sync_writes_every_backend(package):
    first, second = DictBackend("first"), DictBackend("second")
    service = PersistentPackageService([first, second])

    await service.create_and_sync_package(package)

    assert package.id in first.packages
    assert package.id in second.packages


@pytest.mark.asyncio
async def test_sync_tolerates_one_failing_backend(package):
    broken, healthy = DictBackend("broken", fail_writes=True), DictBackend("healthy")
    service = PersistentPackageService([broken, healthy])

    result = await service.create_and_sync_package(package)

    assert result is package
    assert package.id in healthy.packages


@pytest.mark.asyncio
async def test_sync_raises_when_every_backend_fails(package):
    service = PersistentPackageService(
        [DictBackend("one", fail_writes=True), DictBackend("two", fail_writes=True)]
    )

    with pytest.raises(PackageSyncError) as exc_info:
        await service.create_and_sync_package(package)

    assert set(exc_info.value.details["errors"]) == {"one", "two"}


@pytest.mark.asyncio
async def test_read_stops_at_first_hit(package):
    first, second = DictBackend("first"), DictBackend("second")
    first.packages[package.id] = package
    second.packages[package.id] = package
    service = PersistentPackageService([first, second])

    assert await service.get_package_with_fallback(package.id) is package
    assert second.reads == 0


@pytest.mark.asyncio
async def test_read_skips_failing_backend(package):
    broken, healthy = DictBackend("broken", fail_reads=True), DictBackend("healthy")
    healthy.packages[package.id] = package
    service = PersistentPackageService([broken, healthy])

    assert await service.get_package_with_fallback(package.id) is package


@pytest.mark.asyncio
async def test_read_returns_none_when_nothing_found():
    service = PersistentPackageService(
        [DictBackend("broken", fail_reads=True), DictBackend("empty")]
    )

    assert await service.get_package_with_fallback("missing") is None


@pytest.mark.asyncio
async def test_delete_reports_any_hit(package):
    broken, holder, empty = (
        DictBackend("broken", fail_writes=True),
        DictBackend("holder"),
        DictBackend("empty"),
    )
    holder.packages[package.id] = package
    service = PersistentPackageService([broken, holder, empty])

    assert await service.delete_package(package.id) is True
    assert await service.delete_package(package.id) is False
