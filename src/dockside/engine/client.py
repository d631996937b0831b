"""Volume clients: the Docker-backed one and an in-memory one for demo mode."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Protocol

import docker
import requests
from docker.errors import DockerException

from dockside.engine.types import VolumeRecord

logger = logging.getLogger(__name__)

# The SDK raises requests errors directly once the daemon goes away.
_DOCKER_ERRORS = (DockerException, requests.exceptions.RequestException)


class VolumeClientError(Exception):
    """Raised when the runtime cannot list or remove volumes."""


class VolumeClient(Protocol):
    async def list_volumes(self, *, dangling: bool) -> list[VolumeRecord]: ...

    async def delete_volume(self, name: str, *, force: bool = False) -> None: ...


def volume_from_attrs(attrs: dict[str, Any]) -> VolumeRecord:
    labels = attrs.get("Labels") or {}
    return VolumeRecord(
        name=str(attrs.get("Name", "")),
        driver=str(attrs.get("Driver", "")),
        mountpoint=str(attrs.get("Mountpoint", "")),
        created_at=attrs.get("CreatedAt"),
        scope=str(attrs.get("Scope", "local")),
        labels=tuple(sorted((str(k), str(v)) for k, v in labels.items())),
    )


class DockerVolumeClient:
    """Talks to the Docker daemon. The SDK is blocking, so calls run in a worker thread."""

    def __init__(self, base_url: str | None = None, timeout: float = 30.0) -> None:
        self._base_url = base_url
        self._timeout = timeout
        self._docker: docker.DockerClient | None = None

    def _client(self) -> docker.DockerClient:
        if self._docker is None:
            try:
                if self._base_url:
                    self._docker = docker.DockerClient(base_url=self._base_url, timeout=int(self._timeout))
                else:
                    self._docker = docker.from_env(timeout=int(self._timeout))
            except _DOCKER_ERRORS as exc:
                raise VolumeClientError(f"cannot connect to docker: {exc}") from exc
        return self._docker

    def _list_sync(self, dangling: bool) -> list[VolumeRecord]:
        filters = {"dangling": "true" if dangling else "false"}
        try:
            volumes = self._client().volumes.list(filters=filters)
        except _DOCKER_ERRORS as exc:
            raise VolumeClientError(f"listing volumes failed: {exc}") from exc
        return [volume_from_attrs(volume.attrs) for volume in volumes]

    def _delete_sync(self, name: str, force: bool) -> None:
        try:
            self._client().api.remove_volume(name, force=force)
        except _DOCKER_ERRORS as exc:
            raise VolumeClientError(f"removing volume {name} failed: {exc}") from exc

    async def list_volumes(self, *, dangling: bool) -> list[VolumeRecord]:
        return await asyncio.to_thread(self._list_sync, dangling)

    async def delete_volume(self, name: str, *, force: bool = False) -> None:
        logger.info("Removing volume %s (force=%s)", name, force)
        await asyncio.to_thread(self._delete_sync, name, force)

    def close(self) -> None:
        if self._docker is not None:
            self._docker.close()
            self._docker = None


@dataclass
class InMemoryVolumeClient:
    """Volume store held in memory.

    Volumes named in `in_use` are attached to a container: they are not
    dangling, and removing them fails unless `force` is set. Names in
    `undeletable` fail even when forced.
    """

    volumes: list[VolumeRecord] = field(default_factory=list)
    in_use: set[str] = field(default_factory=set)
    undeletable: set[str] = field(default_factory=set)
    fail_listing: bool = False
    list_calls: list[bool] = field(default_factory=list)
    delete_calls: list[tuple[str, bool]] = field(default_factory=list)

    async def list_volumes(self, *, dangling: bool) -> list[VolumeRecord]:
        self.list_calls.append(dangling)
        if self.fail_listing:
            raise VolumeClientError("volume listing unavailable")
        return [v for v in self.volumes if (v.name not in self.in_use) == dangling]

    async def delete_volume(self, name: str, *, force: bool = False) -> None:
        self.delete_calls.append((name, force))
        if name in self.undeletable:
            raise VolumeClientError(f"volume {name} cannot be removed")
        if name in self.in_use and not force:
            raise VolumeClientError(f"volume {name} is in use")
        remaining = [v for v in self.volumes if v.name != name]
        if len(remaining) == len(self.volumes):
            raise VolumeClientError(f"no such volume: {name}")
        self.volumes = remaining
        self.in_use.discard(name)


def demo_volumes() -> list[VolumeRecord]:
    samples: tuple[tuple[str, str | None], ...] = (
        ("postgres-data", "2026-09-01T10:12:44Z"),
        ("redis-cache", "2026-09-14T08:00:01Z"),
        ("build-artifacts", None),
        ("grafana-storage", "2026-07-22T17:45:30Z"),
        ("scratch", "2026-10-02T12:30:00Z"),
    )
    return [
        VolumeRecord(
            name=name,
            driver="local",
            mountpoint=f"/var/lib/docker/volumes/{name}/_data",
            created_at=created,
            labels=(("com.example.project", name.split("-")[0]),),
        )
        for name, created in samples
    ]


def demo_client() -> InMemoryVolumeClient:
    return InMemoryVolumeClient(
        volumes=demo_volumes(),
        in_use={"postgres-data", "grafana-storage"},
        undeletable={"grafana-storage"},
    )
