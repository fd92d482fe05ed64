from __future__ import annotations

from dataclasses import dataclass, field

import docker
from docker.errors import DockerException


class RuntimeUnavailable(Exception):
    pass


@dataclass(frozen=True)
class ContainerRef:
    id: str
    labels: dict[str, str] = field(default_factory=dict)


def connect(base_url: str) -> docker.DockerClient:
    """Connect to the Docker engine and make sure it answers.

    Only used at startup; failing here is fatal for the process.
    """
    try:
        c = docker.DockerClient(base_url=base_url)
        c.ping()
        return c
    except DockerException as e:
        raise RuntimeUnavailable(f"Could not connect to docker at {base_url}: {e}") from e


class DockerRuntime:
    """Lists running containers and their labels through the docker SDK."""

    def __init__(self, client: docker.DockerClient) -> None:
        self.client = client

    def list_containers(self) -> list[ContainerRef]:
        # Running containers only; labels come straight from the list response.
        rows = self.client.api.containers(all=False)
        return [ContainerRef(id=r.get("Id", ""), labels=dict(r.get("Labels") or {})) for r in rows]
