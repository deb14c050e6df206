"""Summaries of project containers as shown by ``ps``."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from dockcompose.compose.stacks import PROJECT_LABEL, SERVICE_LABEL, Container


@dataclass(frozen=True)
class Port:
    """A port mapping as reported by the container list."""

    private_port: int
    public_port: int = 0
    ip: str = ""
    type: str = ""


@dataclass(frozen=True)
class ContainerState:
    """The state part of a container inspection."""

    status: str
    health: str | None = None
    exit_code: int = 0


@dataclass(frozen=True)
class PortPublisher:
    """A published port of a container."""

    url: str
    target_port: int
    published_port: int
    protocol: str = ""


@dataclass(frozen=True)
class ContainerSummary:
    """One line of ``ps`` output."""

    id: str
    name: str
    project: str
    service: str
    command: str = ""
    state: str = ""
    health: str = ""
    exit_code: int = 0
    publishers: list[PortPublisher] = field(default_factory=list)


def _container_name(container: Container) -> str:
    for name in container.names:
        stripped = name.lstrip("/")
        if "/" not in stripped:
            return stripped
    return container.id


def summarize(
    container: Container,
    ports: Iterable[Port] = (),
    state: ContainerState | None = None,
) -> ContainerSummary:
    """Combine a listed container, its ports and its inspected state into a summary."""
    publishers = [
        PortPublisher(
            url=port.ip,
            target_port=port.private_port,
            published_port=port.public_port,
            protocol=port.type,
        )
        for port in sorted(ports, key=lambda p: p.private_port)
    ]
    health = ""
    exit_code = 0
    if state is not None:
        if state.status == "running":
            health = state.health or ""
        elif state.status in ("exited", "dead"):
            exit_code = state.exit_code
    return ContainerSummary(
        id=container.id,
        name=_container_name(container),
        project=container.labels.get(PROJECT_LABEL, ""),
        service=container.labels.get(SERVICE_LABEL, ""),
        command=container.command,
        state=container.state,
        health=health,
        exit_code=exit_code,
        publishers=publishers,
    )