"""Grouping project containers into stacks for listing."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

PROJECT_LABEL = "com.docker.compose.project"
SERVICE_LABEL = "com.docker.compose.service"
CONFIG_FILES_LABEL = "com.docker.compose.project.config_files"


class MissingLabelError(ValueError):
    """A container lacks a label that every project container carries."""

    def __init__(self, label: str, container_id: str) -> None:
        super().__init__(
            f'No label "{label}" set on container "{container_id}" of compose project'
        )
        self.label = label
        self.container_id = container_id


@dataclass
class Container:
    """A container as reported by the engine's container list."""

    id: str
    state: str = ""
    labels: dict[str, str] = field(default_factory=dict)
    names: list[str] = field(default_factory=list)
    command: str = ""


@dataclass(frozen=True)
class Stack:
    """A compose project seen through its running containers."""

    id: str
    name: str
    status: str
    config_files: str


def containers_to_stacks(containers: Iterable[Container]) -> list[Stack]:
    """Build one stack per project label, ordered by project name."""
    by_project = group_container_by_label(containers, PROJECT_LABEL)
    return [
        Stack(
            id=project,
            name=project,
            status=combined_status(container_to_state(members)),
            config_files=combined_config_files(members),
        )
        for project, members in by_project.items()
    ]


def combined_config_files(containers: Iterable[Container]) -> str:
    """Join the distinct config files of the containers, in order of appearance."""
    seen: dict[str, None] = {}
    for container in containers:
        try:
            files = container.labels[CONFIG_FILES_LABEL]
        except KeyError:
            raise MissingLabelError(CONFIG_FILES_LABEL, container.id) from None
        seen.update(dict.fromkeys(files.split(",")))
    return ",".join(seen)


def container_to_state(containers: Iterable[Container]) -> list[str]:
    """Return the state of each container."""
    return [container.state for container in containers]


def combined_status(statuses: Iterable[str]) -> str:
    """Summarise statuses as ``status(count)`` entries sorted by status."""
    counts = Counter(statuses)
    return ", ".join(f"{status}({counts[status]})" for status in sorted(counts))


def group_container_by_label(
    containers: Iterable[Container], label_name: str
) -> dict[str, list[Container]]:
    """Group containers by the value of ``label_name``; keys come out sorted."""
    groups: dict[str, list[Container]] = {}
    for container in containers:
        try:
            value = container.labels[label_name]
        except KeyError:
            raise MissingLabelError(label_name, container.id) from None
        groups.setdefault(value, []).append(container)
    return {key: groups[key] for key in sorted(groups)}


def _first(items: Sequence[str]) -> str | None:
    return items[0] if items else None