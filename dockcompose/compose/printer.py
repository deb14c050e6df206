"""Collecting container events and passing their logs to a consumer."""

from __future__ import annotations

import enum
import logging
import queue
import sys
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol, TextIO

_log = logging.getLogger(__name__)


class LogConsumer(Protocol):
    def register(self, container: str) -> None: ...

    def status(self, container: str, message: str) -> None: ...

    def log(self, container: str, service: str, line: str) -> None: ...


class ContainerEventType(enum.Enum):
    """Kinds of event a container can produce."""

    LOG = "log"
    ATTACH = "attach"
    STOPPED = "stopped"
    EXIT = "exit"
    USER_CANCEL = "user-cancel"


@dataclass(frozen=True)
class ContainerEvent:
    """Something that happened to an attached container."""

    type: ContainerEventType
    container: str = ""
    service: str = ""
    line: str = ""
    exit_code: int = 0
    restarting: bool = False


class LogPrinter:
    """Watches application containers and forwards their logs to a consumer."""

    def __init__(self, consumer: LogConsumer, out: TextIO | None = None) -> None:
        self._consumer = consumer
        self._queue: queue.Queue[ContainerEvent] = queue.Queue()
        self._out = out

    def handle_event(self, event: ContainerEvent) -> None:
        """Queue an event for the running loop."""
        self._queue.put(event)

    def cancel(self) -> None:
        """Tell the loop that the user asked to stop."""
        self._queue.put(ContainerEvent(type=ContainerEventType.USER_CANCEL))

    def run(
        self,
        cascade_stop: bool,
        exit_code_from: str,
        stop_fn: Callable[[], object],
    ) -> int:
        """Process events until the last attached container ends; return the exit code."""
        aborting = False
        exit_code = 0
        containers: set[str] = set()
        while True:
            event = self._queue.get()
            container = event.container
            if event.type is ContainerEventType.USER_CANCEL:
                aborting = True
            elif event.type is ContainerEventType.ATTACH:
                if container in containers:
                    continue
                containers.add(container)
                self._consumer.register(container)
            elif event.type in (ContainerEventType.EXIT, ContainerEventType.STOPPED):
                if not event.restarting:
                    containers.discard(container)
                if not aborting:
                    self._consumer.status(container, f"exited with code {event.exit_code}")
                if cascade_stop:
                    if not aborting:
                        aborting = True
                        print("Aborting on container exit...", file=self._out or sys.stdout)
                        stop_fn()
                    if not exit_code_from:
                        exit_code_from = event.service
                    if exit_code_from == event.service:
                        _log.error("%d", event.exit_code)
                        exit_code = event.exit_code
                if not containers:
                    return exit_code
            elif event.type is ContainerEventType.LOG:
                if not aborting:
                    self._consumer.log(container, event.service, event.line)