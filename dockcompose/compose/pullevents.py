"""Turning image pull and push streams into progress events."""

from __future__ import annotations

import codecs
import enum
import json
import time
from collections.abc import Callable, Container, Iterator, Mapping
from dataclasses import dataclass
from typing import IO, Any

from dockcompose.progress.event import Event, EventStatus

_CHUNK_SIZE = 4096
_DEFAULT_WIDTH = 200
_SIZE_UNITS = ("B", "kB", "MB", "GB", "TB", "PB", "EB", "ZB", "YB")

_PULL_DONE_STATUSES = ("Pull complete", "Already exists")
_PULL_DONE_FRAGMENTS = ("Image is up to date", "Downloaded newer image")


class PullPolicy(str, enum.Enum):
    """When a service image is pulled."""

    ALWAYS = "always"
    NEVER = "never"
    MISSING = "missing"
    IF_NOT_PRESENT = "if_not_present"
    BUILD = "build"


def _policy_value(policy: PullPolicy | str | None) -> str:
    if policy is None:
        return ""
    if isinstance(policy, PullPolicy):
        return policy.value
    return policy


def _human_size(size: float) -> str:
    index = 0
    while size >= 1000 and index < len(_SIZE_UNITS) - 1:
        size /= 1000
        index += 1
    return f"{size:.4g}{_SIZE_UNITS[index]}"


def _format_duration(seconds: int) -> str:
    if seconds <= 0:
        return "0s"
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{hours}h{minutes}m{secs}s"
    if minutes:
        return f"{minutes}m{secs}s"
    return f"{secs}s"


@dataclass(frozen=True)
class JSONProgress:
    """Progress detail of one layer in a pull or push stream."""

    current: int = 0
    total: int = 0
    start: int = 0
    units: str = ""
    hide_counts: bool = False
    width: int = _DEFAULT_WIDTH

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> JSONProgress:
        return cls(
            current=int(data.get("current") or 0),
            total=int(data.get("total") or 0),
            start=int(data.get("start") or 0),
            units=str(data.get("units") or ""),
            hide_counts=bool(data.get("hidecounts") or False),
        )

    def render(self, now: Callable[[], float] = time.time) -> str:
        """Render the progress as a bar, counts and an estimate of time left."""
        if self.current <= 0 and self.total <= 0:
            return ""
        if self.total <= 0:
            if not self.units:
                return f"{_human_size(self.current):>8}"
            return f"{self.current} {self.units}"

        percentage = min(int(self.current / self.total * 100) // 2, 50)
        bar = ""
        if self.width > 110:
            spaces = max(50 - percentage, 0)
            bar = f"[{'=' * percentage}>{' ' * spaces}] "

        numbers = ""
        if self.hide_counts:
            numbers = ""
        elif not self.units:
            current = _human_size(self.current)
            if self.current > self.total:
                numbers = f"{current:>8}"
            else:
                numbers = f"{current:>8}/{_human_size(self.total)}"
        elif self.current > self.total:
            numbers = f"{self.current} {self.units}"
        else:
            numbers = f"{self.current}/{self.total} {self.units}"

        time_left = ""
        if self.current > 0 and self.start > 0 and percentage < 50:
            elapsed = now() - self.start
            per_entry = elapsed / self.current
            left = int((self.total - self.current) * per_entry)
            if self.width > 50:
                time_left = " " + _format_duration(left)
        return bar + numbers + time_left

    def __str__(self) -> str:
        return self.render()


@dataclass(frozen=True)
class JSONMessage:
    """One message of an engine pull or push stream."""

    id: str = ""
    status: str = ""
    progress: JSONProgress | None = None
    error: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> JSONMessage:
        detail = data.get("progressDetail")
        progress = JSONProgress.from_dict(detail) if isinstance(detail, Mapping) else None
        error_detail = data.get("errorDetail")
        error = None
        if isinstance(error_detail, Mapping):
            error = str(error_detail.get("message") or "")
        return cls(
            id=str(data.get("id") or ""),
            status=str(data.get("status") or ""),
            progress=progress,
            error=error,
        )


def to_pull_progress_event(parent: str, message: JSONMessage) -> Event | None:
    """Build the progress event for a pull message, or None when it reports nothing."""
    if not message.id or message.progress is None:
        return None
    text = str(message.progress)
    status = EventStatus.WORKING
    if message.status in _PULL_DONE_STATUSES or any(
        fragment in message.status for fragment in _PULL_DONE_FRAGMENTS
    ):
        status = EventStatus.DONE
    if message.error is not None:
        status = EventStatus.ERROR
        text = message.error
    return Event(
        id=message.id,
        parent_id=parent,
        text=message.status,
        status=status,
        status_text=text,
    )


def to_push_progress_event(prefix: str, message: JSONMessage) -> Event | None:
    """Build the progress event for a push message, or None when it has no id."""
    if not message.id:
        return None
    text = ""
    status = EventStatus.WORKING
    if message.status in _PULL_DONE_STATUSES:
        status = EventStatus.DONE
    if message.error is not None:
        status = EventStatus.ERROR
        text = message.error
    if message.progress is not None:
        text = str(message.progress)
    return Event(
        id=f"Pushing {prefix}: {message.id}",
        text=message.status,
        status=status,
        status_text=text,
    )


def needs_pull(
    image: str, pull_policy: PullPolicy | str | None, local_images: Container[str]
) -> bool:
    """Tell whether an image must be pulled before the service can run."""
    if not image:
        return False
    policy = _policy_value(pull_policy)
    if policy in ("", PullPolicy.MISSING.value, PullPolicy.IF_NOT_PRESENT.value):
        return image not in local_images
    if policy in (PullPolicy.NEVER.value, PullPolicy.BUILD.value):
        return False
    return True


def skip_reason(
    image: str, pull_policy: PullPolicy | str | None, local_images: Container[str]
) -> str | None:
    """Return why an explicit pull skips a service, or None when it pulls it."""
    if not image:
        return "Skipped"
    policy = _policy_value(pull_policy)
    if policy in (PullPolicy.NEVER.value, PullPolicy.BUILD.value):
        return "Skipped"
    if policy in (PullPolicy.MISSING.value, PullPolicy.IF_NOT_PRESENT.value):
        if image in local_images:
            return "Exists"
    return None


def decode_stream(stream: IO[bytes] | IO[str]) -> Iterator[JSONMessage]:
    """Decode the concatenated JSON messages of an engine stream."""
    decoder = json.JSONDecoder()
    bytes_decoder = codecs.getincrementaldecoder("utf-8")()
    buffer = ""
    eof = False
    while True:
        buffer = buffer.lstrip()
        if buffer:
            try:
                value, end = decoder.raw_decode(buffer)
            except json.JSONDecodeError as exc:
                if eof:
                    raise ValueError(f"malformed message in stream: {exc}") from exc
            else:
                buffer = buffer[end:]
                if value is None:
                    yield JSONMessage()
                    continue
                if not isinstance(value, dict):
                    raise ValueError(f"unexpected message in stream: {value!r}")
                yield JSONMessage.from_dict(value)
                continue
        elif eof:
            return
        chunk = stream.read(_CHUNK_SIZE)
        if not chunk:
            eof = True
            if isinstance(chunk, bytes):
                buffer += bytes_decoder.decode(b"", final=True)
            continue
        if isinstance(chunk, bytes):
            buffer += bytes_decoder.decode(chunk)
        else:
            buffer += chunk