"""A text spinner that advances as it is rendered."""

from __future__ import annotations

import sys
import time
from dataclasses import dataclass, field

_IS_WINDOWS = sys.platform == "win32"


def _default_chars() -> list[str]:
    if _IS_WINDOWS:
        return ["-"]
    return ["⠋", "⠙", "⠹", "⠸", "⠼", "⠴", "⠦", "⠧", "⠇", "⠏"]


def _default_done() -> str:
    return "-" if _IS_WINDOWS else "⠿"


@dataclass
class Spinner:
    """Frames a progress line; shows ``done`` once stopped."""

    chars: list[str] = field(default_factory=_default_chars)
    done: str = field(default_factory=_default_done)
    started: float = field(default_factory=time.monotonic)
    index: int = 0
    stopped: bool = False

    def __str__(self) -> str:
        if self.stopped:
            return self.done
        if time.monotonic() - self.started > 0.1:
            self.index = (self.index + 1) % len(self.chars)
        return self.chars[self.index]

    def stop(self) -> None:
        """Freeze the spinner on its done character."""
        self.stopped = True