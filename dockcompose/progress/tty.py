"""Progress writer that redraws a live status block on a terminal."""

from __future__ import annotations

import dataclasses
import shutil
import sys
import threading
import time
from collections.abc import Iterable, Mapping
from typing import Any, TextIO

from dockcompose.progress.event import Event, EventStatus
from dockcompose.progress.spinner import Spinner

_IS_WINDOWS = sys.platform == "win32"

_RESET = "\x1b[0m"
_WHITE = "\x1b[37m"
_BLUE = "\x1b[34m"
_RED = "\x1b[31m"
_HIDE_CURSOR = "\x1b[?25l"
_SHOW_CURSOR = "\x1b[?25h"
_UP_ONE = "\x1b[1A"
_DOWN_ONE = "\x1b[1B"
_COLUMN_ZERO = "\x1b[0G"

_REFRESH_INTERVAL = 0.1


def _colorize(text: str, color: str) -> str:
    return f"{color}{text}{_RESET}"


class TTYWriter:
    """Keeps the latest state of every event and redraws them periodically."""

    def __init__(self, out: TextIO, width: int | None = None) -> None:
        self.out = out
        self._width = width
        self._events: dict[str, Event] = {}
        self._event_ids: list[str] = []
        self._repeated = False
        self._num_lines = 0
        self._done = threading.Event()
        self._lock = threading.Lock()
        self._tail_events: list[str] = []

    @property
    def events_by_id(self) -> Mapping[str, Event]:
        """The latest event recorded for each id."""
        return self._events

    def start(self) -> None:
        """Redraw until ``stop`` is called, then draw once more with tail messages."""
        while not self._done.wait(_REFRESH_INTERVAL):
            self._render()
        self._render()
        self._print_tail_events()

    def stop(self) -> None:
        self._done.set()

    def event(self, event: Event) -> None:
        with self._lock:
            if event.id not in self._event_ids:
                self._event_ids.append(event.id)
            last = self._events.get(event.id)
            if last is not None:
                if event.status in (EventStatus.DONE, EventStatus.ERROR) and last.status != event.status:
                    last.stop()
                last.status = event.status
                last.text = event.text
                last.status_text = event.status_text
                last.parent_id = event.parent_id
            else:
                recorded = dataclasses.replace(
                    event, start_time=time.monotonic(), end_time=None, spinner=Spinner()
                )
                if recorded.status in (EventStatus.DONE, EventStatus.ERROR):
                    recorded.stop()
                self._events[event.id] = recorded

    def events(self, events: Iterable[Event]) -> None:
        for event in events:
            self.event(event)

    def tail_msgf(self, msg: str, *args: Any) -> None:
        with self._lock:
            self._tail_events.append(msg % args if args else msg)

    def _terminal_width(self) -> int:
        if self._width is not None:
            return self._width
        return shutil.get_terminal_size(fallback=(80, 24)).columns

    def _print_tail_events(self) -> None:
        with self._lock:
            for msg in self._tail_events:
                print(msg, file=self.out)

    def _render(self) -> None:
        with self._lock:
            if not self._event_ids:
                return
            terminal_width = self._terminal_width()
            cursor = _UP_ONE * (self._num_lines + 1)
            if not self._repeated:
                cursor += _DOWN_ONE
            self._repeated = True
            self.out.write(cursor + _COLUMN_ZERO)
            self.out.write(_HIDE_CURSOR)
            try:
                self._render_lines(terminal_width)
            finally:
                self.out.write(_SHOW_CURSOR)
                self.out.flush()

    def _render_lines(self, terminal_width: int) -> None:
        done = num_done(self._events)
        first_line = f"[+] Running {done}/{self._num_lines}"
        if self._num_lines != 0 and done == self._num_lines:
            first_line = _colorize(first_line, _BLUE)
        print(first_line, file=self.out)

        status_padding = 0
        for event_id in self._event_ids:
            event = self._events[event_id]
            length = len(f"{event.id} {event.text}")
            if status_padding < length:
                status_padding = length
            if event.parent_id:
                status_padding -= 2

        color = not _IS_WINDOWS
        num_lines = 0
        for event_id in self._event_ids:
            event = self._events[event_id]
            if event.parent_id:
                continue
            self.out.write(line_text(event, "", terminal_width, status_padding, color))
            num_lines += 1
            for child_id in self._event_ids:
                child = self._events[child_id]
                if child.parent_id == event.id:
                    self.out.write(line_text(child, "  ", terminal_width, status_padding, color))
                    num_lines += 1
        self._num_lines = num_lines


def line_text(event: Event, pad: str, terminal_width: int, status_padding: int, color: bool) -> str:
    """Render one event as a line padded to the terminal width, ending in its timer."""
    now = time.monotonic()
    start = event.start_time if event.start_time is not None else now
    if event.status == EventStatus.WORKING:
        end = now
    else:
        end = event.end_time if event.end_time is not None else start
    elapsed = max(end - start, 0.0)

    text_len = len(f"{event.id} {event.text}")
    padding = max(status_padding - text_len, 0)
    # Long status texts (error messages) would otherwise wrap and break the layout.
    max_status_len = terminal_width - text_len - status_padding - 15
    status = event.status_text
    if max_status_len > 0 and len(status) > max_status_len:
        status = status[:max_status_len] + "..."

    spinner = event.spinner if event.spinner is not None else Spinner()
    text = f"{pad} {spinner} {event.id} {event.text}{' ' * padding} {status}"
    timer = f"{elapsed:.1f}s\n"
    line = align(text, timer, terminal_width)

    if not color:
        return line
    if event.status == EventStatus.DONE:
        return _colorize(line, _BLUE)
    if event.status == EventStatus.ERROR:
        return _colorize(line, _RED)
    return _colorize(line, _WHITE)


def num_done(events: Mapping[str, Event]) -> int:
    """Count the events whose status is done."""
    return sum(1 for event in events.values() if event.status == EventStatus.DONE)


def align(left: str, right: str, width: int) -> str:
    """Left-justify ``left`` so that ``right`` ends at ``width``."""
    return f"{left.ljust(abs(width - len(right) - 1))} {right}"