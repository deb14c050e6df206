"""A writer that splits incoming data into lines and hands each to a consumer."""

from __future__ import annotations

from collections.abc import Callable


class LineWriter:
    """Collects written data and calls ``consumer`` once per complete line."""

    def __init__(self, consumer: Callable[[str], None]) -> None:
        self._consumer = consumer
        self._buffer = bytearray()

    def write(self, data: bytes | str) -> int:
        """Append ``data`` and emit every complete line; return the size written."""
        if isinstance(data, str):
            data = data.encode()
        self._buffer.extend(data)
        while (index := self._buffer.find(b"\n")) >= 0:
            line = bytes(self._buffer[:index])
            del self._buffer[: index + 1]
            self._consumer(line.decode(errors="replace"))
        return len(data)

    def close(self) -> None:
        """Emit whatever remains in the buffer as a final line."""
        if not self._buffer:
            return
        rest = bytes(self._buffer)
        self._buffer.clear()
        self._consumer(rest.decode(errors="replace"))

    def __enter__(self) -> LineWriter:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def get_writer(consumer: Callable[[str], None]) -> LineWriter:
    """Create a LineWriter feeding ``consumer``."""
    return LineWriter(consumer)