"""Interactive questions asked on the terminal."""

from __future__ import annotations

import getpass
import sys
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TextIO

_YES = frozenset({"y", "yes"})
_NO = frozenset({"n", "no"})


@dataclass
class User:
    """Asks the user questions; reads from ``stdin`` and writes to ``stdout``."""

    stdin: TextIO | None = None
    stdout: TextIO | None = None

    def _out(self) -> TextIO:
        return self.stdout if self.stdout is not None else sys.stdout

    def _ask(self, question: str) -> str:
        out = self._out()
        out.write(question)
        out.flush()
        source = self.stdin if self.stdin is not None else sys.stdin
        line = source.readline()
        if not line:
            raise EOFError("no answer given")
        return line.rstrip("\r\n")

    def select(self, message: str, options: Sequence[str]) -> int:
        """Show ``options`` and return the index of the chosen one."""
        if not options:
            raise ValueError("please provide options to select from")
        out = self._out()
        print(f"? {message}", file=out)
        for number, option in enumerate(options, start=1):
            print(f"  {number}) {option}", file=out)
        while True:
            answer = self._ask("Answer: ").strip()
            if answer.isdigit() and 1 <= int(answer) <= len(options):
                return int(answer) - 1
            if answer in options:
                return list(options).index(answer)
            print(f"invalid choice: {answer!r}", file=out)

    def input(self, message: str, default_value: str = "") -> str:
        """Ask for a line of text; an empty answer gives ``default_value``."""
        suffix = f" ({default_value})" if default_value else ""
        answer = self._ask(f"? {message}{suffix} ")
        return answer if answer else default_value

    def confirm(self, message: str, default_value: bool = False) -> bool:
        """Ask a yes or no question."""
        hint = "(Y/n)" if default_value else "(y/N)"
        while True:
            answer = self._ask(f"? {message} {hint} ").strip().lower()
            if not answer:
                return default_value
            if answer in _YES:
                return True
            if answer in _NO:
                return False
            print("please answer yes or no", file=self._out())

    def password(self, message: str) -> str:
        """Ask for text without echoing it."""
        question = f"? {message} "
        if self.stdin is None:
            return getpass.getpass(question, stream=self._out())
        return self._ask(question)