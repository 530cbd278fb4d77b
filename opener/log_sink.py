"""
Opener - Output channel.
Every component takes a sink instead of writing to a global channel.
Lines look like `[INFO] message`, `[WARN] message`, `[ERROR] message`.
"""
import sys
from typing import List, Optional, Protocol, TextIO


class LogSink(Protocol):
    def info(self, message: str) -> None: ...
    def warn(self, message: str) -> None: ...
    def error(self, message: str) -> None: ...


class OutputChannel:
    """Append-only line channel printed to a stream (stdout by default)."""

    def __init__(self, stream: Optional[TextIO] = None):
        self._stream = stream

    def append_line(self, line: str) -> None:
        print(line, file=self._stream or sys.stdout, flush=True)

    def info(self, message: str) -> None:
        self.append_line(f"[INFO] {message}")

    def warn(self, message: str) -> None:
        self.append_line(f"[WARN] {message}")

    def error(self, message: str) -> None:
        self.append_line(f"[ERROR] {message}")


class MemoryChannel(OutputChannel):
    """Keeps lines in memory; optionally forwards them to another sink's stream."""

    def __init__(self, echo: bool = False):
        super().__init__()
        self.lines: List[str] = []
        self._echo = echo

    def append_line(self, line: str) -> None:
        self.lines.append(line)
        if self._echo:
            super().append_line(line)

    def at_level(self, level: str) -> List[str]:
        prefix = f"[{level.upper()}] "
        return [line for line in self.lines if line.startswith(prefix)]
