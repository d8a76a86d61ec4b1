"""
Interfaces and protocols for dependency injection.
"""

from __future__ import annotations

from typing import Protocol


class LogSink(Protocol):
    """Printf-style message sink. Any ``logging.Logger`` satisfies it."""

    def debug(self, msg: str, *args: object) -> None: ...

    def info(self, msg: str, *args: object) -> None: ...

    def warning(self, msg: str, *args: object) -> None: ...

    def error(self, msg: str, *args: object) -> None: ...
