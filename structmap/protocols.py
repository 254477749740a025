"""
Shared protocols for structmap.

The encoder never logs on its own: it reports diagnostics to an injected
logger, and the default NullLogger drops them. The encoder emits debug
(why a value was kept as a leaf or left unconverted) and warning (a string
conversion that raised); info and error complete the interface so that a
host application logger fits as is.
"""

from __future__ import annotations

from typing import Protocol


class LoggerProtocol(Protocol):
    """
    Protocol for logger - enables the encoder to work with any logging implementation.

    Implementations:
    - ConsoleLogger (logger.py): Logs to stdout with optional verbose mode
    - NullLogger (below): No-op implementation, the default
    """

    def debug(self, message: str) -> None: ...
    def info(self, message: str) -> None: ...
    def warning(self, message: str) -> None: ...
    def error(self, message: str) -> None: ...


class NullLogger:
    """
    No-op logger implementation for when logging is optional.

    Use this when a function requires a LoggerProtocol but the caller
    doesn't need logging output.
    """

    def debug(self, message: str) -> None:
        pass

    def info(self, message: str) -> None:
        pass

    def warning(self, message: str) -> None:
        pass

    def error(self, message: str) -> None:
        pass
