"""
Console logger adapter - implements LoggerProtocol for interactive use.

Prints encoder diagnostics to stdout, for example while working out why a
field was left unconverted by the string option.
"""

from __future__ import annotations


class ConsoleLogger:
    """
    Logger implementation for consoles and notebooks (implements LoggerProtocol).

    Outputs messages to stdout with optional verbose mode.
    """

    def __init__(self, verbose: bool = False) -> None:
        """
        Initialize console logger.

        Args:
            verbose: If True, show debug and info messages. If False, only warnings/errors.
        """
        self.verbose = verbose

    def debug(self, message: str) -> None:
        """Log debug message (only if verbose)."""
        if self.verbose:
            print(f'[DEBUG] {message}')

    def info(self, message: str) -> None:
        """Log info message (only if verbose)."""
        if self.verbose:
            print(f'[INFO] {message}')

    def warning(self, message: str) -> None:
        """Log warning message."""
        print(f'[WARNING] {message}')

    def error(self, message: str) -> None:
        """Log error message."""
        print(f'[ERROR] {message}')
