# Copyright 2025 Roger Cibrian
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Logging interface for autorecipe.

Library modules report progress through a small logger protocol instead of
printing directly, so the index builder and chain resolver stay quiet when
used programmatically and chatty when driven from the CLI.

Output levels:

- step: Always printed (progress indicators such as "[1/2] Scanning...")
- warning: Always printed (skipped recipe files, unreadable folders)
- verbose: Only printed when verbose mode is enabled
- debug: Only printed when debug mode is enabled (implies verbose)

Example:
    Configure the global logger (what the CLI does):
        ```python
        from autorecipe.logging import get_logger, set_global_logger

        set_global_logger(get_logger(verbose=True))
        ```

    Use in library code:
        ```python
        from autorecipe.logging import get_global_logger

        logger = get_global_logger()
        logger.verbose("INDEX", "Scanning ~/Library/AutoPkg/RecipeRepos")
        logger.debug("PARSE", "plist attempt failed, trying yaml")
        ```

Note:
    The default global logger is silent, so nothing is printed unless a
    caller installs another one.
"""

from __future__ import annotations

import sys
from typing import Protocol, TextIO


class Logger(Protocol):
    """Protocol for logger implementations."""

    def step(self, step: int, total: int, message: str) -> None:
        """Print a step indicator.

        Args:
            step: Current step number (1-based).
            total: Total number of steps.
            message: Step description.
        """
        ...

    def warning(self, prefix: str, message: str) -> None:
        """Print a warning that does not stop the current operation."""
        ...

    def verbose(self, prefix: str, message: str) -> None:
        """Print a verbose log message.

        Args:
            prefix: Message prefix (e.g., "INDEX", "CHAIN").
            message: Log message.
        """
        ...

    def debug(self, prefix: str, message: str) -> None:
        """Print a debug log message.

        Args:
            prefix: Message prefix (e.g., "PARSE", "CONFIG").
            message: Log message.
        """
        ...


class DefaultLogger:
    """Logger that prints to a text stream (stdout by default).

    Respects the verbose and debug flags and formats every line as
    ``[PREFIX] message`` to match the CLI output.
    """

    def __init__(
        self, verbose: bool = False, debug: bool = False, stream: TextIO | None = None
    ) -> None:
        """Initialize logger with verbosity settings.

        Args:
            verbose: If True, print verbose messages.
            debug: If True, print debug messages (implies verbose).
            stream: Where to write. Resolved at print time when None so
                pytest's capsys sees the output.
        """
        self._verbose = verbose or debug
        self._debug = debug
        self._stream = stream

    def _emit(self, line: str) -> None:
        print(line, file=self._stream or sys.stdout)

    def step(self, step: int, total: int, message: str) -> None:
        self._emit(f"[{step}/{total}] {message}")

    def warning(self, prefix: str, message: str) -> None:
        self._emit(f"[{prefix}] WARNING: {message}")

    def verbose(self, prefix: str, message: str) -> None:
        if self._verbose:
            self._emit(f"[{prefix}] {message}")

    def debug(self, prefix: str, message: str) -> None:
        if self._debug:
            self._emit(f"[{prefix}] {message}")


class SilentLogger:
    """Logger that suppresses all output."""

    def step(self, step: int, total: int, message: str) -> None:
        pass

    def warning(self, prefix: str, message: str) -> None:
        pass

    def verbose(self, prefix: str, message: str) -> None:
        pass

    def debug(self, prefix: str, message: str) -> None:
        pass


# Global logger instance (defaults to silent)
_global_logger: Logger = SilentLogger()


def get_logger(verbose: bool = False, debug: bool = False) -> Logger:
    """Get a printing logger with the given verbosity.

    Args:
        verbose: If True, logger will print verbose messages.
        debug: If True, logger will print debug messages (implies verbose).

    Returns:
        A DefaultLogger configured with the specified verbosity.
    """
    return DefaultLogger(verbose=verbose, debug=debug)


def get_global_logger() -> Logger:
    """Return the logger library functions use when none is passed in."""
    return _global_logger


def set_global_logger(logger: Logger) -> None:
    """Set the global logger instance.

    Args:
        logger: Logger instance to use as the global logger.

    Note:
        This affects every library function called without an explicit
        ``logger`` argument. Tests should pass a logger directly instead.
    """
    global _global_logger
    _global_logger = logger
