"""Standardized CLI error codes and error handling.

Provides consistent exit codes for the reading-list CLI.
"""
from __future__ import annotations

import sys
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional


class ExitCode(IntEnum):
    """Standard CLI exit codes."""
    SUCCESS = 0
    ERROR = 1
    USAGE = 2
    CONFIG_ERROR = 3
    INVALID_INPUT = 4
    NOT_FOUND = 6
    INTERRUPTED = 130  # Standard for Ctrl+C


@dataclass
class CLIError(Exception):
    """CLI error with exit code and message."""
    message: str
    code: ExitCode = ExitCode.ERROR
    hint: Optional[str] = None

    def __str__(self) -> str:
        return self.message


class ConfigError(CLIError):
    """Configuration-related error."""
    def __init__(self, message: str, hint: Optional[str] = None):
        super().__init__(message, ExitCode.CONFIG_ERROR, hint)


class NotFoundError(CLIError):
    """Resource not found error."""
    def __init__(self, message: str, hint: Optional[str] = None):
        super().__init__(message, ExitCode.NOT_FOUND, hint)


class UsageError(CLIError):
    """Usage/argument error."""
    def __init__(self, message: str, hint: Optional[str] = None):
        super().__init__(message, ExitCode.USAGE, hint)


def exit_code_for(error: BaseException) -> int:
    """Map an exception to the exit code a command should return."""
    if isinstance(error, CLIError):
        return int(error.code)
    if isinstance(error, KeyboardInterrupt):
        return int(ExitCode.INTERRUPTED)
    if isinstance(error, FileNotFoundError):
        return int(ExitCode.NOT_FOUND)
    if isinstance(error, ValueError):
        return int(ExitCode.INVALID_INPUT)
    return int(ExitCode.ERROR)


def handle_error(error: BaseException, verbose: bool = False) -> int:
    """Handle an exception and return appropriate exit code.

    Args:
        error: The exception to handle.
        verbose: If True, print stack trace for unexpected errors.

    Returns:
        Exit code to use.
    """
    if isinstance(error, CLIError):
        print(f"Error: {error.message}", file=sys.stderr)
        if error.hint:
            print(f"Hint: {error.hint}", file=sys.stderr)
        return int(error.code)

    if isinstance(error, KeyboardInterrupt):
        print("\nInterrupted.", file=sys.stderr)
        return int(ExitCode.INTERRUPTED)

    print(f"Error: {error}", file=sys.stderr)
    if verbose:
        import traceback
        traceback.print_exc()
    return exit_code_for(error)
