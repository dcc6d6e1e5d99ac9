"""Error types and exit codes shared by every pylon command.

Clients raise these; :func:`handle_error` turns one into a diagnostic on
stderr and the process exit code.
"""
from __future__ import annotations

import sys
import traceback
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional


class ExitCode(IntEnum):
    SUCCESS = 0
    ERROR = 1
    USAGE = 2
    CONFIG_ERROR = 3
    AUTH_ERROR = 4
    NETWORK_ERROR = 5
    NOT_FOUND = 6
    INTERRUPTED = 130  # 128 + SIGINT


@dataclass
class CLIError(Exception):
    """Base error: a message, the exit code it maps to and an optional hint."""
    message: str
    code: ExitCode = ExitCode.ERROR
    hint: Optional[str] = None

    def __str__(self) -> str:
        return self.message


@dataclass
class ConfigError(CLIError):
    """A setting the operation needs is not configured."""
    code: ExitCode = ExitCode.CONFIG_ERROR


@dataclass
class ConfigFileError(CLIError):
    """The config file exists but could not be read or parsed."""
    code: ExitCode = ExitCode.CONFIG_ERROR


@dataclass
class NetworkError(CLIError):
    """Connection, DNS or timeout failure; the requests exception is the cause."""
    code: ExitCode = ExitCode.NETWORK_ERROR


@dataclass
class UsageError(CLIError):
    code: ExitCode = ExitCode.USAGE


@dataclass
class DecodeError(CLIError):
    """Response body was not JSON of the expected shape."""


def _exit_code_for_status(status_code: int) -> ExitCode:
    if status_code == 404:
        return ExitCode.NOT_FOUND
    if status_code in (401, 403):
        return ExitCode.AUTH_ERROR
    return ExitCode.ERROR


class APIError(CLIError):
    """Remote service answered with an unexpected status.

    ``message`` is the ``error`` field of a JSON body when present, otherwise
    the raw body text.
    """

    def __init__(self, status_code: int, message: str, service: str = "api"):
        super().__init__(message, _exit_code_for_status(status_code))
        self.status_code = status_code
        self.service = service

    def __str__(self) -> str:
        return f"{self.service} api: {self.status_code} {self.message}"


def handle_error(error: BaseException, verbose: bool = False) -> int:
    """Report ``error`` on stderr and return the exit code for it.

    With ``verbose``, a CLIError also shows its chained cause and any other
    exception shows its traceback.
    """
    if isinstance(error, KeyboardInterrupt):
        print("\nInterrupted.", file=sys.stderr)
        return ExitCode.INTERRUPTED

    print(f"Error: {error}", file=sys.stderr)
    if not isinstance(error, CLIError):
        if verbose:
            traceback.print_exception(type(error), error, error.__traceback__)
        return ExitCode.ERROR

    if error.hint:
        print(f"Hint: {error.hint}", file=sys.stderr)
    if verbose and error.__cause__ is not None:
        print(f"Cause: {error.__cause__!r}", file=sys.stderr)
    return error.code
