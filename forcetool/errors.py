"""Reporting fatal errors and informational messages on standard error."""

from __future__ import annotations

import sys
from typing import Any, NoReturn


def format_error(message: str, *args: Any) -> str:
    """Build the line printed for a fatal error.

    A message starting with a newline is printed without the "ERROR: " prefix.
    """
    text = message[1:] if message.startswith("\n") else f"ERROR: {message}"
    if args:
        text = text % args
    return text + "\n"


def error_and_exit(message: str, *args: Any) -> NoReturn:
    """Write the error to standard error and exit with status 1."""
    sys.stderr.write(format_error(message, *args))
    raise SystemExit(1)


def exit_if_error(err: BaseException | None, message: str, *args: Any) -> None:
    """Exit with the given message when err is set."""
    if err is not None:
        error_and_exit(message, *args)


def info(*args: Any) -> None:
    """Write an informational line to standard error."""
    print(*args, file=sys.stderr)