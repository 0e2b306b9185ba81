# cmdtree CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines all custom exception classes used by cmdtree.

These exceptions provide structured error handling for the failure cases of a
command run: a broken command tree, a value that does not parse, a malformed
structured argument, missing required values, leftover tokens after help,
and handler failures.

All exceptions inherit from `CmdTreeError`, the base exception for the framework.

Exception Hierarchy:
- CmdTreeError
    ├── ConfigurationError
    ├── ParseError
    ├── FormatError
    ├── ValidationError
    ├── UnknownSubcommandError
    └── HandlerError

Configuration errors abort a run before any resolution happens. Every other
error is surfaced to the host, which maps it to a non-zero exit status.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from cmdtree.command import Command


class CmdTreeError(Exception):
    """Base exception for cmdtree."""


class ConfigurationError(CmdTreeError):
    """Raised when the command tree itself is invalid."""


class ParseError(CmdTreeError):
    """Raised when a raw token cannot be converted for a flag or argument."""

    def __init__(self, message: str, name: str = "", raw: str | None = None) -> None:
        super().__init__(message)
        self.name = name
        self.raw = raw


class FormatError(CmdTreeError):
    """Raised when a query, form or JSON argument fails to decode."""


class ValidationError(CmdTreeError):
    """Raised when required values are missing or a validator rejects a value."""

    def __init__(self, message: str, missing: Sequence[str] | None = None) -> None:
        super().__init__(message)
        self.missing: list[str] = list(missing or [])


class UnknownSubcommandError(CmdTreeError):
    """Raised when tokens remain after rendering help for a command."""

    def __init__(self, args: Sequence[str]) -> None:
        self.args_left: list[str] = list(args)
        super().__init__(f"unknown subcommand {' '.join(self.args_left)!r}")


class HandlerError(CmdTreeError):
    """Wraps an exception raised by a command handler.

    The original exception is kept as `error` and as `__cause__`.
    """

    def __init__(self, command: Command, error: BaseException) -> None:
        self.command = command
        self.error = error
        super().__init__(f"running command {command.full_name!r}: {error}")
