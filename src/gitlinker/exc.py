"""Exceptions for gitlinker."""

from __future__ import annotations

from pathlib import Path


class GitLinkerException(Exception):
    """Standard exception raised by gitlinker.

    Parameters
    ----------
    message : str
        The error message describing what went wrong.
    path : Optional[Path | str]
        The file path related to this exception, if any.
    suggestion : Optional[str]
        A suggestion on how to fix the error, if applicable.
    """

    def __init__(
        self,
        message: str,
        path: Path | str | None = None,
        suggestion: str | None = None,
    ) -> None:
        """Initialize exception with metadata."""
        self.message = message
        self.path = Path(path) if isinstance(path, str) else path
        self.suggestion = suggestion
        super().__init__(message)

    def __str__(self) -> str:
        """Return formatted string representation of exception."""
        result = self.message
        if self.path:
            result += f" (path: {self.path})"
        if self.suggestion:
            result += f"\nSuggestion: {self.suggestion}"
        return result


# Configuration related exceptions
class ConfigException(GitLinkerException):
    """Base exception for configuration related errors."""


class MalformedIncludeError(ConfigException):
    """An ``[includeIf "gitdir:..."]`` section has no ``path =`` line.

    Parameters
    ----------
    line_number : int
        1-based line number of the offending ``[includeIf ...]`` header.

    Examples
    --------
    >>> err = MalformedIncludeError(3)
    >>> err.line_number
    3
    >>> err.message
    'includeIf section on line 3 has no "path =" entry'
    """

    def __init__(
        self,
        line_number: int,
        path: Path | str | None = None,
        suggestion: str | None = None,
    ) -> None:
        self.line_number = line_number
        if suggestion is None:
            suggestion = (
                "Add a 'path = <profile>' line below the header or remove the section"
            )
        super().__init__(
            message=f'includeIf section on line {line_number} has no "path =" entry',
            path=path,
            suggestion=suggestion,
        )


class ConfigDecodeError(ConfigException):
    """A config file is not valid UTF-8.

    Parameters
    ----------
    offset : int
        Byte offset of the first undecodable byte.

    Examples
    --------
    >>> str(ConfigDecodeError(12, path="/etc/gitconfig"))
    'Config is not valid UTF-8 (byte offset 12) (path: /etc/gitconfig)'
    """

    def __init__(
        self,
        offset: int,
        path: Path | str | None = None,
        suggestion: str | None = None,
    ) -> None:
        self.offset = offset
        super().__init__(
            message=f"Config is not valid UTF-8 (byte offset {offset})",
            path=path,
            suggestion=suggestion,
        )


class ConfigLoadError(ConfigException):
    """Error loading a gitlinker settings file."""
