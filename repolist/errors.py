"""Errors that end a run with exit code 1."""

from typing import Optional


class RepolistError(Exception):
    """Base for errors reported to the user as a single line."""


class ValidationError(RepolistError):
    """Bad option value. Raised before any network access."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class FetchError(RepolistError):
    """gh missing, not authenticated, failed, or returned an unreadable document."""

    def __init__(self, message: str, stderr: Optional[str] = None):
        self.stderr = stderr
        super().__init__(message)


class OutputError(RepolistError):
    """The output file could not be written."""

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(f"could not write {path}: {message}")
