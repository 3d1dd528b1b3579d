"""
Error taxonomy for gitdevflow.

Every failure that can occur while resolving a version derives from
VersionResolutionError, so callers that only want a version string can
catch one type. resolve_version() never lets these escape; they are
reported through logging and Resolution.error instead.
"""

from typing import Optional


class VersionResolutionError(Exception):
    """Base class for all version resolution failures."""


class InvalidWorkingDirectory(VersionResolutionError):
    """The working directory does not exist or is not a directory."""

    def __init__(self, path):
        super().__init__(f"Working directory ({path}) does not exist or is not a directory")
        self.path = path


class NotAGitRepository(VersionResolutionError):
    """No git repository was found at or above the given path."""

    def __init__(self, path):
        super().__init__(f"Working directory ({path}) is not a git repository")
        self.path = path


class GitIOFailure(VersionResolutionError):
    """A git command failed while reading branches, tags or commits."""

    def __init__(
        self,
        message: str,
        command: Optional[str] = None,
        returncode: Optional[int] = None,
        stderr: Optional[str] = None
    ):
        super().__init__(message)
        self.command = command
        self.returncode = returncode
        self.stderr = stderr


class MalformedVersionString(VersionResolutionError, ValueError):
    """A version string is not MAJOR.MINOR.PATCH with an optional leading 'v'."""

    def __init__(self, value: str, pattern: str):
        super().__init__(f"{value!r} does not match {pattern}")
        self.value = value
