"""
Infrastructure layer for gitdevflow.

Contains abstractions for external systems:
- GitClient: read-only git command execution
- RepoHandle: an opened repository and its traversal session

These provide clean interfaces that can be replaced in tests.
"""

from .git_client import GitClient, RepoHandle

__all__ = [
    'GitClient',
    'RepoHandle',
]
