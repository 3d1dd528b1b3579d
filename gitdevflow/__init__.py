"""
gitdevflow - Semantic versions computed from git history.

The version of a working directory follows from its current branch, the
nearest release tag and the conventional commits made since that tag:

Quick Start:
    import gitdevflow

    gitdevflow.resolve_version(".")                          # "1.4.0"
    gitdevflow.resolve_version_from_descriptor("pyproject.toml")

Branches:
    master                 -> MAJOR.MINOR.PATCH
    hotfix-BASE/support-BASE -> BASE.hotfix.MAJOR.MINOR.PATCH
    anything else          -> BRANCH-SNAPSHOT

When no version can be determined the result is "unknown-SNAPSHOT".

Domain Objects:
    SemVer - immutable semantic version with bump arithmetic
    Tag - tag ref peeled to its commit
    CommitNode - commit graph node

Services (for advanced use):
    VersionService - full resolution with diagnostics (Resolution)
    CommitGraphWalker - first-parent and breadth-first tag walks
    TagIndex - tags looked up by commit
"""

__version__ = "0.3.0"

# High-level API
from .api import resolve_version, resolve_version_from_descriptor

# Domain objects
from .domain import (
    SemVer,
    Tag,
    CommitNode,
    Release,
    Hotfix,
    Feature,
    classify_branch,
    classify_commit_types,
)

# Services
from .services import (
    VersionService,
    Resolution,
    CommitGraphWalker,
    TagIndex,
    UNKNOWN_SNAPSHOT,
)

# Errors
from .errors import (
    VersionResolutionError,
    InvalidWorkingDirectory,
    NotAGitRepository,
    GitIOFailure,
    MalformedVersionString,
)

# Configuration
from .config import load_config, save_config

__all__ = [
    "__version__",
    "resolve_version",
    "resolve_version_from_descriptor",
    "SemVer",
    "Tag",
    "CommitNode",
    "Release",
    "Hotfix",
    "Feature",
    "classify_branch",
    "classify_commit_types",
    "VersionService",
    "Resolution",
    "CommitGraphWalker",
    "TagIndex",
    "UNKNOWN_SNAPSHOT",
    "VersionResolutionError",
    "InvalidWorkingDirectory",
    "NotAGitRepository",
    "GitIOFailure",
    "MalformedVersionString",
    "load_config",
    "save_config",
]
