"""
Domain layer for gitdevflow.

Pure value objects and functions with no I/O:
- SemVer: immutable semantic version with bump arithmetic
- Release / Hotfix / Feature: branch kinds, via classify_branch()
- Tag: tag ref peeled to its commit, plus the release tag patterns
- CommitNode: commit graph node, via classify_commit_types()
"""

from .semver import SemVer
from .branch import BranchKind, Release, Hotfix, Feature, classify_branch
from .tag import Tag, RELEASE_TAG_PATTERN, HOTFIX_TAG_PATTERN, tag_pattern
from .commit import CommitNode, commit_type, classify_commit_types

__all__ = [
    'SemVer',
    'BranchKind',
    'Release',
    'Hotfix',
    'Feature',
    'classify_branch',
    'Tag',
    'RELEASE_TAG_PATTERN',
    'HOTFIX_TAG_PATTERN',
    'tag_pattern',
    'CommitNode',
    'commit_type',
    'classify_commit_types',
]
