"""
Service layer for gitdevflow.

Contains the logic that combines domain objects and infrastructure:
- TagIndex: peeled tags looked up by commit
- CommitGraphWalker: first-parent and breadth-first history walks
- VersionService: branch dispatch and bump rules

Services are the primary API for commands to use.
"""

from .tag_index import TagIndex
from .commit_walker import CommitGraphWalker, ParentLookup, TagSearch
from .version_service import (
    VersionService,
    Resolution,
    BumpRule,
    BumpedVersion,
    UNKNOWN_SNAPSHOT,
)

__all__ = [
    'TagIndex',
    'CommitGraphWalker',
    'ParentLookup',
    'TagSearch',
    'VersionService',
    'Resolution',
    'BumpRule',
    'BumpedVersion',
    'UNKNOWN_SNAPSHOT',
]
