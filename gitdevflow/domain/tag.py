"""
Release tag domain object and tag-name patterns.

Tags are compared against commits by their peeled target, never by the
id of an annotated tag object. Two patterns decide which tags count as
releases:

    refs/tags/v1.2.3                  release and hotfix lookups
    refs/tags/v3.4.support.1.2.3      hotfix lookups only
"""

import re
from dataclasses import dataclass
from typing import Optional, Pattern

from .semver import SemVer

RELEASE_TAG_PATTERN = re.compile(r"refs/tags/v(?P<version>\d+\.\d+\.\d+)")

HOTFIX_TAG_PATTERN = re.compile(
    r"refs/tags/v(.*?\.(support|hotfix)\.)?(?P<version>\d+\.\d+\.\d+)"
)

TAG_REF_PREFIX = "refs/tags/"


def tag_pattern(include_hotfix: bool) -> Pattern:
    """Select the tag pattern for a release (False) or hotfix (True) lookup."""
    return HOTFIX_TAG_PATTERN if include_hotfix else RELEASE_TAG_PATTERN


@dataclass(frozen=True)
class Tag:
    """
    A tag ref peeled to the commit it ultimately points at.

    Attributes:
        ref_name: Full ref name (e.g., "refs/tags/v1.0.0")
        target: Commit id of the peeled target
    """

    ref_name: str
    target: str

    @property
    def short_name(self) -> str:
        if self.ref_name.startswith(TAG_REF_PREFIX):
            return self.ref_name[len(TAG_REF_PREFIX):]
        return self.ref_name

    def matches(self, pattern: Pattern) -> bool:
        return pattern.fullmatch(self.ref_name) is not None

    def version(self, pattern: Pattern) -> Optional[SemVer]:
        """
        Version captured by the pattern's 'version' group.

        Returns None when the tag does not match the pattern.
        """
        match = pattern.fullmatch(self.ref_name)
        if not match:
            return None
        return SemVer.parse(match.group('version'))

    def to_dict(self) -> dict:
        return {
            'name': self.short_name,
            'ref': self.ref_name,
            'target': self.target,
        }

    def __str__(self) -> str:
        return self.short_name
