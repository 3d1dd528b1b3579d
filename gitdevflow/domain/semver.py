"""
Semantic version value object.

SemVer is an immutable major.minor.patch triple. Every bump returns a
new instance:

    SemVer.parse("v1.2.3").increment_minor()  -> SemVer(1, 3, 0)
"""

import re
from dataclasses import dataclass

from ..errors import MalformedVersionString

VERSION_PATTERN = re.compile(r"v?(?P<major>\d+)\.(?P<minor>\d+)\.(?P<patch>\d+)")


@dataclass(frozen=True, order=True)
class SemVer:
    """
    Semantic version triple.

    Attributes:
        major: Incremented for breaking changes (never by the bump rules)
        minor: Incremented for features; resets patch
        patch: Incremented for fixes and maintenance commits
    """

    major: int = 0
    minor: int = 0
    patch: int = 0

    def __post_init__(self):
        for name in ('major', 'minor', 'patch'):
            value = getattr(self, name)
            if not isinstance(value, int) or value < 0:
                raise ValueError(f"SemVer {name} must be a non-negative integer, got {value!r}")

    @classmethod
    def initial(cls) -> 'SemVer':
        """The version used when no release tag is reachable (0.0.0)."""
        return cls(0, 0, 0)

    @classmethod
    def parse(cls, version_string: str) -> 'SemVer':
        """
        Parse "1.2.3" or "v1.2.3".

        Raises:
            MalformedVersionString: if the string is not a plain triple
        """
        match = VERSION_PATTERN.fullmatch(version_string or "")
        if not match:
            raise MalformedVersionString(version_string, VERSION_PATTERN.pattern)
        try:
            return cls(
                int(match.group('major')),
                int(match.group('minor')),
                int(match.group('patch'))
            )
        except ValueError as e:
            # components past the interpreter's int digit limit
            raise MalformedVersionString(version_string, VERSION_PATTERN.pattern) from e

    def increment_patch(self, increment: int = 1) -> 'SemVer':
        return SemVer(self.major, self.minor, self.patch + increment)

    def increment_minor(self, increment: int = 1) -> 'SemVer':
        return SemVer(self.major, self.minor + increment, 0)

    def increment_major(self, increment: int = 1) -> 'SemVer':
        return SemVer(self.major + increment, 0, 0)

    @property
    def canonical(self) -> str:
        """MAJOR.MINOR.PATCH"""
        return f"{self.major}.{self.minor}.{self.patch}"

    @property
    def tag(self) -> str:
        """Tag form, e.g. v1.2.3"""
        return f"v{self.canonical}"

    def to_dict(self) -> dict:
        return {
            'major': self.major,
            'minor': self.minor,
            'patch': self.patch,
            'version': self.canonical,
        }

    def __str__(self) -> str:
        return self.tag
