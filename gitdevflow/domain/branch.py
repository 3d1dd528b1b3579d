"""
Branch classification for gitdevflow.

A branch is one of three kinds:
- Release: the mainline (master by default), versioned from v1.2.3 tags
- Hotfix: hotfix-<base> or support-<base>, versioned from
  v<base>.hotfix.1.2.3 style tags as well as plain release tags
- Feature: anything else, versioned as <branch>-SNAPSHOT

Matching is case-insensitive and always yields exactly one kind.
"""

import re
from dataclasses import dataclass
from typing import Iterable, Union

DEFAULT_RELEASE_BRANCHES = ("master",)

HOTFIX_BRANCH_PATTERN = re.compile(r"(?P<type>hotfix|support)-(?P<base>.*)", re.IGNORECASE)


@dataclass(frozen=True)
class Release:
    """A release (mainline) branch."""
    name: str

    @property
    def kind(self) -> str:
        return "release"


@dataclass(frozen=True)
class Hotfix:
    """A hotfix or support branch."""
    name: str
    base: str
    type: str  # "hotfix" or "support"

    @property
    def kind(self) -> str:
        return self.type


@dataclass(frozen=True)
class Feature:
    """Any branch that is neither release nor hotfix/support."""
    name: str

    @property
    def kind(self) -> str:
        return "feature"


BranchKind = Union[Release, Hotfix, Feature]


def classify_branch(
    name: str,
    release_branches: Iterable[str] = DEFAULT_RELEASE_BRANCHES
) -> BranchKind:
    """
    Classify a branch name.

    Args:
        name: Current branch name as reported by git
        release_branches: Branch names treated as release branches

    Returns:
        Release, Hotfix or Feature

    Examples:
        classify_branch("MASTER")      -> Release("MASTER")
        classify_branch("hotfix-2.1")  -> Hotfix("hotfix-2.1", base="2.1", type="hotfix")
        classify_branch("develop")     -> Feature("develop")
    """
    lowered = name.lower()
    if any(lowered == branch.lower() for branch in release_branches):
        return Release(name)

    match = HOTFIX_BRANCH_PATTERN.fullmatch(name)
    if match:
        return Hotfix(name, base=match.group('base'), type=match.group('type').lower())

    return Feature(name)
