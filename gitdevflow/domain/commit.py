"""
Commit node and conventional-commit type extraction.

Only the subject line matters: "feat(parser): add X" has type "feat".
Subjects without a colon contribute their whole (lowercased) text, which
simply never matches a bump type.
"""

import re
from dataclasses import dataclass
from typing import FrozenSet, Iterable, Tuple

SCOPE_PATTERN = re.compile(r"\(.*\)")


@dataclass(frozen=True)
class CommitNode:
    """
    A commit in the history graph.

    Attributes:
        id: Full commit hash
        parents: Parent hashes; index 0 is the first (mainline) parent
        subject: First line of the commit message
    """

    id: str
    parents: Tuple[str, ...] = ()
    subject: str = ""

    @property
    def is_root(self) -> bool:
        return not self.parents

    @property
    def first_parent(self):
        return self.parents[0] if self.parents else None

    @property
    def short_id(self) -> str:
        return self.id[:7]


def commit_type(subject: str) -> str:
    """
    Extract the type token of a conventional commit subject.

    Examples:
        commit_type("feat(parser): add X")  -> "feat"
        commit_type("Fix: typo")            -> "fix"
    """
    head = subject.split(':', 1)[0]
    return SCOPE_PATTERN.sub('', head).lower()


def classify_commit_types(subjects: Iterable[str]) -> FrozenSet[str]:
    """Collect the distinct commit types of the given subjects."""
    return frozenset(commit_type(subject) for subject in subjects)
