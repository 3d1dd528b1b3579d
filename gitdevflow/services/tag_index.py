"""
Tag lookup by commit for gitdevflow.

Wraps the peeled tag listing of a repository so the commit walkers can
ask "which release tags sit on this commit?" without rescanning every
tag for every commit.
"""

import logging
from typing import Dict, Iterable, List, Optional, Pattern, Tuple

from ..domain.tag import Tag
from ..infra.git_client import GitClient, RepoHandle

logger = logging.getLogger(__name__)


class TagIndex:
    """
    Tags of a repository, keyed by the commit they target.

    Listing order is preserved: it is the tie-break when several matching
    tags are found at once.

    Example:
        index = TagIndex.load(client, repo)
        for tag in index.matching(commit_id, RELEASE_TAG_PATTERN):
            print(tag.short_name)
    """

    def __init__(self, tags: Iterable[Tag]):
        self.tags: List[Tag] = list(tags)
        self._by_commit: Dict[str, List[Tuple[int, Tag]]] = {}
        for position, tag in enumerate(self.tags):
            self._by_commit.setdefault(tag.target, []).append((position, tag))

    @classmethod
    def load(cls, git_client: GitClient, repo: RepoHandle) -> 'TagIndex':
        """List and peel all tags of repo."""
        index = cls(git_client.tags(repo))
        logger.debug(f"Loaded {len(index)} tag(s) from {repo.path}")
        return index

    def __len__(self) -> int:
        return len(self.tags)

    def on_commit(self, commit_id: str) -> List[Tag]:
        """All tags targeting commit_id, in listing order."""
        return [tag for _, tag in self._by_commit.get(commit_id, [])]

    def matching(self, commit_id: str, pattern: Pattern) -> List[Tag]:
        """Tags targeting commit_id whose ref name matches pattern."""
        return [tag for tag in self.on_commit(commit_id) if tag.matches(pattern)]

    def first_matching(self, commit_ids: Iterable[str], pattern: Pattern) -> Optional[Tag]:
        """
        The matching tag listed first among all tags on commit_ids.

        Returns None when none of the commits carries a matching tag.
        """
        candidates = [
            (position, tag)
            for commit_id in set(commit_ids)
            for position, tag in self._by_commit.get(commit_id, [])
            if tag.matches(pattern)
        ]
        if not candidates:
            return None
        return min(candidates, key=lambda candidate: candidate[0])[1]
