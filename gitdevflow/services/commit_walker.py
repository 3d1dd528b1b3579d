"""
Commit graph walks for gitdevflow.

Two walks share the same tag test ("does a release tag sit on this
commit?"):

- harvest_commits_since_tag: follows first parents only (the mainline)
  from HEAD and collects the subjects of the commits made since the last
  release tag.
- find_nearest_tag: breadth-first over all parents, so tags on merged-in
  branches count too, and returns the version of the closest one.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from ..domain.commit import CommitNode
from ..domain.semver import SemVer
from ..domain.tag import Tag, tag_pattern
from ..errors import GitIOFailure
from ..infra.git_client import GitClient, RepoHandle
from .tag_index import TagIndex


@dataclass(frozen=True)
class ParentLookup:
    """Outcome of reading one parent commit: a node or the failure."""
    commit_id: str
    node: Optional[CommitNode] = None
    error: Optional[GitIOFailure] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        return {
            'commit': self.commit_id,
            'error': str(self.error) if self.error else None,
        }


@dataclass(frozen=True)
class TagSearch:
    """
    Result of the breadth-first tag search.

    Attributes:
        version: Version captured from the nearest matching tag, or None
        tag: The tag it came from
        depth: Number of parent edges between HEAD and the tagged commit
        dropped: Parents that could not be read and were left out of the walk
    """
    version: Optional[SemVer] = None
    tag: Optional[Tag] = None
    depth: Optional[int] = None
    dropped: Tuple[ParentLookup, ...] = ()

    @property
    def found(self) -> bool:
        return self.version is not None


class CommitGraphWalker:
    """
    Walks a repository's commit graph looking for release tags.

    Example:
        walker = CommitGraphWalker(client)
        tags = TagIndex.load(client, repo)
        subjects = walker.harvest_commits_since_tag(repo, tags)
        base = walker.nearest_reachable_tag_version(repo, tags) or SemVer.initial()
    """

    def __init__(self, git_client: Optional[GitClient] = None, logger=None):
        self.git_client = git_client or GitClient()
        self.logger = logger or logging.getLogger(__name__)

    def _describe(self, commit: CommitNode, tags: List[Tag]) -> str:
        return (
            f"  {commit.id} {commit.subject} "
            f"(parents: {len(commit.parents)}) tags={[str(t) for t in tags]}"
        )

    def harvest_commits_since_tag(
        self,
        repo: RepoHandle,
        tags: TagIndex,
        include_hotfix: bool = False
    ) -> List[str]:
        """
        Subjects of the first-parent commits since the last matching tag.

        The tagged commit itself is excluded. Subjects are ordered newest
        first. Without any matching tag the whole first-parent chain is
        returned.

        Raises:
            GitIOFailure: if HEAD or a first parent cannot be read
        """
        pattern = tag_pattern(include_hotfix)
        self.logger.debug("Direct commits (1st parents):")

        subjects = []
        commit = self.git_client.commit(repo, self.git_client.head_commit(repo))
        while commit is not None:
            matched = tags.matching(commit.id, pattern)
            self.logger.debug(self._describe(commit, tags.on_commit(commit.id)))
            if matched:
                self.logger.debug(f"Stopping at tag(s) {[str(t) for t in matched]}")
                break
            subjects.append(commit.subject)
            if commit.is_root:
                commit = None
            else:
                commit = self.git_client.commit(repo, commit.first_parent)

        return subjects

    def lookup(self, repo: RepoHandle, commit_ids: Iterable[str]) -> List[ParentLookup]:
        """Read each commit, capturing failures instead of raising."""
        outcomes = []
        for commit_id in commit_ids:
            try:
                outcomes.append(ParentLookup(commit_id, node=self.git_client.commit(repo, commit_id)))
            except GitIOFailure as e:
                outcomes.append(ParentLookup(commit_id, error=e))
        return outcomes

    def find_nearest_tag(
        self,
        repo: RepoHandle,
        tags: TagIndex,
        include_hotfix: bool = False
    ) -> TagSearch:
        """
        Breadth-first search for the closest matching tag over all parents.

        When several commits at the same depth carry matching tags, the tag
        listed first by the tag index wins. Parents that cannot be read are
        logged, left out of the walk and reported in TagSearch.dropped.

        Raises:
            GitIOFailure: if HEAD cannot be read
        """
        pattern = tag_pattern(include_hotfix)
        self.logger.debug("All commits (all parents):")

        head = self.git_client.commit(repo, self.git_client.head_commit(repo))
        frontier = [head]
        seen = {head.id}
        dropped: List[ParentLookup] = []
        depth = 0

        while frontier:
            for commit in frontier:
                self.logger.debug(self._describe(commit, tags.on_commit(commit.id)))

            tag = tags.first_matching([commit.id for commit in frontier], pattern)
            if tag is not None:
                self.logger.debug(f"Stopping at tag {tag} (depth {depth})")
                return TagSearch(
                    version=tag.version(pattern),
                    tag=tag,
                    depth=depth,
                    dropped=tuple(dropped)
                )

            parent_ids = []
            for commit in frontier:
                for parent_id in commit.parents:
                    if parent_id not in seen:
                        seen.add(parent_id)
                        parent_ids.append(parent_id)

            frontier = []
            for outcome in self.lookup(repo, parent_ids):
                if outcome.ok:
                    frontier.append(outcome.node)
                else:
                    self.logger.warning(
                        f"Could not read parent commit {outcome.commit_id}, "
                        f"skipping its history",
                        exc_info=outcome.error
                    )
                    dropped.append(outcome)
            depth += 1

        return TagSearch(dropped=tuple(dropped))

    def nearest_reachable_tag_version(
        self,
        repo: RepoHandle,
        tags: TagIndex,
        include_hotfix: bool = False
    ) -> Optional[SemVer]:
        """Version of the nearest reachable matching tag, or None."""
        return self.find_nearest_tag(repo, tags, include_hotfix).version
