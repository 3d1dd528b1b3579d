"""
Version resolution service for gitdevflow.

Turns the state of a working directory into a version string:

    master                -> 1.4.0               (bumped from the last v1.3.x tag)
    hotfix-3.4            -> 3.4.hotfix.1.0.1    (bumped from v3.4.support.1.0.0)
    my-feature            -> my-feature-SNAPSHOT
    not a git repository  -> unknown-SNAPSHOT

Bump rule, first match wins:
1. any commit type in minor_types (feat)            -> minor + 1
2. any commit type in patch_types (fix, chore, ...) -> patch + 1
3. otherwise                                        -> unchanged
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Tuple

from ..config import load_config
from ..domain.branch import Feature, Hotfix, Release, classify_branch
from ..domain.commit import classify_commit_types
from ..domain.semver import SemVer
from ..domain.tag import Tag
from ..exit_codes import ConfigError
from ..errors import InvalidWorkingDirectory, NotAGitRepository, VersionResolutionError
from ..infra.git_client import GitClient, RepoHandle
from .commit_walker import CommitGraphWalker, ParentLookup
from .tag_index import TagIndex

UNKNOWN_SNAPSHOT = "unknown-SNAPSHOT"
SNAPSHOT_SUFFIX = "-SNAPSHOT"

MINOR = "minor"
PATCH = "patch"
NONE = "none"

DEFAULT_MINOR_TYPES = frozenset({"feat"})
DEFAULT_PATCH_TYPES = frozenset({"fix", "docs", "style", "refactor", "perf", "test", "chore"})


def _string_list(versioning: Dict[str, Any], key: str, default: Iterable[str]) -> List[str]:
    """A versioning list setting; a single string counts as a one-item list."""
    value = versioning.get(key, default)
    if isinstance(value, str):
        return [value]
    if not isinstance(value, (list, tuple, set, frozenset)):
        raise ConfigError(f"versioning.{key} must be a list of strings, got {value!r}")
    return [str(item) for item in value]


@dataclass(frozen=True)
class BumpRule:
    """Maps commit types to the version component they increment."""
    minor_types: FrozenSet[str] = DEFAULT_MINOR_TYPES
    patch_types: FrozenSet[str] = DEFAULT_PATCH_TYPES

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> 'BumpRule':
        versioning = config.get('versioning', {})
        minor = _string_list(versioning, 'minor_types', DEFAULT_MINOR_TYPES)
        patch = _string_list(versioning, 'patch_types', DEFAULT_PATCH_TYPES)
        return cls(
            minor_types=frozenset(t.lower() for t in minor),
            patch_types=frozenset(t.lower() for t in patch),
        )

    def bump_kind(self, commit_types: Iterable[str]) -> str:
        types = set(commit_types)
        if types & self.minor_types:
            return MINOR
        if types & self.patch_types:
            return PATCH
        return NONE

    def apply(self, base: SemVer, commit_types: Iterable[str]) -> SemVer:
        kind = self.bump_kind(commit_types)
        if kind == MINOR:
            return base.increment_minor(1)
        if kind == PATCH:
            return base.increment_patch(1)
        return base


@dataclass(frozen=True)
class BumpedVersion:
    """Outcome of compute_bumped_version and the inputs that produced it."""
    version: SemVer
    base: SemVer
    base_tag: Optional[Tag] = None
    bump: str = NONE
    commit_types: FrozenSet[str] = frozenset()
    commits: Tuple[str, ...] = ()
    dropped: Tuple[ParentLookup, ...] = ()


@dataclass(frozen=True)
class Resolution:
    """
    Everything learned while resolving a working directory's version.

    Only `version` is part of the resolve_version() contract; the other
    fields explain how it was reached.
    """
    version: str
    path: str
    branch: Optional[str] = None
    kind: Optional[str] = None
    base_version: Optional[SemVer] = None
    base_tag: Optional[Tag] = None
    bump: Optional[str] = None
    commit_types: FrozenSet[str] = frozenset()
    commits: Tuple[str, ...] = ()
    dropped_parents: Tuple[ParentLookup, ...] = ()
    error: Optional[str] = None

    @property
    def unknown(self) -> bool:
        return self.version == UNKNOWN_SNAPSHOT

    def to_dict(self) -> Dict[str, Any]:
        return {
            'version': self.version,
            'path': self.path,
            'branch': self.branch,
            'kind': self.kind,
            'base_version': self.base_version.canonical if self.base_version else None,
            'base_tag': self.base_tag.short_name if self.base_tag else None,
            'bump': self.bump,
            'commit_types': sorted(self.commit_types),
            'commits': list(self.commits),
            'dropped_parents': [d.to_dict() for d in self.dropped_parents],
            'error': self.error,
        }


class VersionService:
    """
    Resolves the version of a working directory from its git history.

    Example:
        service = VersionService()
        print(service.resolve_version("/path/to/project"))  # "1.4.0"

        resolution = service.resolve("/path/to/project")
        print(resolution.base_tag, resolution.bump)
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        git_client: Optional[GitClient] = None,
        logger=None
    ):
        """
        Initialize VersionService.

        Args:
            config: Configuration dict (loads default if None)
            git_client: GitClient instance (creates new if None)
            logger: Logger-like object with debug/info/warning
        """
        self.config = config or load_config()
        self.git = git_client or GitClient(
            timeout=self.config.get('git', {}).get('timeout_seconds', 30)
        )
        self.logger = logger or logging.getLogger(__name__)
        self.walker = CommitGraphWalker(self.git, logger=self.logger)
        self.bump_rule = BumpRule.from_config(self.config)
        self.release_branches: List[str] = _string_list(
            self.config.get('versioning', {}), 'release_branches', ['master']
        )

    def resolve_version(self, path) -> str:
        """Resolve the version string for path; never raises for git problems."""
        return self.resolve(path).version

    def resolve(self, path) -> Resolution:
        """
        Resolve the version for a working directory.

        Returns a Resolution whose version is "unknown-SNAPSHOT" when the
        path is not a directory, not inside a git repository, or reading
        the repository fails.
        """
        if path is None or not Path(path).is_dir():
            error = InvalidWorkingDirectory(path)
            self.logger.info(f"{error}, falling back to {UNKNOWN_SNAPSHOT}")
            return Resolution(UNKNOWN_SNAPSHOT, str(path), error=str(error))

        path = Path(path)
        try:
            repo = self.git.open_repository(path)
        except NotAGitRepository as e:
            self.logger.info(f"{e}, falling back to {UNKNOWN_SNAPSHOT}")
            return Resolution(UNKNOWN_SNAPSHOT, str(path), error=str(e))

        self.logger.info(f"Working directory ({path}) is a git repository")
        try:
            with repo:
                return self._resolve_branch(repo, path)
        except VersionResolutionError as e:
            self.logger.warning(
                f"{type(e).__name__} caught, falling back to {UNKNOWN_SNAPSHOT}",
                exc_info=e
            )
            return Resolution(UNKNOWN_SNAPSHOT, str(path), error=f"{type(e).__name__}: {e}")

    def _resolve_branch(self, repo: RepoHandle, path: Path) -> Resolution:
        branch = self.git.current_branch(repo)
        kind = classify_branch(branch, self.release_branches)

        if isinstance(kind, Feature):
            version = f"{branch}{SNAPSHOT_SUFFIX}"
            self.logger.info(
                f"Current branch ({branch}) is not a release branch, falling back to {version}"
            )
            return Resolution(version, str(path), branch=branch, kind=kind.kind)

        if isinstance(kind, Release):
            self.logger.info(f"Determining version based on release branch ({branch})")
            bumped = self.compute_bumped_version(repo, include_hotfix=False)
            version = bumped.version.canonical
        elif isinstance(kind, Hotfix):
            self.logger.info(f"Determining version based on hotfix or support branch ({branch})")
            bumped = self.compute_bumped_version(repo, include_hotfix=True)
            version = f"{kind.base}.{kind.type}.{bumped.version.canonical}"
        else:
            raise TypeError(f"Unknown branch kind: {kind!r}")

        self.logger.info(f"Determined version: {version}")
        return Resolution(
            version,
            str(path),
            branch=branch,
            kind=kind.kind,
            base_version=bumped.base,
            base_tag=bumped.base_tag,
            bump=bumped.bump,
            commit_types=bumped.commit_types,
            commits=bumped.commits,
            dropped_parents=bumped.dropped,
        )

    def compute_bumped_version(self, repo: RepoHandle, include_hotfix: bool = False) -> BumpedVersion:
        """
        Bump the nearest reachable release tag by the commits made since
        the last release tag on the mainline.

        Raises:
            GitIOFailure: if tags, HEAD or a mainline commit cannot be read
        """
        tags = TagIndex.load(self.git, repo)
        subjects = self.walker.harvest_commits_since_tag(repo, tags, include_hotfix)
        search = self.walker.find_nearest_tag(repo, tags, include_hotfix)
        base = search.version or SemVer.initial()
        commit_types = classify_commit_types(subjects)

        bump = self.bump_rule.bump_kind(commit_types)
        if bump == MINOR:
            self.logger.info("Found minor increment type(s)")
        elif bump == PATCH:
            self.logger.info("Found patch increment type(s)")
        else:
            self.logger.info("No increment type(s) found")

        version = self.bump_rule.apply(base, commit_types)
        self.logger.debug(f"Base version bump: {base.canonical} -> {version.canonical}")
        return BumpedVersion(
            version=version,
            base=base,
            base_tag=search.tag,
            bump=bump,
            commit_types=commit_types,
            commits=tuple(subjects),
            dropped=search.dropped,
        )
