"""
Git client infrastructure for gitdevflow.

Provides a clean abstraction over git command execution.
All repository reads go through this client, making them:
- Easy to replace with a fake for testing
- Consistent in error handling (GitIOFailure on any failed read)
- Isolated from the version resolution logic

The client only reads: it never creates refs, tags or commits.
"""

import shlex
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple
import logging

from ..domain.commit import CommitNode
from ..domain.tag import Tag
from ..errors import GitIOFailure, NotAGitRepository

logger = logging.getLogger(__name__)

# Field separator in --format output; control characters never appear in ref names
FIELD_SEP = "\x01"


@dataclass
class RepoHandle:
    """
    An opened repository.

    Holds the commit cache of one traversal session. Use it as a context
    manager so the session is released on every exit path:

        with client.open_repository(path) as repo:
            client.head_commit(repo)
    """
    path: Path
    git_dir: Path
    commits: Dict[str, CommitNode] = field(default_factory=dict)
    closed: bool = False
    history_loaded: bool = False

    def close(self) -> None:
        self.commits.clear()
        self.history_loaded = False
        self.closed = True

    def __enter__(self) -> 'RepoHandle':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class GitClient:
    """
    Abstraction over git commands.

    Example:
        client = GitClient()
        with client.open_repository("/path/to/project") as repo:
            print(client.current_branch(repo))
            for tag in client.tags(repo):
                print(tag.ref_name, tag.target)
    """

    def __init__(self, timeout: int = 30):
        """
        Initialize GitClient.

        Args:
            timeout: Command timeout in seconds (default: 30)
        """
        self.timeout = timeout

    def _run(self, cmd: str, cwd: str) -> Tuple[Optional[str], int, str]:
        """
        Run a git command.

        Args:
            cmd: Command to run
            cwd: Working directory

        Returns:
            Tuple of (stdout, returncode, stderr)
        """
        try:
            result = subprocess.run(
                cmd,
                shell=True,
                cwd=cwd,
                capture_output=True,
                text=True,
                timeout=self.timeout
            )
            output = result.stdout
            return output.strip() if output else None, result.returncode, result.stderr.strip()

        except subprocess.TimeoutExpired:
            logger.warning(f"Git command timed out: {cmd}")
            return None, -1, "timed out"
        except OSError as e:
            logger.error(f"Git command failed: {cmd} - {e}")
            return None, -1, str(e)

    def _read(self, repo: RepoHandle, cmd: str) -> str:
        """Run a read command in repo, raising GitIOFailure on failure."""
        if repo.closed:
            raise GitIOFailure(f"Repository handle for {repo.path} is closed", command=cmd)
        output, code, stderr = self._run(cmd, cwd=str(repo.path))
        if code != 0:
            raise GitIOFailure(
                f"'{cmd}' failed in {repo.path} (exit {code}): {stderr}",
                command=cmd,
                returncode=code,
                stderr=stderr
            )
        return output or ""

    def open_repository(self, path) -> RepoHandle:
        """
        Open the repository containing path, searching upward.

        Raises:
            NotAGitRepository: if path is not inside a git repository
        """
        output, code, _ = self._run("git rev-parse --absolute-git-dir", cwd=str(path))
        if code != 0 or not output:
            raise NotAGitRepository(path)
        return RepoHandle(path=Path(path), git_dir=Path(output))

    def current_branch(self, repo: RepoHandle) -> str:
        """
        Get current branch name.

        On a detached HEAD the commit id is returned instead.
        """
        output, code, _ = self._run("git symbolic-ref --short -q HEAD", cwd=str(repo.path))
        if code == 0 and output:
            return output
        return self.head_commit(repo)

    def head_commit(self, repo: RepoHandle) -> str:
        """Get the commit id HEAD points at."""
        return self._read(repo, "git rev-parse --verify HEAD^{commit}")

    def tags(self, repo: RepoHandle) -> List[Tag]:
        """
        List all tags, peeled to the commits they ultimately point at.

        Annotated tags report the tag object in %(objectname) and the
        tagged object in %(*objectname); lightweight tags only have the
        former. A tag of a tag is peeled the rest of the way with
        rev-parse. Order is git's ref-name order.
        """
        fmt = '%01'.join(['%(refname)', '%(objectname)', '%(*objectname)', '%(*objecttype)'])
        output = self._read(repo, f"git for-each-ref --format='{fmt}' refs/tags")

        listed = []
        for line in output.split('\n'):
            if not line or FIELD_SEP not in line:
                continue
            parts = line.split(FIELD_SEP)
            ref_name = parts[0].strip()
            object_id = parts[1].strip()
            peeled = parts[2].strip() if len(parts) > 2 else ''
            peeled_type = parts[3].strip() if len(parts) > 3 else ''
            listed.append((ref_name, peeled or object_id, peeled_type == 'tag'))

        nested = [ref_name for ref_name, _, is_nested in listed if is_nested]
        commits = self._peel(repo, nested) if nested else {}

        return [
            Tag(ref_name=ref_name, target=commits.get(ref_name, target))
            for ref_name, target, _ in listed
        ]

    def _peel(self, repo: RepoHandle, ref_names: List[str]) -> Dict[str, str]:
        """
        Peel refs to commit ids with a single rev-parse.

        When one of them does not lead to a commit the batch fails, and the
        refs are peeled one by one; those that cannot be peeled are left out.
        """
        args = ' '.join(shlex.quote(f"{ref}^{{commit}}") for ref in ref_names)
        output, code, _ = self._run(f"git rev-parse {args}", cwd=str(repo.path))
        ids = output.split('\n') if code == 0 and output else []
        if len(ids) == len(ref_names):
            return dict(zip(ref_names, (commit_id.strip() for commit_id in ids)))

        peeled = {}
        for ref in ref_names:
            output, code, _ = self._run(
                f"git rev-parse --verify -q {shlex.quote(ref + '^{commit}')}", cwd=str(repo.path)
            )
            if code == 0 and output:
                peeled[ref] = output
            else:
                logger.debug(f"Tag {ref} does not point at a commit")
        return peeled

    def _parse_commit(self, line: str) -> Optional[CommitNode]:
        parts = line.split(FIELD_SEP, 2)
        if len(parts) < 3:
            return None
        return CommitNode(
            id=parts[0].strip(),
            parents=tuple(parts[1].split()),
            subject=parts[2]
        )

    def load_history(self, repo: RepoHandle) -> int:
        """
        Read every commit reachable from HEAD into the handle's cache.

        Runs once per session with a single git log. If it fails, commits
        are read one at a time instead.

        Returns:
            Number of commits cached
        """
        if repo.history_loaded:
            return len(repo.commits)
        repo.history_loaded = True

        fmt = '%x01'.join(['%H', '%P', '%s'])
        try:
            output = self._read(repo, f"git log --no-show-signature --format='{fmt}' HEAD")
        except GitIOFailure as e:
            logger.debug(f"Could not read history of {repo.path} at once: {e}")
            return len(repo.commits)

        for line in output.split('\n'):
            node = self._parse_commit(line)
            if node is not None:
                repo.commits[node.id] = node
        logger.debug(f"Loaded {len(repo.commits)} commit(s) from {repo.path}")
        return len(repo.commits)

    def commit(self, repo: RepoHandle, commit_id: str) -> CommitNode:
        """
        Read a commit's parents and subject.

        The first read loads HEAD's whole history; commits outside it are
        read individually. Results are cached on the handle for the rest of
        the session.

        Raises:
            GitIOFailure: if the commit cannot be read
        """
        if not repo.closed and not repo.history_loaded:
            self.load_history(repo)
        cached = repo.commits.get(commit_id)
        if cached is not None:
            return cached

        fmt = '%x01'.join(['%H', '%P', '%s'])
        output = self._read(repo, f"git log -1 --no-show-signature --format='{fmt}' {shlex.quote(commit_id)}")
        node = self._parse_commit(output)
        if node is None:
            raise GitIOFailure(f"Unexpected git log output for {commit_id}: {output!r}")

        repo.commits[commit_id] = node
        repo.commits[node.id] = node
        return node

    def parents_of(self, repo: RepoHandle, commit_id: str) -> Tuple[str, ...]:
        return self.commit(repo, commit_id).parents

    def subject_of(self, repo: RepoHandle, commit_id: str) -> str:
        return self.commit(repo, commit_id).subject
