"""
Shared fixtures for gitdevflow tests.

FakeGitClient stands in for GitClient with an in-memory commit graph so
the walkers and the version service can be tested without a real
repository. Commit ids are plain strings such as "c0", "c1".
"""

import os
import sys
from pathlib import Path

import pytest

from gitdevflow.config import get_default_config
from gitdevflow.domain.commit import CommitNode
from gitdevflow.domain.tag import Tag
from gitdevflow.errors import GitIOFailure, NotAGitRepository
from gitdevflow.infra.git_client import RepoHandle


class FakeGitClient:
    """
    In-memory git-access layer.

    Args:
        commits: {commit_id: (parents, subject)}
        head: Commit id HEAD points at
        branch: Current branch name
        tags: [(tag_name, commit_id)], in listing order; names get refs/tags/
        broken: Commit ids whose lookup fails with GitIOFailure
        is_repo: False makes open_repository raise NotAGitRepository
    """

    def __init__(self, commits, head, branch="master", tags=(), broken=(), is_repo=True):
        self.commits = {
            commit_id: CommitNode(commit_id, tuple(parents), subject)
            for commit_id, (parents, subject) in commits.items()
        }
        self.head = head
        self.branch = branch
        self.tag_list = [Tag(f"refs/tags/{name}", target) for name, target in tags]
        self.broken = set(broken)
        self.is_repo = is_repo
        self.lookups = []
        self.opened = []

    @classmethod
    def linear(cls, subjects, **kwargs):
        """A single chain c0 <- c1 <- ... ; subjects oldest first, HEAD is the last."""
        commits = {}
        for i, subject in enumerate(subjects):
            parents = (f"c{i - 1}",) if i else ()
            commits[f"c{i}"] = (parents, subject)
        return cls(commits, head=f"c{len(subjects) - 1}", **kwargs)

    def open_repository(self, path):
        if not self.is_repo:
            raise NotAGitRepository(path)
        repo = RepoHandle(path=Path(path), git_dir=Path(path) / ".git")
        self.opened.append(repo)
        return repo

    def current_branch(self, repo):
        return self.branch

    def head_commit(self, repo):
        return self.head

    def tags(self, repo):
        return list(self.tag_list)

    def commit(self, repo, commit_id):
        self.lookups.append(commit_id)
        if commit_id in self.broken or commit_id not in self.commits:
            raise GitIOFailure(f"bad object {commit_id}", command=f"git log -1 {commit_id}", returncode=128)
        return self.commits[commit_id]


@pytest.fixture
def fake_git():
    """Factory for FakeGitClient instances."""
    return FakeGitClient


@pytest.fixture
def default_config():
    return get_default_config()


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep the user's ~/.gitdevflow config and GITDEVFLOW_* variables out of tests."""
    for key in list(os.environ):
        if key.startswith('GITDEVFLOW_'):
            monkeypatch.delenv(key)
    monkeypatch.setenv('HOME', str(tmp_path / 'home'))


@pytest.fixture
def int_digit_limit():
    """Pin the interpreter's int() digit limit to its default of 4300."""
    previous = sys.get_int_max_str_digits()
    sys.set_int_max_str_digits(4300)
    yield 4300
    sys.set_int_max_str_digits(previous)
