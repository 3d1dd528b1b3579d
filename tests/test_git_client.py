"""
Tests for GitClient output parsing and error handling.

subprocess is mocked here; test_integration.py runs real git.
"""

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from gitdevflow.errors import GitIOFailure, NotAGitRepository
from gitdevflow.infra.git_client import FIELD_SEP, GitClient, RepoHandle


def completed(stdout="", returncode=0, stderr=""):
    return MagicMock(stdout=stdout, returncode=returncode, stderr=stderr)


@pytest.fixture
def repo(tmp_path):
    return RepoHandle(path=tmp_path, git_dir=tmp_path / ".git")


class TestRun:
    """Tests for the low-level command runner."""

    @patch('gitdevflow.infra.git_client.subprocess.run')
    def test_strips_output(self, mock_run):
        mock_run.return_value = completed(stdout="  master\n")
        output, code, stderr = GitClient()._run("git symbolic-ref --short -q HEAD", cwd="/tmp")
        assert output == "master"
        assert code == 0

    @patch('gitdevflow.infra.git_client.subprocess.run')
    def test_passes_timeout(self, mock_run):
        mock_run.return_value = completed()
        GitClient(timeout=5)._run("git status", cwd="/tmp")
        assert mock_run.call_args.kwargs['timeout'] == 5
        assert mock_run.call_args.kwargs['cwd'] == "/tmp"

    @patch('gitdevflow.infra.git_client.subprocess.run')
    def test_timeout_reported_as_failure(self, mock_run):
        mock_run.side_effect = subprocess.TimeoutExpired("git", 1)
        output, code, stderr = GitClient()._run("git log", cwd="/tmp")
        assert output is None
        assert code == -1

    @patch('gitdevflow.infra.git_client.subprocess.run')
    def test_missing_cwd_reported_as_failure(self, mock_run):
        mock_run.side_effect = FileNotFoundError("no such directory")
        _, code, stderr = GitClient()._run("git log", cwd="/nonexistent")
        assert code == -1
        assert "no such directory" in stderr


class TestOpenRepository:
    """Tests for repository discovery."""

    def test_open_returns_handle(self, tmp_path):
        client = GitClient()
        with patch.object(client, '_run', return_value=(str(tmp_path / ".git"), 0, "")):
            repo = client.open_repository(tmp_path)
        assert repo.path == tmp_path
        assert repo.git_dir == tmp_path / ".git"
        assert not repo.closed

    def test_not_a_repository(self, tmp_path):
        client = GitClient()
        with patch.object(client, '_run', return_value=(None, 128, "fatal: not a git repository")):
            with pytest.raises(NotAGitRepository):
                client.open_repository(tmp_path)

    def test_handle_context_manager_closes(self, repo):
        repo.commits["abc"] = object()
        with repo:
            pass
        assert repo.closed
        assert repo.commits == {}

    def test_closed_handle_cannot_be_read(self, repo):
        repo.close()
        with pytest.raises(GitIOFailure):
            GitClient().head_commit(repo)


class TestReads:
    """Tests for branch, tag and commit parsing."""

    def test_current_branch(self, repo):
        client = GitClient()
        with patch.object(client, '_run', return_value=("hotfix-1.2", 0, "")):
            assert client.current_branch(repo) == "hotfix-1.2"

    def test_detached_head_uses_commit_id(self, repo):
        client = GitClient()
        with patch.object(client, '_run', side_effect=[(None, 1, ""), ("a" * 40, 0, "")]):
            assert client.current_branch(repo) == "a" * 40

    def test_head_commit_failure(self, repo):
        client = GitClient()
        with patch.object(client, '_run', return_value=(None, 128, "fatal: bad revision 'HEAD'")):
            with pytest.raises(GitIOFailure) as exc_info:
                client.head_commit(repo)
        assert exc_info.value.returncode == 128
        assert "bad revision" in exc_info.value.stderr

    def test_tags_are_peeled(self, repo):
        lines = "\n".join([
            FIELD_SEP.join(["refs/tags/v1.0.0", "tagobject1", "commit1", "commit"]),
            FIELD_SEP.join(["refs/tags/v1.1.0", "commit2", "", ""]),
        ])
        client = GitClient()
        with patch.object(client, '_run', return_value=(lines, 0, "")):
            tags = client.tags(repo)

        assert [(t.ref_name, t.target) for t in tags] == [
            ("refs/tags/v1.0.0", "commit1"),
            ("refs/tags/v1.1.0", "commit2"),
        ]

    def test_no_tags(self, repo):
        client = GitClient()
        with patch.object(client, '_run', return_value=(None, 0, "")):
            assert client.tags(repo) == []

    def test_nested_tags_peeled_in_one_call(self, repo):
        lines = "\n".join([
            FIELD_SEP.join(["refs/tags/inner", "tagobject1", "commit1", "commit"]),
            FIELD_SEP.join(["refs/tags/v1.0.0", "tagobject2", "tagobject1", "tag"]),
            FIELD_SEP.join(["refs/tags/v2.0.0", "tagobject3", "tagobject2", "tag"]),
        ])
        client = GitClient()
        with patch.object(client, '_run', side_effect=[(lines, 0, ""), ("commit1\ncommit1", 0, "")]) as mock_run:
            tags = client.tags(repo)

        assert [t.target for t in tags] == ["commit1", "commit1", "commit1"]
        assert mock_run.call_count == 2
        peel_cmd = mock_run.call_args_list[1].args[0]
        assert peel_cmd.startswith("git rev-parse ")
        assert "'refs/tags/v1.0.0^{commit}'" in peel_cmd
        assert "'refs/tags/v2.0.0^{commit}'" in peel_cmd

    def test_nested_tag_without_commit_keeps_tag_object(self, repo):
        lines = "\n".join([
            FIELD_SEP.join(["refs/tags/tree-tag", "tagobject1", "tree1", "tree"]),
            FIELD_SEP.join(["refs/tags/v1.0.0", "tagobject2", "tagobject1", "tag"]),
            FIELD_SEP.join(["refs/tags/v1.1.0", "tagobject3", "tagobject4", "tag"]),
        ])
        client = GitClient()
        with patch.object(client, '_run', side_effect=[
            (lines, 0, ""),
            (None, 128, "fatal: ambiguous argument"),
            (None, 1, ""),
            ("commit5", 0, ""),
        ]):
            tags = {t.short_name: t.target for t in client.tags(repo)}

        assert tags == {"tree-tag": "tree1", "v1.0.0": "tagobject1", "v1.1.0": "commit5"}

    def test_history_loaded_once(self, repo):
        history = "\n".join([
            FIELD_SEP.join(["c2", "c1", "fix: b"]),
            FIELD_SEP.join(["c1", "c0", "feat: a"]),
            FIELD_SEP.join(["c0", "", "init"]),
        ])
        client = GitClient()
        with patch.object(client, '_run', return_value=(history, 0, "")) as mock_run:
            nodes = [client.commit(repo, commit_id) for commit_id in ("c2", "c1", "c0", "c1")]

        assert mock_run.call_count == 1
        assert "git log --no-show-signature" in mock_run.call_args.args[0]
        assert " HEAD" in mock_run.call_args.args[0]
        assert [n.subject for n in nodes] == ["fix: b", "feat: a", "init", "feat: a"]
        assert nodes[2].parents == ()
        assert repo.history_loaded

    def test_commit_outside_history_read_individually(self, repo):
        history = FIELD_SEP.join(["c0", "", "init"])
        single = FIELD_SEP.join(["s1", "c0", "feat: side"])
        client = GitClient()
        with patch.object(client, '_run', side_effect=[(history, 0, ""), (single, 0, "")]) as mock_run:
            node = client.commit(repo, "s1")
            again = client.commit(repo, "s1")

        assert node.parents == ("c0",)
        assert again is node
        assert mock_run.call_count == 2
        assert "git log -1" in mock_run.call_args.args[0]

    def test_failed_history_falls_back_to_single_reads(self, repo):
        single = FIELD_SEP.join(["c2", "c1 s1", "Merge branch 'side': with colon"])
        client = GitClient()
        with patch.object(client, '_run', side_effect=[(None, 128, "fatal: bad object"), (single, 0, "")]):
            node = client.commit(repo, "c2")

        assert node.parents == ("c1", "s1")
        assert node.subject == "Merge branch 'side': with colon"
        assert client.parents_of(repo, "c2") == ("c1", "s1")
        assert client.subject_of(repo, "c2") == node.subject

    def test_close_resets_history(self, repo):
        client = GitClient()
        with patch.object(client, '_run', return_value=(FIELD_SEP.join(["c0", "", "init"]), 0, "")):
            client.commit(repo, "c0")
        repo.close()
        assert not repo.history_loaded
        assert repo.commits == {}

    def test_unreadable_commit(self, repo):
        client = GitClient()
        with patch.object(client, '_run', return_value=(None, 128, "fatal: bad object")):
            with pytest.raises(GitIOFailure):
                client.commit(repo, "deadbeef")
