"""Tests for local commit discovery."""

from pathlib import Path

import pytest
from git import Repo

from comistory.errors import GitRepositoryError
from comistory.nodes.local_discovery import discover_local_commits
from comistory.nodes.markdown_renderer import format_commits

JAN_15_2023_NOON_UTC = "1673784000 +0000"
JAN_16_2023_NOON_UTC = "1673870400 +0000"


def create_commit(repo: Repo, file_path: Path, content: str, message: str, date: str = JAN_15_2023_NOON_UTC):
    """Helper function to create a commit in the test repository."""
    file_path.write_text(content)
    repo.index.add([str(file_path)])
    return repo.index.commit(message, author_date=date, commit_date=date)


@pytest.fixture
def temp_git_repo(tmp_path):
    """Create a basic temporary Git repository."""
    repo_path = tmp_path / "test_repo"
    repo_path.mkdir()
    return Repo.init(repo_path)


@pytest.fixture
def history_repo(temp_git_repo):
    """Repository with a tagged first release and two newer commits."""
    repo = temp_git_repo
    test_file = Path(repo.working_dir) / "test.txt"

    create_commit(repo, test_file, "Initial content", "Initial commit")
    repo.create_tag("v1.0.0")
    create_commit(repo, test_file, "Feature A", "feat: add feature A (#12)")
    create_commit(repo, test_file, "Fix B", "fix: repair B\n\nLonger explanation of the fix.", JAN_16_2023_NOON_UTC)

    return repo


def test_discovers_all_commits_newest_first(history_repo):
    commits = discover_local_commits(history_repo.working_dir)

    assert [c.message.splitlines()[0] for c in commits] == [
        "fix: repair B",
        "feat: add feature A (#12)",
        "Initial commit",
    ]
    assert commits[0].message == "fix: repair B\n\nLonger explanation of the fix."


def test_commit_record_fields(history_repo):
    feature = discover_local_commits(history_repo.working_dir)[1]

    assert feature.hash == history_repo.head.commit.parents[0].hexsha
    assert feature.short_hash == feature.hash[:7]
    assert feature.pr_number == "12"
    assert feature.repo_url is None
    assert (feature.date.year, feature.date.month, feature.date.day) == (2023, 1, 15)


def test_since_ref_limits_history(history_repo):
    commits = discover_local_commits(history_repo.working_dir, since_ref="v1.0.0")

    messages = [c.message for c in commits]
    assert len(commits) == 2
    assert "Initial commit" not in messages


def test_empty_repository_has_no_commits(temp_git_repo):
    assert discover_local_commits(temp_git_repo.working_dir) == []


def test_not_a_repository(tmp_path):
    plain_dir = tmp_path / "plain"
    plain_dir.mkdir()

    with pytest.raises(GitRepositoryError, match="not a git repository"):
        discover_local_commits(str(plain_dir))


def test_missing_path(tmp_path):
    with pytest.raises(GitRepositoryError):
        discover_local_commits(str(tmp_path / "does-not-exist"))


def test_unknown_since_ref(history_repo):
    with pytest.raises(GitRepositoryError):
        discover_local_commits(history_repo.working_dir, since_ref="v9.9.9")


def test_local_history_renders(history_repo):
    result = format_commits(discover_local_commits(history_repo.working_dir))

    assert result.index("## 2023/01/16") < result.index("## 2023/01/15")
    assert "### ✨ Feature" in result
    assert "### 🐛 Bug Fix" in result
    assert "### 📦 Other" in result
    assert "- feat: add feature A (#12) (" in result
