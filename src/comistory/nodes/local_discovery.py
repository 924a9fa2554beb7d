"""
Comistory local commit discovery using the working copy's git history.
"""

from typing import List, Optional

from git import Repo
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError
from git.objects.commit import Commit
from loguru import logger

from comistory.errors import GitRepositoryError
from comistory.models.commit import CommitRecord
from comistory.utils.helpers import extract_pull_request_number, short_hash_of

NOT_A_REPOSITORY = "Current directory is not a git repository. Please run from a git repository root."


def _open_repo(repo_path: str) -> Repo:
    try:
        return Repo(repo_path, search_parent_directories=True)
    except (InvalidGitRepositoryError, NoSuchPathError) as e:
        logger.error(NOT_A_REPOSITORY)
        raise GitRepositoryError(NOT_A_REPOSITORY) from e


def _create_commit_record(commit: Commit) -> CommitRecord:
    """Create a CommitRecord from a GitPython Commit object."""
    message = commit.message.strip()
    return CommitRecord(
        hash=commit.hexsha,
        short_hash=short_hash_of(commit.hexsha),
        message=message,
        date=commit.authored_datetime,
        pr_number=extract_pull_request_number(message),
    )


def discover_local_commits(repo_path: str, since_ref: Optional[str] = None) -> List[CommitRecord]:
    """Read the history reachable from HEAD, newest first.

    Args:
        repo_path: Path to the git working copy.
        since_ref: When given, only commits after this reference are returned.

    Returns:
        Commit records without a repository URL.
    """
    repo = _open_repo(repo_path)

    if not repo.head.is_valid():
        logger.info("Repository has no commits yet")
        return []

    rev = f"{since_ref}..HEAD" if since_ref else "HEAD"
    logger.debug(f"Reading git history for {rev} in {repo.working_dir}")

    try:
        commits = [_create_commit_record(commit) for commit in repo.iter_commits(rev)]
    except GitCommandError as e:
        message = f"Git error: {e.stderr.strip() or e}"
        logger.error(message)
        raise GitRepositoryError(message) from e

    logger.debug(f"Parsed {len(commits)} commits from local git repository")
    return commits
