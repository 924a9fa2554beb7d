"""
Comistory remote commit discovery through the GitHub REST API.
"""

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

import httpx
from loguru import logger

from comistory.config import GITHUB_API_URL
from comistory.errors import RemoteRepositoryError, TokenError
from comistory.models.commit import CommitRecord
from comistory.utils.helpers import extract_pull_request_number, short_hash_of

REPOSITORY_PATTERNS = [
    re.compile(r"github\.com/([^/]+)/([^/]+?)(\.git)?$", re.IGNORECASE),
    re.compile(r"github\.com:([^/]+)/([^/]+?)(\.git)?$", re.IGNORECASE),
    re.compile(r"^([^/:]+)/([^/]+?)(\.git)?$", re.IGNORECASE),
]

LOW_RATE_LIMIT = 10
REQUEST_TIMEOUT = httpx.Timeout(30.0, connect=10.0)


@dataclass(frozen=True)
class RepositoryRef:
    """A GitHub repository resolved from a user supplied URL."""

    owner: str
    repo: str
    api_url: str
    html_url: str


def parse_repository_url(url: str) -> RepositoryRef:
    """Resolve `https://github.com/o/r`, `git@github.com:o/r.git` or `o/r`."""
    candidate = (url or "").strip().rstrip("/")

    for pattern in REPOSITORY_PATTERNS:
        match = pattern.search(candidate)
        if match:
            owner, repo = match.group(1), match.group(2)
            return RepositoryRef(
                owner=owner,
                repo=repo,
                api_url=f"{GITHUB_API_URL}/repos/{owner}/{repo}/commits",
                html_url=f"https://github.com/{owner}/{repo}",
            )

    message = f"Invalid GitHub repository URL format: {url}"
    logger.error(message)
    raise RemoteRepositoryError(message)


class GitHubCommitFetcher:
    """Fetches one page of commits for a GitHub repository."""

    def __init__(self, token: str, repo_url: str, client: Optional[httpx.Client] = None):
        if not token:
            message = "GitHub token is required for remote repository access"
            logger.error(message)
            raise TokenError(message)

        if not repo_url:
            message = "Repository URL is required"
            logger.error(message)
            raise RemoteRepositoryError(message)

        self.token = token
        self.repository = parse_repository_url(repo_url)
        # Injected clients belong to the caller and are left open
        self.client = client

    def _get_headers(self) -> Dict[str, str]:
        return {
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {self.token}",
            "User-Agent": "comistory",
        }

    def _create_commit_record(self, item: Dict[str, Any]) -> CommitRecord:
        """Create a CommitRecord from a GitHub API commit object."""
        details = item.get("commit") or {}
        message = details.get("message") or ""
        author = details.get("author") or {}
        sha = item.get("sha", "")

        return CommitRecord(
            hash=sha,
            short_hash=short_hash_of(sha),
            message=message,
            date=author.get("date"),
            pr_number=extract_pull_request_number(message),
            repo_url=self.repository.html_url,
        )

    def _log_rate_limit(self, headers: httpx.Headers) -> None:
        remaining = headers.get("x-ratelimit-remaining")
        limit = headers.get("x-ratelimit-limit")
        reset = headers.get("x-ratelimit-reset")

        if not (remaining and limit):
            return

        reset_at = datetime.fromtimestamp(int(reset)).strftime("%H:%M:%S") if reset and reset.isdigit() else "unknown"
        logger.info(f"GitHub API Rate Limit: {remaining}/{limit} remaining (resets at: {reset_at})")

        if remaining.isdigit() and int(remaining) < LOW_RATE_LIMIT:
            logger.warning("GitHub API rate limit is running low. You may encounter errors soon.")

    def _raise_for_status(self, response: httpx.Response) -> None:
        status = response.status_code
        if status < 400:
            return

        owner, repo = self.repository.owner, self.repository.repo
        if status == 404:
            message = (
                f"Repository not found: {owner}/{repo}. "
                "Check if the repository exists and is accessible with your token."
            )
        elif status == 403:
            try:
                body_message = str(response.json().get("message", ""))
            except ValueError:
                body_message = ""
            if "rate limit" in body_message.lower():
                message = "GitHub API rate limit exceeded. Your limit is 5,000 requests per hour."
            else:
                message = "Access denied. Your GitHub token may have insufficient permissions or has expired."
        elif status == 401:
            message = "Authentication failed. The provided GitHub token is invalid."
        else:
            message = f"Failed to fetch commits from GitHub API: HTTP {status}"

        logger.error(message)
        raise RemoteRepositoryError(message)

    def _parse_commits(self, response: httpx.Response) -> List[CommitRecord]:
        """Turn a successful commits response into records.

        Raises:
            RemoteRepositoryError: If the body is not a JSON list of commit objects.
        """
        try:
            items = response.json()
            if not isinstance(items, list):
                raise TypeError(f"expected a list of commits, got {type(items).__name__}")
            return [self._create_commit_record(item) for item in items]
        except (ValueError, TypeError, AttributeError) as e:
            message = f"Unexpected response from GitHub API: {e}"
            logger.error(message)
            raise RemoteRepositoryError(message) from e

    def fetch_commits(self, per_page: int = 100, page: int = 1) -> List[CommitRecord]:
        """Fetch a single page of commits, newest first."""
        if per_page < 1 or per_page > 100:
            message = "per_page must be between 1 and 100"
            logger.error(message)
            raise RemoteRepositoryError(message)

        if page < 1:
            message = "page must be a positive number"
            logger.error(message)
            raise RemoteRepositoryError(message)

        logger.info(f"Fetching commits from: {self.repository.api_url}")
        logger.debug(f"Repository owner: {self.repository.owner}, repo: {self.repository.repo}")
        logger.debug(f"Pagination: page: {page}, per_page: {per_page}")

        params = {"per_page": per_page, "page": page}
        try:
            if self.client is not None:
                response = self.client.get(self.repository.api_url, params=params, headers=self._get_headers())
            else:
                with httpx.Client(timeout=REQUEST_TIMEOUT) as client:
                    response = client.get(self.repository.api_url, params=params, headers=self._get_headers())
        except httpx.HTTPError as e:
            message = f"Failed to fetch commits from GitHub API: {e}"
            logger.error(message)
            raise RemoteRepositoryError(message) from e

        self._log_rate_limit(response.headers)
        self._raise_for_status(response)

        commits = self._parse_commits(response)
        logger.debug(f"Received {len(commits)} commits from GitHub API (page: {page})")

        return commits


def discover_remote_commits(
    token: str, repo_url: str, per_page: int = 100, page: int = 1, client: Optional[httpx.Client] = None
) -> List[CommitRecord]:
    """Factory-style shortcut used by the workflow's discovery node."""
    return GitHubCommitFetcher(token, repo_url, client=client).fetch_commits(per_page=per_page, page=page)
