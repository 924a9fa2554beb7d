"""Markdown Renderer Node for turning commits into a day-by-day changelog."""

import re
from typing import Dict, List, Optional, Sequence

from loguru import logger

from comistory.models.category import Category
from comistory.models.commit import CommitRecord
from comistory.models.state import AgentState
from comistory.nodes.classifier import category_rank, classify

TITLE = "# Comistory"
TAGLINE = "> Every commit tells a story"
EMPTY_DOCUMENT = "# No commits found"
UNDATED = "Undated"

MAX_LINE_LENGTH = 100
ELLIPSIS = "..."

EMBEDDED_DATE = re.compile(r"\d{4}-\d{2}-\d{2}")


def _day_key(commit: CommitRecord) -> str:
    """Derive the YYYY/MM/DD bucket for a commit, falling back to dates in the message."""
    date = commit.date
    if date is not None:
        return f"{date.year:04d}/{date.month:02d}/{date.day:02d}"

    if isinstance(commit.message, str):
        match = EMBEDDED_DATE.search(commit.message)
        if match:
            return match.group(0).replace("-", "/")

    return UNDATED


def group_commits_by_day(commits: Sequence[CommitRecord]) -> Dict[str, List[CommitRecord]]:
    """Bucket commits by calendar day, keeping input order inside each bucket."""
    days: Dict[str, List[CommitRecord]] = {}
    for commit in commits:
        days.setdefault(_day_key(commit), []).append(commit)
    return days


def group_commits_by_category(commits: Sequence[CommitRecord]) -> Dict[Category, List[CommitRecord]]:
    """Bucket commits by category, ordered for output.

    Categories come out in ascending priority; commits keep their input order.
    """
    buckets: Dict[Category, List[CommitRecord]] = {}
    for commit in commits:
        buckets.setdefault(classify(commit.message), []).append(commit)
    return {category: buckets[category] for category in sorted(buckets, key=category_rank)}


def sort_day_keys(days: Sequence[str]) -> List[str]:
    """Newest day first.

    This is a plain descending string sort, so the Undated bucket ("U" > "2")
    lands ahead of every dated bucket.
    """
    return sorted(days, reverse=True)


def _base_url(repo_url: str) -> str:
    return repo_url[:-1] if repo_url.endswith("/") else repo_url


def _link_pull_request(line: str, pr_number: str, repo_url: str) -> str:
    """Turn the first `(#N)` and then the first ` #N` reference into PR links."""
    pr_url = f"{_base_url(repo_url)}/pull/{pr_number}"
    line = line.replace(f"(#{pr_number})", f"([#{pr_number}]({pr_url}))", 1)
    return re.sub(
        rf" #{re.escape(pr_number)}(?!\d)",
        lambda _: f" [#{pr_number}]({pr_url})",
        line,
        count=1,
    )


def format_commit_line(commit: CommitRecord) -> str:
    """Format a single commit as the text of a markdown list item."""
    message = commit.message if isinstance(commit.message, str) else ""
    short_hash = commit.short_hash or "unknown"

    if not message.strip():
        return f"Empty commit message ({short_hash})"

    line = message.split("\n")[0].strip()
    if len(line) > MAX_LINE_LENGTH:
        line = line[: MAX_LINE_LENGTH - len(ELLIPSIS)] + ELLIPSIS

    if commit.repo_url and commit.hash:
        line += f" ([{short_hash}]({_base_url(commit.repo_url)}/commit/{commit.hash}))"
    else:
        line += f" ({short_hash})"

    if commit.pr_number and commit.repo_url:
        line = _link_pull_request(line, commit.pr_number, commit.repo_url)

    return line


def format_commits(commits: Optional[Sequence[CommitRecord]]) -> str:
    """Render commits as a markdown changelog, newest day first."""
    if not commits:
        return EMPTY_DOCUMENT

    days = group_commits_by_day(commits)
    parts = [TITLE, "", TAGLINE, ""]

    for day in sort_day_keys(list(days)):
        parts.extend([f"## {day}", ""])

        for category, category_commits in group_commits_by_category(days[day]).items():
            parts.extend([f"### {category.heading}", ""])
            parts.extend(f"- {format_commit_line(commit)}" for commit in category_commits)
            parts.append("")

    return "\n".join(parts).strip()


def markdown_renderer_node(state: AgentState) -> AgentState:
    """Render the discovered commits into the changelog document."""
    logger.info("Executing Markdown Renderer Node")

    commits = state.get("commits", [])
    markdown = format_commits(commits)

    logger.debug(f"Rendered {len(commits)} commits into {len(markdown.splitlines())} lines of markdown")

    return {**state, "markdown": markdown}
