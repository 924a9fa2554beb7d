"""Small helpers shared by the commit discovery nodes."""

import re
from typing import Any, Optional

# Checked in order: merge commits, "(#123)" suffixes, then any bare "#123"
PR_PATTERNS = [
    re.compile(r"Merge pull request #(\d+)", re.IGNORECASE),
    re.compile(r"\(#(\d+)\)"),
    re.compile(r"#(\d+)\b"),
]


def extract_pull_request_number(message: Any) -> Optional[str]:
    """Extract a pull request number from a commit message.

    Args:
        message: The commit message to search.

    Returns:
        The PR number as a string, or None if the message references none.
    """
    if not message or not isinstance(message, str):
        return None

    for pattern in PR_PATTERNS:
        match = pattern.search(message)
        if match:
            return match.group(1)

    return None


def short_hash_of(commit_hash: str, length: int = 7) -> str:
    """Return the abbreviated display form of a commit hash."""
    return (commit_hash or "")[:length]
