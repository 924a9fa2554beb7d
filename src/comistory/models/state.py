"""
Comistory workflow state shared between graph nodes.
"""

from typing import List, Optional, TypedDict

from comistory.models.commit import CommitRecord


class AgentState(TypedDict, total=False):
    """State container for the changelog workflow.

    Using TypedDict for LangGraph compatibility. total=False means all fields
    are optional.
    """

    # Discovery configuration
    source: str  # Either "local" or "remote"
    repo_path: str  # Working copy used for local discovery
    remote_url: Optional[str]  # GitHub repository URL for remote discovery
    token: Optional[str]  # GitHub API token for remote discovery
    per_page: int  # Page size for remote discovery (1-100)
    page: int  # Page number for remote discovery (1-based)
    since_ref: Optional[str]  # Only show local commits after this reference

    # Discovery output
    commits: List[CommitRecord]  # Commits in the order they were retrieved
    commit_count: int  # Number of discovered commits

    # Renderer output
    markdown: str  # Rendered changelog document
