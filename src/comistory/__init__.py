"""Comistory: every commit tells a story."""

__version__ = "1.0.0"

from comistory.models.commit import CommitRecord
from comistory.nodes.classifier import classify
from comistory.nodes.markdown_renderer import format_commits

__all__ = ["__version__", "CommitRecord", "classify", "format_commits"]
