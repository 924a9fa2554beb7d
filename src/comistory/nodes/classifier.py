"""Conventional commit classification with a fixed, ordered rule table."""

import re
from typing import Optional, Tuple

from comistory.models.category import Category, conventional_type

BREAKING_MARKER = re.compile(r"BREAKING CHANGE:", re.IGNORECASE)
BREAKING_HEADER = re.compile(r"^[a-z]+(\([^)]+\))?!:", re.IGNORECASE)

BREAKING = Category(
    id="breaking",
    name="Breaking Change",
    emoji="🔥",
    pattern=re.compile(rf"{BREAKING_HEADER.pattern}|{BREAKING_MARKER.pattern}", re.IGNORECASE),
    order=0,
)

OTHER = Category(id="other", name="Other", emoji="📦", pattern=re.compile(r".*", re.DOTALL), order=999)

# Priority order of the conventional types: first match wins
COMMIT_TYPES: Tuple[Category, ...] = (
    Category("feat", "Feature", "✨", conventional_type("feat"), 1),
    Category("fix", "Bug Fix", "🐛", conventional_type("fix"), 2),
    Category("docs", "Documentation", "📚", conventional_type("docs"), 3),
    Category("refactor", "Refactor", "♻️", conventional_type("refactor"), 4),
    Category("test", "Test", "🧪", conventional_type("test"), 5),
    Category("build", "Build", "🏗️", conventional_type("build"), 6),
    Category("chore", "Chore", "🔧", conventional_type("chore"), 7),
    Category("style", "Style", "🎨", conventional_type("style"), 8),
    Category("perf", "Performance", "⚡", conventional_type("perf"), 9),
)

# Full table in evaluation order; OTHER must stay last
CATEGORIES: Tuple[Category, ...] = (BREAKING,) + COMMIT_TYPES + (OTHER,)


def is_breaking_change(message: Optional[str]) -> bool:
    """Detect a `!` header or a BREAKING CHANGE marker anywhere in the message."""
    if not message:
        return False
    return bool(BREAKING_MARKER.search(message) or BREAKING_HEADER.match(message))


def classify(message: Optional[str]) -> Category:
    """Classify a commit message into exactly one category.

    Breaking changes take precedence over the conventional type, and anything
    that matches no rule lands in the catch-all category.
    """
    if is_breaking_change(message):
        return BREAKING

    for category in COMMIT_TYPES:
        if category.matches(message):
            return category

    return OTHER


def category_rank(category: Category) -> Tuple[int, int]:
    """Sort key for output order: declared order, then table position."""
    return category.order, CATEGORIES.index(category)
