"""Commit category definitions."""

import re
from dataclasses import dataclass
from typing import Optional, Pattern


@dataclass(frozen=True)
class Category:
    """A changelog section that commits are classified into."""

    id: str
    name: str
    emoji: str
    pattern: Pattern[str]
    order: int

    @property
    def heading(self) -> str:
        return f"{self.emoji} {self.name}"

    def matches(self, message: Optional[str]) -> bool:
        """Check whether a commit message belongs to this category."""
        return bool(self.pattern.search(message or ""))


def conventional_type(type_name: str) -> Pattern[str]:
    """Build the anchored `type(scope)!:` header pattern for a commit type."""
    return re.compile(rf"^{re.escape(type_name)}(\([^)]+\))?!?:", re.IGNORECASE)
