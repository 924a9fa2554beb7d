"""Runtime configuration for the Comistory CLI."""

import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError, model_validator

from comistory.errors import OptionsError

TOKEN_ENV_VAR = "COMISTORY_GITHUB_TOKEN"
VERBOSE_ENV_VAR = "COMISTORY_VERBOSE"
CONFIG_DIR_ENV_VAR = "COMISTORY_CONFIG_DIR"

DEFAULT_OUTPUT = "comistory.md"
GITHUB_API_URL = "https://api.github.com"


def config_dir() -> Path:
    """Directory holding the global config file."""
    override = os.getenv(CONFIG_DIR_ENV_VAR)
    if override:
        return Path(override)
    return Path.home() / ".config" / "comistory"


def verbose_from_env() -> bool:
    return os.getenv(VERBOSE_ENV_VAR, "").lower() == "true"


class GenerateOptions(BaseModel):
    """Validated options of the `generate` command."""

    local: bool = Field(False, description="Read commits from the local repository")
    remote: Optional[str] = Field(None, description="GitHub repository URL to read commits from")
    output: str = Field(DEFAULT_OUTPUT, description="Path of the markdown file to write")
    per_page: int = Field(100, description="Commits per page for remote access")
    page: int = Field(1, description="Page number for remote access")
    repo_path: str = Field(".", description="Path to the local git repository")
    since_ref: Optional[str] = Field(None, description="Only include local commits after this reference")
    verbose: bool = False

    @model_validator(mode="after")
    def _check_source_and_pagination(self) -> "GenerateOptions":
        if self.local == bool(self.remote):
            raise ValueError("You must provide exactly one option: --local or --remote <url>")
        # Pagination only applies to the GitHub API
        if self.remote:
            if not 1 <= self.per_page <= 100:
                raise ValueError("--per-page must be a number between 1 and 100")
            if self.page < 1:
                raise ValueError("--page must be a positive number")
        return self

    @property
    def source(self) -> str:
        return "local" if self.local else "remote"

    @classmethod
    def parse(cls, **values) -> "GenerateOptions":
        """Build options, turning validation failures into an OptionsError."""
        try:
            return cls(**values)
        except ValidationError as e:
            messages = "; ".join(_describe(error) for error in e.errors())
            raise OptionsError(messages) from e


def _describe(error: dict) -> str:
    location = ".".join(str(part) for part in error.get("loc", ()))
    message = error["msg"].removeprefix("Value error, ")
    return f"{location}: {message}" if location else message
