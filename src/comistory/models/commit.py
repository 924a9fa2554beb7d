"""Commit records consumed by the changelog pipeline."""

from datetime import date as calendar_date
from datetime import datetime, time
from typing import Any, Optional

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError, ValidatorFunctionWrapHandler, field_validator


class CommitRecord(BaseModel):
    """Structured, read-only representation of a single commit."""

    model_config = ConfigDict(frozen=True)

    hash: str = Field("", description="The full commit hash")
    short_hash: str = Field("", description="Short display hash, derived by the caller")
    message: Optional[str] = Field(None, description="The commit message; first line is the subject")
    date: Optional[datetime] = Field(None, description="The commit timestamp, None when unknown")
    pr_number: Optional[str] = Field(None, description="Pull request number referenced by the commit")
    repo_url: Optional[str] = Field(None, description="Base web URL of the hosting repository")

    @field_validator("date", mode="wrap")
    @classmethod
    def _coerce_date(cls, value: Any, handler: ValidatorFunctionWrapHandler) -> Optional[datetime]:
        """Parse timestamps with pydantic, treating anything unparseable as undated.

        A bare calendar date stands for midnight of that day.
        """
        if isinstance(value, calendar_date) and not isinstance(value, datetime):
            value = datetime.combine(value, time.min)
        try:
            return handler(value)
        except ValidationError:
            logger.debug(f"Invalid commit date {value!r}, treating as undated")
            return None
