"""Pydantic schemas for reviewer service."""

from enum import Enum

from pydantic import BaseModel, Field


class ReviewStatus(str, Enum):
    """Outcome of one webhook delivery, returned as the response status."""

    OK = "ok"
    IGNORED = "ignored"
    IGNORED_BY_POLICY = "ignored - disabled or action not in reviewOn list"
    INVALID_SIGNATURE = "invalid signature"
    ALREADY_REVIEWED = "already reviewed"
    NO_FILES = "no files to review after filtering"
    NO_INSTALLATION = "error - no installation id"


class InlineComment(BaseModel):
    """A review comment anchored to a line of the new file."""

    path: str
    line: int
    body: str


class AnalysisResult(BaseModel):
    """Structured output of the analysis engine."""

    summary: str
    suggestions: list[str] = Field(default_factory=list)
    release_notes: str = ""
    inline_comments: list[InlineComment] = Field(default_factory=list)
