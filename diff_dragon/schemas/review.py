"""Structured output schema the review model fills in."""

from pydantic import BaseModel, Field


class ReviewComment(BaseModel):
    path: str = Field(description="File path exactly as given in the diff header")
    line: int = Field(description="Line number in the NEW version of the file")
    body: str = Field(description="The review comment, in Markdown")


class PullRequestReview(BaseModel):
    summary: str = Field(description="Two to four sentences describing the change and its main risks")
    suggestions: list[str] = Field(default_factory=list, description="Actionable improvements, most important first")
    release_notes: str = Field(default="", description="One short user-facing release note")
    comments: list[ReviewComment] = Field(default_factory=list, description="Inline comments, most important first")
