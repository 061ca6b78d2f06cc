"""Pydantic schemas for repository review policy."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class FocusArea(str, Enum):
    BUGS = "bugs"
    SECURITY = "security"
    PERFORMANCE = "performance"
    BEST_PRACTICES = "best-practices"
    STYLE = "style"
    DOCUMENTATION = "documentation"


class Strictness(str, Enum):
    LENIENT = "lenient"
    BALANCED = "balanced"
    STRICT = "strict"


class _PolicyModel(BaseModel):
    """Accepts camelCase keys from YAML and snake_case from Python."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)


class CommentSettings(_PolicyModel):
    """Comment channel preferences."""

    inline: bool = True
    summary: bool = True
    max_inline_comments: int = Field(default=10, ge=0, alias="maxInlineComments")


class AiSettings(_PolicyModel):
    """Preferences passed through to the analysis engine."""

    focus_areas: list[FocusArea] = Field(
        default_factory=lambda: [
            FocusArea.BUGS,
            FocusArea.SECURITY,
            FocusArea.PERFORMANCE,
            FocusArea.BEST_PRACTICES,
        ],
        alias="focusAreas",
    )
    strictness: Strictness = Strictness.BALANCED
    custom_instructions: str | None = Field(default=None, alias="customInstructions")
    max_diff_lines: int | None = Field(default=None, ge=0, alias="maxDiffLines")


class Policy(_PolicyModel):
    """Effective review configuration for one repository."""

    enabled: bool = True
    review_on: list[str] = Field(
        default_factory=lambda: ["opened", "reopened", "synchronize"],
        alias="reviewOn",
    )
    include_patterns: list[str] = Field(default_factory=lambda: ["**/*"], alias="includePatterns")
    exclude_patterns: list[str] = Field(
        default_factory=lambda: [
            "**/node_modules/**",
            "**/dist/**",
            "**/build/**",
            "**/*.min.js",
            "**/*.lock",
            "**/package-lock.json",
            "**/yarn.lock",
            "**/pnpm-lock.yaml",
        ],
        alias="excludePatterns",
    )
    comments: CommentSettings = Field(default_factory=CommentSettings)
    ai: AiSettings = Field(default_factory=AiSettings)


DEFAULT_POLICY = Policy()
