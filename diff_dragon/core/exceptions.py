"""Custom exceptions for the review service."""


class ApiException(Exception):
    """Base exception for all API errors."""

    def __init__(
        self,
        status_code: int,
        message: str,
        details: dict | None = None,
    ) -> None:
        self.status_code = status_code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ExternalServiceError(ApiException):
    """External service (GitHub, LLM provider) error."""

    def __init__(self, service: str, message: str) -> None:
        super().__init__(502, f"{service} error: {message}")


class GitHubAuthError(ExternalServiceError):
    """Installation token could not be minted."""

    def __init__(self, message: str) -> None:
        super().__init__("GitHub App", message)


class ReviewFailedError(ApiException):
    """A review run failed after it started.

    The message is generic; the underlying error is logged, not returned.
    """

    def __init__(self, details: dict | None = None) -> None:
        super().__init__(500, "Review failed", details)


class DuplicateReviewError(Exception):
    """A review record already exists for this commit."""

    def __init__(self, owner: str, repo: str, pr_number: int, commit_sha: str) -> None:
        self.owner = owner
        self.repo = repo
        self.pr_number = pr_number
        self.commit_sha = commit_sha
        super().__init__(f"Review already recorded for {owner}/{repo}#{pr_number}@{commit_sha[:7]}")
