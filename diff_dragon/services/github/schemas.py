"""Pydantic schemas for GitHub service."""

from typing import Any

from pydantic import BaseModel, ConfigDict


class PullRequestRef(BaseModel):
    model_config = ConfigDict(frozen=True)

    number: int
    head_sha: str


class RepositoryRef(BaseModel):
    model_config = ConfigDict(frozen=True)

    owner: str
    name: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


class InboundEvent(BaseModel):
    """A verified pull_request webhook delivery."""

    model_config = ConfigDict(frozen=True)

    action: str
    pull_request: PullRequestRef
    repository: RepositoryRef
    installation_id: int

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "InboundEvent":
        """Build an event from a raw GitHub webhook payload.

        Raises:
            pydantic.ValidationError: If required fields are missing
        """
        pr = payload.get("pull_request") or {}
        repo = payload.get("repository") or {}
        return cls.model_validate(
            {
                "action": payload.get("action"),
                "pull_request": {
                    "number": pr.get("number"),
                    "head_sha": (pr.get("head") or {}).get("sha"),
                },
                "repository": {
                    "owner": (repo.get("owner") or {}).get("login"),
                    "name": repo.get("name"),
                },
                "installation_id": (payload.get("installation") or {}).get("id"),
            }
        )

    @property
    def key(self) -> str:
        return f"{self.repository.full_name}#{self.pull_request.number}@{self.pull_request.head_sha[:7]}"


class ChangedFile(BaseModel):
    """A file changed in a pull request."""

    filename: str
    patch: str | None = None
    status: str = "modified"
    additions: int = 0
    deletions: int = 0


class WebhookResponse(BaseModel):
    """Response schema for webhook deliveries."""

    status: str
