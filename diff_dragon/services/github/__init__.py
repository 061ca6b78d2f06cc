"""GitHub service."""

from diff_dragon.services.github.client import GitHubClient, authenticate
from diff_dragon.services.github.schemas import ChangedFile, InboundEvent

__all__ = [
    "ChangedFile",
    "GitHubClient",
    "InboundEvent",
    "authenticate",
]
