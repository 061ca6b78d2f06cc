"""Repository review policy."""

from diff_dragon.services.policy.schemas import DEFAULT_POLICY, Policy
from diff_dragon.services.policy.service import (
    merge_policy,
    parse_policy,
    resolve_policy,
    should_review,
    should_review_file,
)

__all__ = [
    "DEFAULT_POLICY",
    "Policy",
    "merge_policy",
    "parse_policy",
    "resolve_policy",
    "should_review",
    "should_review_file",
]
