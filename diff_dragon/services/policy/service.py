"""Policy service - load, merge and evaluate repository review policy."""

from typing import TYPE_CHECKING, Any

import yaml
from github import GithubException
from pydantic import BaseModel, ValidationError

from diff_dragon.core.logging import get_logger
from diff_dragon.services.policy.glob import matches_any
from diff_dragon.services.policy.schemas import DEFAULT_POLICY, AiSettings, CommentSettings, Policy

if TYPE_CHECKING:
    from diff_dragon.services.github.client import GitHubClient

logger = get_logger("policy.service")

# Looked up in order on the default branch; the first one with content wins.
CONFIG_PATHS = (".github/diff-dragon.yaml", ".github/diff-dragon.yml")

_NESTED_SECTIONS: dict[str, type[BaseModel]] = {
    "comments": CommentSettings,
    "ai": AiSettings,
}


def _aliased(model: type[BaseModel], data: dict[str, Any]) -> dict[str, Any]:
    """Map snake_case keys onto the camelCase aliases and drop null values."""
    result = {}
    for key, value in data.items():
        if value is None:
            continue
        field = model.model_fields.get(key)
        if field is not None and field.alias:
            key = field.alias
        result[key] = value
    return result


def merge_policy(default: Policy, user: dict[str, Any]) -> Policy:
    """Merge a user policy document over a default policy.

    Top-level keys override shallowly. The ``comments`` and ``ai`` sections
    merge key by key, so fields the user leaves out keep their default.

    Raises:
        ValidationError: If the merged document is not a valid policy
    """
    merged = default.model_dump(by_alias=True)

    for key, value in _aliased(Policy, user).items():
        section = _NESTED_SECTIONS.get(key)
        if section is not None and isinstance(value, dict):
            merged[key] = {**merged[key], **_aliased(section, value)}
        else:
            merged[key] = value

    return Policy.model_validate(merged)


def parse_policy(raw_document: str) -> Policy:
    """Parse a YAML policy document.

    An unparseable or non-mapping document yields the default policy. Keys
    with invalid values are dropped one by one and keep their defaults, so
    a bad `ai.strictness` does not discard `enabled: false`.
    """
    try:
        user_policy = yaml.safe_load(raw_document)
    except yaml.YAMLError as e:
        logger.error(f"Error parsing YAML config: {e}")
        logger.warning("Falling back to default configuration")
        return DEFAULT_POLICY

    if not isinstance(user_policy, dict):
        logger.warning("Invalid config format, using defaults")
        return DEFAULT_POLICY

    document = _normalize(user_policy)
    while True:
        try:
            policy = merge_policy(DEFAULT_POLICY, document)
            break
        except ValidationError as e:
            if not _drop_invalid_keys(document, e):
                logger.warning(f"Config failed validation ({e.error_count()} errors), using defaults")
                return DEFAULT_POLICY

    logger.info("Successfully parsed user configuration")
    return policy


def _normalize(user: dict[str, Any]) -> dict[str, Any]:
    """Copy a user document with every known key in its camelCase form."""
    document = _aliased(Policy, user)
    for key, section in _NESTED_SECTIONS.items():
        if isinstance(document.get(key), dict):
            document[key] = _aliased(section, document[key])
    return document


def _drop_invalid_keys(document: dict[str, Any], error: ValidationError) -> int:
    """Remove the user keys named by a validation error so their defaults apply.

    Returns the number of keys removed.
    """
    dropped = 0
    for detail in error.errors():
        loc = detail["loc"]
        top = loc[0] if loc else None
        if top not in document:
            continue

        value = document[top]
        if top in _NESTED_SECTIONS and len(loc) > 1 and isinstance(value, dict):
            if loc[1] not in value:
                continue
            del value[loc[1]]
            name = f"{top}.{loc[1]}"
        else:
            del document[top]
            name = str(top)

        logger.warning(f"Ignoring invalid config value {name}: {detail['msg']}")
        dropped += 1
    return dropped


def should_review(policy: Policy, action: str) -> bool:
    """Check whether a webhook action should trigger a review."""
    if not policy.enabled:
        logger.info("Bot is disabled in config")
        return False

    if action not in policy.review_on:
        logger.info(f"Action '{action}' not in reviewOn list")
        return False

    return True


def should_review_file(policy: Policy, path: str) -> bool:
    """Check whether a file is in scope.

    Exclude patterns win over include patterns. An empty include list
    includes every file that is not excluded.
    """
    if matches_any(path, policy.exclude_patterns):
        return False

    if policy.include_patterns:
        return matches_any(path, policy.include_patterns)

    return True


async def resolve_policy(client: "GitHubClient") -> Policy:
    """Load the repository policy from the first config path that exists."""
    for config_path in CONFIG_PATHS:
        try:
            content = await client.get_file_content(config_path)
        except GithubException as e:
            logger.warning(f"Could not read {config_path}: {e.status}")
            continue
        except Exception as e:
            # Undecodable content, transport errors: treated like a missing file.
            logger.warning(f"Could not read {config_path}: {type(e).__name__}: {e}")
            continue

        if content:
            logger.info(f"Loaded config from {config_path}")
            return parse_policy(content)

    logger.info("No repository config found, using defaults")
    return DEFAULT_POLICY
