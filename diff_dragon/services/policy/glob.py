"""Glob matching for repository paths.

Supported syntax:
- ``**`` matches any number of path segments, including none
- ``*`` matches any run of characters except ``/``
- ``?`` matches exactly one character
- everything else matches literally

Matches are anchored to the whole path.
"""

import re
from functools import lru_cache


@lru_cache(maxsize=256)
def glob_to_regex(pattern: str) -> re.Pattern:
    """Compile a glob pattern into an anchored regular expression."""
    parts: list[str] = []
    i = 0
    while i < len(pattern):
        if pattern.startswith("**", i):
            i += 2
            if pattern.startswith("/", i):
                # "**/" may also match nothing, so "**/x" matches "x"
                parts.append("(?:.*/)?")
                i += 1
            else:
                parts.append(".*")
            continue

        char = pattern[i]
        if char == "*":
            parts.append("[^/]*")
        elif char == "?":
            parts.append(".")
        else:
            parts.append(re.escape(char))
        i += 1

    return re.compile("".join(parts), re.DOTALL)


def matches_pattern(path: str, pattern: str) -> bool:
    """Check whether a path matches a glob pattern."""
    return glob_to_regex(pattern).fullmatch(path) is not None


def matches_any(path: str, patterns: list[str]) -> bool:
    """Check whether a path matches at least one of the patterns."""
    return any(matches_pattern(path, pattern) for pattern in patterns)
