"""Patch parser for diff budgets and review comment line validation."""

import re

from diff_dragon.services.github.schemas import ChangedFile
from diff_dragon.services.reviewer.schemas import InlineComment

HUNK_HEADER = re.compile(r"^@@ -\d+(?:,\d+)? \+(\d+)(?:,\d+)? @@")


def parse_patch_line_numbers(patch: str | None) -> set[int]:
    """Extract the new-file line numbers a review comment can be placed on.

    GitHub accepts RIGHT-side comments on any line shown in a hunk of the
    new file: added lines and unchanged context lines. Removed lines only
    exist on the LEFT side.

    Args:
        patch: Unified diff patch string

    Returns:
        Set of commentable line numbers in the new file
    """
    valid_lines: set[int] = set()

    if not patch:
        return valid_lines

    current_line = 0

    for line in patch.split("\n"):
        hunk_match = HUNK_HEADER.match(line)
        if hunk_match:
            current_line = int(hunk_match.group(1))
            continue

        # Nothing before the first hunk header is part of the diff
        if current_line == 0:
            continue

        if not line or line.startswith(("-", "\\")):
            continue

        valid_lines.add(current_line)
        current_line += 1

    return valid_lines


def count_diff_lines(files: list[ChangedFile]) -> int:
    """Count added and removed lines across all patches."""
    total = 0
    for file in files:
        if not file.patch:
            continue
        for line in file.patch.split("\n"):
            if line.startswith(("+++", "---")):
                continue
            if line.startswith(("+", "-")):
                total += 1
    return total


def filter_comments_by_valid_lines(
    comments: list[InlineComment],
    files: list[ChangedFile],
) -> tuple[list[InlineComment], list[InlineComment]]:
    """Split comments into those on commentable lines and the rest.

    Order is preserved in both lists.

    Returns:
        Tuple of (valid_comments, invalid_comments)
    """
    valid_lines_by_file = {f.filename: parse_patch_line_numbers(f.patch) for f in files}

    valid = []
    invalid = []

    for comment in comments:
        if comment.line in valid_lines_by_file.get(comment.path, set()):
            valid.append(comment)
        else:
            invalid.append(comment)

    return valid, invalid
