"""Prompt templates using Jinja2."""

from pathlib import Path

from jinja2 import Environment, FileSystemLoader

PROMPTS_DIR = Path(__file__).parent
_env = Environment(loader=FileSystemLoader(PROMPTS_DIR), trim_blocks=True, lstrip_blocks=True)


def render_review_system_prompt(
    focus_areas: list[str],
    strictness: str,
    custom_instructions: str | None,
) -> str:
    """Render the system prompt for a pull request review."""
    template = _env.get_template("review_system.jinja2")
    return template.render(
        focus_areas=focus_areas,
        strictness=strictness,
        custom_instructions=custom_instructions,
    )


def render_review_request_prompt(files: list[dict]) -> str:
    """Render the user prompt listing the diffs to review.

    Args:
        files: Dicts with ``filename``, ``status`` and ``patch`` keys
    """
    template = _env.get_template("review_request.jinja2")
    return template.render(files=files)
