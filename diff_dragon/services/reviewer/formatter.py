"""Markdown and check-run rendering for review output."""

from diff_dragon.services.reviewer.schemas import AnalysisResult, InlineComment
from diff_dragon.services.reviewer.state import ReviewStage

HEADER = "## 🐉 Diff Dragon Review"

_PROGRESS = {
    ReviewStage.LOADING: ("⏳", "Loading changed files..."),
    ReviewStage.ANALYZING: ("🔍", "Analyzing changes..."),
    ReviewStage.REVIEWING: ("✍️", "Posting review comments..."),
}

_STEPS = [ReviewStage.LOADING, ReviewStage.ANALYZING, ReviewStage.REVIEWING]


def render_progress(stage: ReviewStage) -> str:
    """Render the placeholder comment for an in-flight review."""
    emoji, label = _PROGRESS[stage]
    current = _STEPS.index(stage)

    lines = [HEADER, "", f"{emoji} {label}", ""]
    for index, step in enumerate(_STEPS):
        mark = "x" if index < current else " "
        lines.append(f"- [{mark}] {step.value.capitalize()}")
    return "\n".join(lines)


def render_review(analysis: AnalysisResult, files_reviewed: int, comments_attempted: int) -> str:
    """Render the final summary comment.

    The summary is posted alongside the inline comments, so the footer
    counts comments attempted rather than comments that landed.
    """
    lines = [HEADER, "", "**PR Summary:**", analysis.summary.strip() or "_No summary provided._"]

    if analysis.suggestions:
        lines += ["", "**Suggestions:**"]
        lines += [f"- {suggestion}" for suggestion in analysis.suggestions]

    if analysis.release_notes:
        lines += ["", "**Release Notes:**", analysis.release_notes.strip()]

    lines += [
        "",
        "---",
        f"📄 **{files_reviewed}** files reviewed | 💬 **{comments_attempted}** inline comments attempted",
    ]
    return "\n".join(lines)


def render_failure(error: BaseException) -> str:
    """Render the failure notice. Only the error type is shown."""
    return "\n".join(
        [
            HEADER,
            "",
            "❌ **Review failed.**",
            "",
            f"The automated review could not be completed (`{type(error).__name__}`). "
            "Push a new commit or redeliver the webhook to retry.",
        ]
    )


def build_check_run_output(
    analysis: AnalysisResult,
    comments: list[InlineComment],
) -> tuple[str, str, str | None]:
    """Build (title, summary, text) for a completed check run.

    ``comments`` are the validated comments, the same ones annotated.
    """
    count = len(comments)
    title = "Review completed" if not count else f"Review completed with {count} comments"

    text = None
    if analysis.suggestions:
        text = "### Suggestions\n" + "\n".join(f"- {s}" for s in analysis.suggestions)

    return title, analysis.summary or "No summary provided.", text


def build_annotations(comments: list[InlineComment]) -> list[dict]:
    """Convert inline comments into check-run annotations."""
    return [
        {
            "path": comment.path,
            "start_line": comment.line,
            "end_line": comment.line,
            "annotation_level": "notice",
            "message": comment.body,
        }
        for comment in comments
    ]
