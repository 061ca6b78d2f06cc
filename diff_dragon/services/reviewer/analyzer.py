"""LLM-backed analysis engine for pull request diffs."""

from typing import Callable

from langchain_core.messages import HumanMessage, SystemMessage
from langchain_core.runnables import Runnable

from diff_dragon.config import settings
from diff_dragon.core.llm import get_structured_llm
from diff_dragon.core.logging import get_logger
from diff_dragon.core.prompts import render_review_request_prompt, render_review_system_prompt
from diff_dragon.schemas.review import PullRequestReview
from diff_dragon.services.github.schemas import ChangedFile
from diff_dragon.services.policy.schemas import Policy
from diff_dragon.services.reviewer.patch_parser import count_diff_lines
from diff_dragon.services.reviewer.schemas import AnalysisResult, InlineComment

logger = get_logger("reviewer.analyzer")


class ReviewAnalyzer:
    """Turns a set of file diffs and a policy into a structured review."""

    def __init__(
        self,
        model: str | None = None,
        llm_factory: Callable[..., Runnable] = get_structured_llm,
    ) -> None:
        self._model = model or settings.review_model
        self._llm_factory = llm_factory

    async def analyze(self, files: list[ChangedFile], policy: Policy) -> AnalysisResult:
        max_diff_lines = policy.ai.max_diff_lines
        if max_diff_lines is not None:
            total = count_diff_lines(files)
            if total > max_diff_lines:
                logger.warning(f"Diff has {total} lines, over the limit of {max_diff_lines}; skipping analysis")
                return AnalysisResult(
                    summary=(
                        f"Automated review skipped: this pull request changes {total} lines, "
                        f"more than the configured limit of {max_diff_lines} (`ai.maxDiffLines`)."
                    ),
                )

        reviewable = [f for f in files if f.patch]
        if not reviewable:
            logger.info("No files with patches to analyze")
            return AnalysisResult(summary="No textual changes to review (binary or rename-only files).")

        system_prompt = render_review_system_prompt(
            focus_areas=[area.value for area in policy.ai.focus_areas],
            strictness=policy.ai.strictness.value,
            custom_instructions=policy.ai.custom_instructions,
        )
        request_prompt = render_review_request_prompt(
            [{"filename": f.filename, "status": f.status, "patch": f.patch} for f in reviewable]
        )

        llm = self._llm_factory(PullRequestReview, model=self._model)
        logger.info(f"Analyzing {len(reviewable)} files with {self._model}")

        review = await llm.ainvoke(
            [
                SystemMessage(content=system_prompt),
                HumanMessage(content=request_prompt),
            ]
        )
        if review is None:
            raise ValueError("Model returned no structured review")

        return AnalysisResult(
            summary=review.summary,
            suggestions=review.suggestions,
            release_notes=review.release_notes,
            inline_comments=[
                InlineComment(path=c.path, line=c.line, body=c.body) for c in review.comments
            ],
        )
