"""Publication fan-out - inline comments, summary comment and check run."""

import asyncio

from diff_dragon.core.logging import get_logger
from diff_dragon.services.github.client import GitHubClient
from diff_dragon.services.github.schemas import InboundEvent
from diff_dragon.services.policy.schemas import Policy
from diff_dragon.services.reviewer.formatter import (
    build_annotations,
    build_check_run_output,
    render_failure,
    render_progress,
    render_review,
)
from diff_dragon.services.reviewer.schemas import AnalysisResult, InlineComment
from diff_dragon.services.reviewer.state import ReviewRunState, ReviewStage

logger = get_logger("reviewer.publisher")


class ReviewPublisher:
    """Publishes one review run to GitHub.

    Each channel fails independently. Only the summary channel propagates
    errors, because without it a run has no visible result.
    """

    def __init__(
        self,
        client: GitHubClient,
        event: InboundEvent,
        run: ReviewRunState,
        check_run_name: str,
    ) -> None:
        self._client = client
        self._event = event
        self._run = run
        self._check_run_name = check_run_name

    @property
    def _pr_number(self) -> int:
        return self._event.pull_request.number

    async def open_progress_comment(self) -> None:
        """Create the placeholder comment. On failure the summary is posted fresh later."""
        try:
            self._run.progress_comment_id = await self._client.create_issue_comment(
                self._pr_number,
                render_progress(ReviewStage.LOADING),
            )
        except Exception as e:
            logger.error(f"Failed to create progress comment: {e}")

    async def open_check_run(self) -> None:
        """Create an in-progress check run. On failure the channel stays off for this run."""
        try:
            self._run.check_run_id = await self._client.create_check_run(
                head_sha=self._event.pull_request.head_sha,
                name=self._check_run_name,
                title="Review in progress",
                summary="Analyzing changes...",
            )
        except Exception as e:
            logger.warning(f"Check run unavailable, continuing without it: {e}")

    async def advance(self, stage: ReviewStage) -> None:
        if self._run.progress_comment_id is None:
            return
        try:
            await self._client.update_issue_comment(
                self._pr_number,
                self._run.progress_comment_id,
                render_progress(stage),
            )
        except Exception as e:
            logger.warning(f"Failed to update progress comment to {stage.value}: {e}")

    async def post_inline_comments(self, comments: list[InlineComment]) -> int:
        """Post comments one at a time, skipping any that fail."""
        posted = 0
        for comment in comments:
            try:
                await self._client.create_review_comment(
                    self._pr_number,
                    self._event.pull_request.head_sha,
                    comment.path,
                    comment.line,
                    comment.body,
                )
                posted += 1
            except Exception as e:
                logger.error(f"Error posting inline comment on {comment.path}:{comment.line}: {e}")

        logger.info(f"Posted {posted}/{len(comments)} inline comments")
        return posted

    async def publish_summary(self, body: str) -> None:
        """Finalize the placeholder, or post a fresh comment if there is none."""
        if self._run.progress_comment_id is not None:
            await self._client.update_issue_comment(self._pr_number, self._run.progress_comment_id, body)
        else:
            self._run.progress_comment_id = await self._client.create_issue_comment(self._pr_number, body)
        logger.info("Summary comment published")

    async def complete_check_run(self, analysis: AnalysisResult, comments: list[InlineComment]) -> None:
        if self._run.check_run_id is None:
            return
        title, summary, text = build_check_run_output(analysis, comments)
        try:
            await self._client.update_check_run(
                self._run.check_run_id,
                conclusion="success",
                title=title,
                summary=summary,
                text=text,
                annotations=build_annotations(comments),
            )
        except Exception as e:
            logger.error(f"Failed to complete check run: {e}")

    async def publish(
        self,
        analysis: AnalysisResult,
        comments: list[InlineComment],
        policy: Policy,
        files_reviewed: int,
    ) -> None:
        """Fan the review out to all enabled channels and wait for all of them.

        Raises:
            Exception: Whatever the summary channel raised, after every channel settled
        """
        to_post = comments[: policy.comments.max_inline_comments] if policy.comments.inline else []

        channels = {}
        if to_post:
            channels["inline"] = self.post_inline_comments(to_post)
        if policy.comments.summary:
            channels["summary"] = self.publish_summary(render_review(analysis, files_reviewed, len(to_post)))
        channels["check_run"] = self.complete_check_run(analysis, comments)

        results = dict(zip(channels, await asyncio.gather(*channels.values(), return_exceptions=True)))

        for name, result in results.items():
            if isinstance(result, BaseException) and name != "summary":
                logger.error(f"Channel {name} failed: {result}")

        summary_result = results.get("summary")
        if isinstance(summary_result, BaseException):
            raise summary_result

    async def publish_failure(self, error: BaseException) -> None:
        """Mark the placeholder and check run as failed. Never raises."""
        if self._run.progress_comment_id is not None:
            try:
                await self._client.update_issue_comment(
                    self._pr_number,
                    self._run.progress_comment_id,
                    render_failure(error),
                )
            except Exception as e:
                logger.error(f"Failed to post failure notice: {e}")

        if self._run.check_run_id is not None:
            try:
                await self._client.update_check_run(
                    self._run.check_run_id,
                    conclusion="failure",
                    title="Review failed",
                    summary=f"The automated review could not be completed ({type(error).__name__}).",
                )
            except Exception as e:
                logger.error(f"Failed to mark check run as failed: {e}")
