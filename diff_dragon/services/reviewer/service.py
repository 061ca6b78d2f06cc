"""Reviewer service - orchestration layer.

One call to ``ReviewPipeline.handle`` processes one webhook delivery:

    verify signature -> ledger check -> load policy -> filter files
        -> analyze -> publish (inline | summary | check run) -> ledger write

Everything up to filtering runs strictly in sequence. Publication channels
run concurrently and are joined before the ledger write. A failure during
analysis or summary publication marks any progress artifacts as failed and
is re-raised; no ledger entry is written, so a redelivery can retry.
"""

import asyncio
import json
from typing import Awaitable, Callable

from pydantic import ValidationError

from diff_dragon.config import settings
from diff_dragon.core.exceptions import DuplicateReviewError
from diff_dragon.core.logging import get_logger
from diff_dragon.core.security import verify_signature
from diff_dragon.services.github.client import GitHubClient, authenticate
from diff_dragon.services.github.schemas import ChangedFile, InboundEvent
from diff_dragon.services.ledger.service import ReviewLedger
from diff_dragon.services.policy.schemas import Policy
from diff_dragon.services.policy.service import resolve_policy, should_review, should_review_file
from diff_dragon.services.reviewer.analyzer import ReviewAnalyzer
from diff_dragon.services.reviewer.patch_parser import filter_comments_by_valid_lines
from diff_dragon.services.reviewer.publisher import ReviewPublisher
from diff_dragon.services.reviewer.schemas import ReviewStatus
from diff_dragon.services.reviewer.state import LifecycleState, ReviewRunState, ReviewStage

logger = get_logger("reviewer.service")

Authenticator = Callable[[int, str, str], Awaitable[GitHubClient]]


class ReviewPipeline:
    """Review lifecycle controller for pull request webhook deliveries."""

    def __init__(
        self,
        ledger: ReviewLedger,
        analyzer: ReviewAnalyzer,
        authenticator: Authenticator = authenticate,
        webhook_secret: str | None = None,
        check_run_name: str | None = None,
        analysis_timeout: float | None = None,
    ) -> None:
        self._ledger = ledger
        self._analyzer = analyzer
        self._authenticate = authenticator
        self._webhook_secret = webhook_secret if webhook_secret is not None else settings.github_webhook_secret
        self._check_run_name = check_run_name or settings.check_run_name
        self._analysis_timeout = analysis_timeout or settings.analysis_timeout

    async def handle(self, raw_body: bytes, signature: str | None) -> ReviewStatus:
        """Process one webhook delivery and return its status.

        Raises:
            Exception: Any error from authentication, file listing, analysis
                or summary publication. Progress artifacts are marked failed first.
        """
        run = ReviewRunState()
        logger.info("Received webhook event")

        if not self._webhook_secret:
            logger.error("No GitHub webhook secret configured, rejecting delivery")
        if not verify_signature(raw_body, signature, self._webhook_secret):
            logger.error("Invalid webhook signature")
            return ReviewStatus.INVALID_SIGNATURE
        run.advance(LifecycleState.VERIFIED)

        event_or_status = self._parse_event(raw_body)
        if isinstance(event_or_status, ReviewStatus):
            return event_or_status
        event = event_or_status
        run.key = event.key
        owner, repo = event.repository.owner, event.repository.name
        pr_number, head_sha = event.pull_request.number, event.pull_request.head_sha

        logger.info(f"Processing action: {event.action} for {event.key}")

        if await self._ledger.has(owner, repo, pr_number, head_sha):
            logger.info(f"Commit already reviewed: {event.key}")
            return ReviewStatus.ALREADY_REVIEWED
        run.advance(LifecycleState.DEDUPED)

        client = await self._authenticate(event.installation_id, owner, repo)
        policy = await resolve_policy(client)
        run.advance(LifecycleState.CONFIGURED)

        if not should_review(policy, event.action):
            logger.info(f"Skipping review: action '{event.action}' not in reviewOn list or bot disabled")
            return ReviewStatus.IGNORED_BY_POLICY

        logger.info("Fetching PR files...")
        files = await client.list_pr_files(pr_number)
        files_to_review = [f for f in files if should_review_file(policy, f.filename)]
        run.advance(LifecycleState.FILTERED)
        logger.info(f"Files to review after filtering: {len(files_to_review)}/{len(files)}")

        if not files_to_review:
            run.advance(LifecycleState.SKIPPED)
            return ReviewStatus.NO_FILES

        await self._review(client, event, policy, files_to_review, run)

        try:
            await self._ledger.record(owner, repo, pr_number, head_sha, event.installation_id)
        except DuplicateReviewError:
            logger.warning(f"Concurrent delivery already recorded {event.key}")
            return ReviewStatus.ALREADY_REVIEWED

        run.advance(LifecycleState.COMPLETED)
        logger.info(f"PR review completed successfully: {event.key}")
        return ReviewStatus.OK

    def _parse_event(self, raw_body: bytes) -> InboundEvent | ReviewStatus:
        try:
            payload = json.loads(raw_body)
        except ValueError:
            logger.warning("Webhook body is not valid JSON")
            return ReviewStatus.IGNORED

        if not isinstance(payload, dict) or not payload.get("pull_request"):
            logger.warning("No pull_request object in payload")
            return ReviewStatus.IGNORED

        if not (payload.get("installation") or {}).get("id"):
            logger.error("No installation ID found in payload")
            return ReviewStatus.NO_INSTALLATION

        try:
            return InboundEvent.from_payload(payload)
        except ValidationError as e:
            logger.warning(f"Malformed pull_request payload: {e.error_count()} errors")
            return ReviewStatus.IGNORED

    async def _review(
        self,
        client: GitHubClient,
        event: InboundEvent,
        policy: Policy,
        files: list[ChangedFile],
        run: ReviewRunState,
    ) -> None:
        publisher = ReviewPublisher(client, event, run, self._check_run_name)

        if policy.comments.summary:
            await publisher.open_progress_comment()
        await publisher.open_check_run()

        run.advance(LifecycleState.ANALYZING)
        try:
            await publisher.advance(ReviewStage.ANALYZING)
            logger.info("Starting AI analysis...")
            analysis = await asyncio.wait_for(
                self._analyzer.analyze(files, policy),
                timeout=self._analysis_timeout,
            )
            logger.info("AI analysis completed")

            run.advance(LifecycleState.PUBLISHING)
            await publisher.advance(ReviewStage.REVIEWING)

            comments, dropped = filter_comments_by_valid_lines(analysis.inline_comments, files)
            if dropped:
                logger.warning(f"Dropped {len(dropped)} comments with line numbers outside the diff")

            await publisher.publish(analysis, comments, policy, files_reviewed=len(files))
        except Exception as e:
            run.advance(LifecycleState.FAILED)
            logger.opt(exception=e).error(f"Review failed for {event.key}")
            await publisher.publish_failure(e)
            raise
