"""Review ledger - records which commits have already been reviewed."""

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine

from diff_dragon.core.exceptions import DuplicateReviewError
from diff_dragon.core.logging import get_logger
from diff_dragon.services.ledger.models import Base, ReviewRecord

logger = get_logger("ledger.service")


class ReviewLedger:
    """Idempotency store keyed by (owner, repo, PR number, commit SHA).

    The existence check is an optimization; the unique constraint on the
    table is what keeps a commit from being recorded twice.
    """

    def __init__(self, database_url: str | None = None, engine: AsyncEngine | None = None) -> None:
        if engine is None:
            if not database_url:
                raise ValueError("database_url or engine is required")
            engine = create_async_engine(database_url)
        self._engine = engine
        self._session_factory = async_sessionmaker(engine, expire_on_commit=False)

    async def initialize(self) -> None:
        """Create the ledger schema if it does not exist."""
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Review ledger initialized")

    async def close(self) -> None:
        await self._engine.dispose()
        logger.info("Review ledger closed")

    async def has(self, owner: str, repo: str, pr_number: int, commit_sha: str) -> bool:
        """Check whether a review was already recorded for this commit."""
        stmt = (
            select(ReviewRecord.id)
            .where(
                ReviewRecord.repo_owner == owner,
                ReviewRecord.repo_name == repo,
                ReviewRecord.pr_number == pr_number,
                ReviewRecord.commit_sha == commit_sha,
            )
            .limit(1)
        )
        async with self._session_factory() as session:
            return await session.scalar(stmt) is not None

    async def record(
        self,
        owner: str,
        repo: str,
        pr_number: int,
        commit_sha: str,
        installation_id: int,
    ) -> None:
        """Record a completed review.

        Raises:
            DuplicateReviewError: If this commit is already recorded
        """
        record = ReviewRecord(
            repo_owner=owner,
            repo_name=repo,
            pr_number=pr_number,
            commit_sha=commit_sha,
            installation_id=installation_id,
        )
        async with self._session_factory() as session:
            session.add(record)
            try:
                await session.commit()
            except IntegrityError:
                await session.rollback()
                if await self.has(owner, repo, pr_number, commit_sha):
                    raise DuplicateReviewError(owner, repo, pr_number, commit_sha) from None
                raise

        logger.info(f"Recorded review for {owner}/{repo}#{pr_number}@{commit_sha[:7]}")
