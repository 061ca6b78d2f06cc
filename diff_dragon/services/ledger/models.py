"""Database models for the review ledger."""

from datetime import datetime, timezone

from sqlalchemy import BigInteger, DateTime, Integer, String, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class ReviewRecord(Base):
    """A completed review, one row per reviewed commit."""

    __tablename__ = "reviews"
    __table_args__ = (
        UniqueConstraint(
            "repo_owner",
            "repo_name",
            "pr_number",
            "commit_sha",
            name="uq_reviews_commit",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    repo_owner: Mapped[str] = mapped_column(String(255))
    repo_name: Mapped[str] = mapped_column(String(255))
    pr_number: Mapped[int] = mapped_column(Integer)
    commit_sha: Mapped[str] = mapped_column(String(64))
    installation_id: Mapped[int] = mapped_column(BigInteger)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        return f"<ReviewRecord {self.repo_owner}/{self.repo_name}#{self.pr_number}@{self.commit_sha[:7]}>"
