"""Tests for the review ledger."""

from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import create_async_engine

from diff_dragon.core.exceptions import DuplicateReviewError
from diff_dragon.services.ledger.service import ReviewLedger

SHA = "f" * 40


class TestReviewLedger:
    @pytest.mark.asyncio
    async def test_empty_ledger_has_nothing(self, ledger):
        assert await ledger.has("acme", "widgets", 1, SHA) is False

    @pytest.mark.asyncio
    async def test_record_then_has(self, ledger):
        await ledger.record("acme", "widgets", 1, SHA, installation_id=42)

        assert await ledger.has("acme", "widgets", 1, SHA) is True

    @pytest.mark.asyncio
    async def test_key_components_are_isolated(self, ledger):
        await ledger.record("acme", "widgets", 1, SHA, installation_id=42)

        assert await ledger.has("acme", "widgets", 1, "e" * 40) is False
        assert await ledger.has("acme", "widgets", 2, SHA) is False
        assert await ledger.has("acme", "gadgets", 1, SHA) is False
        assert await ledger.has("other", "widgets", 1, SHA) is False

    @pytest.mark.asyncio
    async def test_duplicate_record_raises_distinct_error(self, ledger):
        await ledger.record("acme", "widgets", 1, SHA, installation_id=42)

        with pytest.raises(DuplicateReviewError) as exc_info:
            await ledger.record("acme", "widgets", 1, SHA, installation_id=43)

        assert exc_info.value.pr_number == 1
        assert exc_info.value.commit_sha == SHA

    @pytest.mark.asyncio
    async def test_ledger_usable_after_duplicate(self, ledger):
        await ledger.record("acme", "widgets", 1, SHA, installation_id=42)
        with pytest.raises(DuplicateReviewError):
            await ledger.record("acme", "widgets", 1, SHA, installation_id=42)

        await ledger.record("acme", "widgets", 2, SHA, installation_id=42)
        assert await ledger.has("acme", "widgets", 2, SHA) is True

    @pytest.mark.asyncio
    async def test_records_persist_across_instances(self, tmp_path):
        url = f"sqlite+aiosqlite:///{tmp_path / 'persist.db'}"
        first = ReviewLedger(url)
        await first.initialize()
        await first.record("acme", "widgets", 1, SHA, installation_id=42)
        await first.close()

        second = ReviewLedger(url)
        await second.initialize()
        try:
            assert await second.has("acme", "widgets", 1, SHA) is True
        finally:
            await second.close()

    @pytest.mark.asyncio
    async def test_accepts_existing_engine(self, tmp_path):
        engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'engine.db'}")
        ledger = ReviewLedger(engine=engine)
        await ledger.initialize()
        try:
            assert await ledger.has("acme", "widgets", 1, SHA) is False
        finally:
            await ledger.close()

    def test_requires_url_or_engine(self):
        with pytest.raises(ValueError):
            ReviewLedger()

    @pytest.mark.asyncio
    async def test_other_integrity_errors_propagate(self, ledger, monkeypatch):
        """An integrity error for a key that is not recorded is not a duplicate."""
        monkeypatch.setattr(
            "sqlalchemy.ext.asyncio.AsyncSession.commit",
            AsyncMock(side_effect=IntegrityError("INSERT", {}, Exception("NOT NULL"))),
        )

        with pytest.raises(IntegrityError):
            await ledger.record("acme", "widgets", 9, SHA, installation_id=42)
