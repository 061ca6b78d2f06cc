"""Review ledger."""

from diff_dragon.services.ledger.models import ReviewRecord
from diff_dragon.services.ledger.service import ReviewLedger

__all__ = ["ReviewLedger", "ReviewRecord"]
