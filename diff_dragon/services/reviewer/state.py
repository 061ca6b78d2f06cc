"""Per-delivery review run state."""

from dataclasses import dataclass, field
from enum import Enum

from diff_dragon.core.logging import get_logger

logger = get_logger("reviewer.state")


class LifecycleState(str, Enum):
    """Pipeline states for one webhook delivery."""

    RECEIVED = "received"
    VERIFIED = "verified"
    DEDUPED = "deduped"
    CONFIGURED = "configured"
    FILTERED = "filtered"
    SKIPPED = "skipped"
    ANALYZING = "analyzing"
    PUBLISHING = "publishing"
    COMPLETED = "completed"
    FAILED = "failed"


class ReviewStage(str, Enum):
    """Progress shown to the PR author in the placeholder comment."""

    LOADING = "loading"
    ANALYZING = "analyzing"
    REVIEWING = "reviewing"


@dataclass
class ReviewRunState:
    """Transient state of one pipeline invocation. Never persisted."""

    state: LifecycleState = LifecycleState.RECEIVED
    key: str = ""
    progress_comment_id: int | None = None
    check_run_id: int | None = None
    history: list[LifecycleState] = field(default_factory=list)

    def advance(self, state: LifecycleState) -> None:
        self.history.append(self.state)
        self.state = state
        logger.debug(f"[{self.key or 'unknown'}] {self.history[-1].value} -> {state.value}")
