"""Stage state models — the onboarding pipeline is a straight line."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class StageState(str, Enum):
    """State of a single onboarding stage."""

    NOT_STARTED = "not_started"
    RUNNING = "running"
    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"


# Valid state transitions, enforced by PipelineStateMachine.
# No retries: FAILED, PASSED and SKIPPED are all terminal.
VALID_TRANSITIONS: dict[StageState, set[StageState]] = {
    StageState.NOT_STARTED: {StageState.RUNNING, StageState.SKIPPED},
    StageState.RUNNING: {StageState.PASSED, StageState.FAILED},
    StageState.PASSED: set(),
    StageState.FAILED: set(),
    StageState.SKIPPED: set(),
}

# States that let the next stage start.
COMPLETED_STATES: frozenset[StageState] = frozenset(
    {StageState.PASSED, StageState.SKIPPED}
)


class StageTransition(BaseModel):
    """Records a single state transition for the run's audit trail."""

    model_config = ConfigDict(frozen=True)

    stage_id: str
    from_state: StageState
    to_state: StageState
    reason: str | None = None  # populated on FAILED and SKIPPED
    at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
