"""Straight-line stage state machine.

Enforces:
- Valid state transitions only (VALID_TRANSITIONS table)
- Strict ordering: a stage starts (or is skipped) only once every earlier
  stage is PASSED or SKIPPED
- Halt on failure: after any FAILED stage nothing else may start
- Every transition recorded in an in-memory transition log
"""

from __future__ import annotations

from collections.abc import Sequence

from valwizard.models.stages import (
    COMPLETED_STATES,
    VALID_TRANSITIONS,
    StageState,
    StageTransition,
)


class InvalidTransitionError(RuntimeError):
    """Raised when a requested state transition is not valid."""


class PipelineHaltedError(RuntimeError):
    """Raised when a stage is started after an earlier stage failed."""


class PipelineStateMachine:
    """Tracks stage states for one onboarding run.

    Parameters
    ----------
    stage_ids:
        Stage identifiers in execution order.
    """

    def __init__(self, stage_ids: Sequence[str]) -> None:
        if len(set(stage_ids)) != len(stage_ids):
            raise ValueError(f"Duplicate stage ids in {list(stage_ids)}")
        self._order: list[str] = list(stage_ids)
        self._states: dict[str, StageState] = {
            sid: StageState.NOT_STARTED for sid in self._order
        }
        self._log: list[StageTransition] = []

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def stage_ids(self) -> list[str]:
        return list(self._order)

    @property
    def transitions(self) -> list[StageTransition]:
        return list(self._log)

    @property
    def halted(self) -> bool:
        return StageState.FAILED in self._states.values()

    @property
    def is_complete(self) -> bool:
        return all(state in COMPLETED_STATES for state in self._states.values())

    def get_current_state(self, stage_id: str) -> StageState:
        try:
            return self._states[stage_id]
        except KeyError:
            raise KeyError(f"Unknown stage_id {stage_id!r}") from None

    def get_all_states(self) -> dict[str, StageState]:
        return dict(self._states)

    def can_start(self, stage_id: str) -> tuple[bool, list[str]]:
        """Check if a stage can leave NOT_STARTED.

        Returns (can_start, blocking_reasons).
        """
        current = self.get_current_state(stage_id)
        if current != StageState.NOT_STARTED:
            return False, [f"{stage_id} is currently {current.value}"]
        reasons = [
            f"{sid} is {self._states[sid].value}"
            for sid in self._order[: self._order.index(stage_id)]
            if self._states[sid] not in COMPLETED_STATES
        ]
        return not reasons, reasons

    # ------------------------------------------------------------------
    # Transition logic
    # ------------------------------------------------------------------

    def transition(
        self,
        stage_id: str,
        target_state: StageState,
        *,
        reason: str | None = None,
    ) -> StageTransition:
        """Move *stage_id* to *target_state* and record the transition."""
        current = self.get_current_state(stage_id)

        allowed = VALID_TRANSITIONS.get(current, set())
        if target_state not in allowed:
            raise InvalidTransitionError(
                f"Cannot transition {stage_id} from {current.value} to {target_state.value}. "
                f"Allowed: {sorted(s.value for s in allowed)}"
            )

        if current == StageState.NOT_STARTED:
            if self.halted:
                raise PipelineHaltedError(
                    f"Cannot start {stage_id}: the pipeline halted on an earlier failure"
                )
            ok, reasons = self.can_start(stage_id)
            if not ok:
                raise InvalidTransitionError(
                    f"Cannot start {stage_id}: earlier stages incomplete ({'; '.join(reasons)})"
                )

        record = StageTransition(
            stage_id=stage_id,
            from_state=current,
            to_state=target_state,
            reason=reason,
        )
        self._states[stage_id] = target_state
        self._log.append(record)
        return record
