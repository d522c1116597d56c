"""Abstract base stage with enforced lifecycle.

Every concrete stage inherits from BaseStage and implements ``execute()``
(and, for optional stages, ``is_applicable()``). The ``run_stage()`` wrapper
is **not overridable** — it enforces the canonical ordering:

    execute -> compute_output_hash -> record

and turns any failure into a ``StageExecutionError`` that names the stage
and chains the original cause.
"""

from __future__ import annotations

import abc
import logging
from typing import TYPE_CHECKING, Any, ClassVar, final

from valwizard.core.hasher import compute_output_hash

if TYPE_CHECKING:
    from valwizard.core.context import OnboardingContext

logger = logging.getLogger(__name__)


class StageExecutionError(RuntimeError):
    """Raised when a stage's execute() method fails."""

    def __init__(self, stage_id: str, cause: BaseException) -> None:
        super().__init__(f"Stage {stage_id} failed: {cause}")
        self.stage_id = stage_id
        self.cause = cause


class BaseStage(abc.ABC):
    """Abstract base for all onboarding stages.

    Subclasses **must** implement:
        * ``stage_id``   — unique identifier (e.g. ``"s3_configure"``).
        * ``display_name`` — human-readable name for progress output.
        * ``execute(context)`` — the stage's work.

    Subclasses **may** override:
        * ``completion_marker`` — line printed once the stage passes.
        * ``is_applicable(context)`` — return ``False`` to have the
          orchestrator record the stage as SKIPPED.

    Subclasses **must not** override ``run_stage()``.
    """

    completion_marker: ClassVar[str] = ""

    @property
    @abc.abstractmethod
    def stage_id(self) -> str:
        """Unique stage identifier (e.g. ``'s1_credentials'``)."""
        ...

    @property
    @abc.abstractmethod
    def display_name(self) -> str:
        """Human-readable display name."""
        ...

    def is_applicable(self, context: OnboardingContext) -> bool:
        return True

    @abc.abstractmethod
    def execute(self, context: OnboardingContext) -> dict[str, Any]:
        """Do the stage's work, updating *context* for later stages.

        Returns a JSON-serializable summary of what the stage produced.
        """
        ...

    # ------------------------------------------------------------------
    # Lifecycle (not overridable)
    # ------------------------------------------------------------------

    @final
    def run_stage(self, context: OnboardingContext) -> dict[str, Any]:
        """Execute the stage and record its result.  **Do not override.**

        Returns the result dict from ``execute()`` augmented with an
        ``_output_hash`` key.
        """
        logger.info("%s [%s] started", self.display_name, self.stage_id)
        try:
            result = self.execute(context)
        except Exception as exc:
            logger.error(
                "%s [%s] execution failed: %s",
                self.display_name,
                self.stage_id,
                exc,
            )
            raise StageExecutionError(self.stage_id, exc) from exc

        hashable = {k: v for k, v in result.items() if not k.startswith("_")}
        output_hash = compute_output_hash(self.stage_id, hashable)
        result["_output_hash"] = output_hash
        context.stage_results[self.stage_id] = result

        logger.info(
            "%s [%s] passed — output=%s",
            self.display_name,
            self.stage_id,
            output_hash[:12],
        )
        return result

    def __repr__(self) -> str:
        return f"<{type(self).__name__} stage_id={self.stage_id!r}>"
