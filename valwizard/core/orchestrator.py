"""Onboarding orchestrator — runs the stages of one wizard invocation.

The orchestrator wires the request, settings and collaborators into an
``OnboardingContext`` and walks the stages in order through the
``PipelineStateMachine``. Inapplicable stages are recorded as SKIPPED. The
first failure halts the run; nothing after it executes.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Any

from valwizard.config import WizardSettings
from valwizard.core.context import Collaborators, OnboardingContext
from valwizard.core.stage_machine import PipelineStateMachine
from valwizard.models.request import OnboardingRequest
from valwizard.models.stages import StageState, StageTransition
from valwizard.monitor.renderer import ProgressRenderer
from valwizard.stages import BaseStage, StageExecutionError, default_stages

logger = logging.getLogger(__name__)


class OnboardingOrchestrator:
    """Drives one onboarding run from credentials to account manifest.

    Parameters
    ----------
    request:
        The operator's validated options.
    settings:
        Environment-level defaults. A fresh ``WizardSettings()`` if omitted.
    collaborators:
        External operations. Real implementations if omitted.
    stages:
        Stage instances in execution order. ``default_stages()`` if omitted.
    reporter:
        Optional progress renderer notified as stages finish.
    run_id:
        Identifier for log correlation. Generated if omitted.
    """

    def __init__(
        self,
        request: OnboardingRequest,
        *,
        settings: WizardSettings | None = None,
        collaborators: Collaborators | None = None,
        stages: Sequence[BaseStage] | None = None,
        reporter: ProgressRenderer | None = None,
        run_id: str | None = None,
    ) -> None:
        self.settings = settings or WizardSettings()
        self.stages: list[BaseStage] = list(stages) if stages is not None else default_stages()
        self.reporter = reporter

        ts = datetime.now(timezone.utc).strftime("%Y%m%d-%H%M%S")
        self.run_id = run_id or f"vw-{ts}-{uuid.uuid4().hex[:3]}"

        self.context = OnboardingContext(
            request=request,
            settings=self.settings,
            collaborators=collaborators or Collaborators(),
        )
        self.machine = PipelineStateMachine([stage.stage_id for stage in self.stages])

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def run(self) -> OnboardingContext:
        """Execute every stage in order.

        Returns the populated context on success. Raises
        ``StageExecutionError`` (naming the stage, chaining the cause) on
        the first failure; the remaining stages stay NOT_STARTED.
        """
        logger.info("Onboarding run %s started with %d stages", self.run_id, len(self.stages))

        for stage in self.stages:
            if not stage.is_applicable(self.context):
                self.machine.transition(stage.stage_id, StageState.SKIPPED, reason="not applicable")
                logger.info("%s [%s] skipped", stage.display_name, stage.stage_id)
                if self.reporter is not None:
                    self.reporter.stage_skipped(stage)
                continue

            self.machine.transition(stage.stage_id, StageState.RUNNING)
            try:
                result = stage.run_stage(self.context)
            except StageExecutionError as exc:
                self.machine.transition(stage.stage_id, StageState.FAILED, reason=str(exc.cause))
                logger.error("Onboarding run %s halted at %s", self.run_id, stage.stage_id)
                if self.reporter is not None:
                    self.reporter.stage_failed(stage, exc)
                raise

            self.machine.transition(stage.stage_id, StageState.PASSED)
            if self.reporter is not None:
                self.reporter.stage_passed(stage, result)

        logger.info("Onboarding run %s complete", self.run_id)
        return self.context

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def get_states(self) -> dict[str, StageState]:
        return self.machine.get_all_states()

    def get_transitions(self) -> list[StageTransition]:
        return self.machine.transitions

    def get_results(self) -> dict[str, dict[str, Any]]:
        return dict(self.context.stage_results)
