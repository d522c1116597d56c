"""Stage 5 — Autopay.

Parses the operator's pay instructions and, outside ceremony mode, signs
one transaction per instruction with the owner key.

Outputs:
    instruction_count — number of parsed instructions.
    signed            — whether transactions were produced.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

from valwizard.stages.base import BaseStage

if TYPE_CHECKING:
    from valwizard.core.context import OnboardingContext


class AutopayStage(BaseStage):
    """Stage 5: build the autopay batch."""

    completion_marker: ClassVar[str] = "Autopay batch file signed"

    @property
    def stage_id(self) -> str:
        return "s5_autopay"

    @property
    def display_name(self) -> str:
        return "Autopay"

    def execute(self, context: OnboardingContext) -> dict[str, Any]:
        request = context.request
        config = context.require_config()
        credentials = context.require_credentials()

        batch = context.collaborators.build_autopay_batch(
            request.template_url,
            request.autopay_file,
            config.node_home,
            config,
            credentials.wallet,
            context.settings.is_test,
            request.genesis_ceremony,
        )
        context.autopay = batch
        return {
            "instruction_count": len(batch.instructions),
            "signed": batch.is_signed,
        }
