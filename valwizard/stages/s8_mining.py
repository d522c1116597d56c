"""Stage 8 — Mining.

Produces the block zero proof. Skipped with ``--skip-mining``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

from valwizard.stages.base import BaseStage

if TYPE_CHECKING:
    from valwizard.core.context import OnboardingContext


class MiningStage(BaseStage):
    """Stage 8: mine the genesis proof."""

    completion_marker: ClassVar[str] = "Genesis proof complete"

    @property
    def stage_id(self) -> str:
        return "s8_mining"

    @property
    def display_name(self) -> str:
        return "Mining"

    def is_applicable(self, context: OnboardingContext) -> bool:
        return not context.request.skip_mining

    def execute(self, context: OnboardingContext) -> dict[str, Any]:
        config = context.require_config()
        path = context.collaborators.mine_genesis_proof(config, settings=context.settings)
        context.block_path = path
        return {"block_path": str(path)}
