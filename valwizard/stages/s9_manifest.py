"""Stage 9 — Account manifest.

Assembles ``account.json`` from the wallet, config, proof and autopay
batch. This is the run's only irreversible output; it is written in one
atomic step as the final stage.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

from valwizard.stages.base import BaseStage

if TYPE_CHECKING:
    from valwizard.core.context import OnboardingContext


class ManifestStage(BaseStage):
    """Stage 9: write the account manifest."""

    completion_marker: ClassVar[str] = "Account manifest written"

    @property
    def stage_id(self) -> str:
        return "s9_manifest"

    @property
    def display_name(self) -> str:
        return "Account Manifest"

    def execute(self, context: OnboardingContext) -> dict[str, Any]:
        request = context.request
        config = context.require_config()
        credentials = context.require_credentials()
        batch = context.require_autopay()

        path = context.collaborators.write_account_manifest(
            request.output_path,
            credentials.wallet,
            config,
            batch.instructions,
            batch.signed,
            require_proof=not request.skip_mining,
            validator_port=context.settings.validator_network_port,
            fullnode_port=context.settings.fullnode_network_port,
        )
        context.manifest_path = path
        return {"manifest_path": str(path)}
