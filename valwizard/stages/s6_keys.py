"""Stage 6 — Validator keys.

Writes the validator's namespaced key material into the local key store.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

from valwizard.stages.base import BaseStage

if TYPE_CHECKING:
    from valwizard.core.context import OnboardingContext


class KeysStage(BaseStage):
    """Stage 6: initialize the validator key store."""

    completion_marker: ClassVar[str] = "Key file written"

    @property
    def stage_id(self) -> str:
        return "s6_keys"

    @property
    def display_name(self) -> str:
        return "Validator Keys"

    def execute(self, context: OnboardingContext) -> dict[str, Any]:
        config = context.require_config()
        credentials = context.require_credentials()

        path = context.collaborators.initialize_validator_keys(
            credentials.wallet,
            config,
            config.chain_info.base_waypoint,
            context.request.genesis_ceremony,
        )
        context.key_store_path = path
        return {"key_store_path": str(path)}
