"""Stage 3 — Configure.

Writes ``node_config.json`` into the node home and creates the block
directory. Re-running with the same inputs yields the same file.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

from valwizard.stages.base import BaseStage

if TYPE_CHECKING:
    from valwizard.core.context import OnboardingContext


class ConfigureStage(BaseStage):
    """Stage 3: initialize the node application config."""

    completion_marker: ClassVar[str] = "Application configs initialized"

    @property
    def stage_id(self) -> str:
        return "s3_configure"

    @property
    def display_name(self) -> str:
        return "Configure"

    def execute(self, context: OnboardingContext) -> dict[str, Any]:
        request = context.request
        settings = context.settings
        credentials = context.require_credentials()

        config = context.collaborators.init_app_config(
            credentials.auth_key,
            credentials.account,
            context.upstream_peer,
            request.home_path,
            request.epoch,
            request.waypoint,
            request.source_path,
            ip=request.ip,
            chain_id=request.resolve_chain_id(settings),
            settings=settings,
        )
        context.node_config = config
        return {
            "node_home": str(config.node_home),
            "config_path": str(config.config_path),
            "chain_id": config.chain_info.chain_id,
        }
