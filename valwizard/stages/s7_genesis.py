"""Stage 7 — Genesis and node files.

Obtains the genesis blob through exactly one strategy (archive fetch,
bundled test fixture, or a prebuilt file) and writes the validator and
fullnode yaml files that point at it. Skipped in ceremony mode, where no
genesis exists yet.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

from valwizard.core.errors import GenesisSourceError
from valwizard.keys.key_store import operator_namespace
from valwizard.node.genesis import source_genesis
from valwizard.stages.base import BaseStage

if TYPE_CHECKING:
    from valwizard.core.context import OnboardingContext


class GenesisStage(BaseStage):
    """Stage 7: source genesis and write node config files."""

    completion_marker: ClassVar[str] = "Node config files written"

    @property
    def stage_id(self) -> str:
        return "s7_genesis"

    @property
    def display_name(self) -> str:
        return "Genesis & Node Files"

    def is_applicable(self, context: OnboardingContext) -> bool:
        return not context.request.genesis_ceremony

    def execute(self, context: OnboardingContext) -> dict[str, Any]:
        settings = context.settings
        config = context.require_config()
        collaborators = context.collaborators

        source = context.request.genesis_source(settings)
        if source is None:
            raise GenesisSourceError("No genesis source outside ceremony mode")

        genesis_path = source_genesis(
            source,
            config.node_home,
            fetch=collaborators.fetch_genesis_files,
            copy_fixture=collaborators.copy_test_genesis,
            settings=settings,
        )
        files = collaborators.write_node_config_files(
            config.node_home,
            config.chain_info.chain_id,
            source.github_org,
            source.repo,
            operator_namespace(config.profile.auth_key),
            genesis_path,
            False,
            config.chain_info.base_waypoint,
            None,
        )
        context.genesis_path = genesis_path
        context.node_files = list(files)
        return {
            "genesis_source": source.kind.value,
            "genesis_path": str(genesis_path),
            "node_files": [str(p) for p in files],
        }
