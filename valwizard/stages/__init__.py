"""Onboarding stages — registry mapping stage_id to stage class.

Usage::

    from valwizard.stages import STAGE_REGISTRY, get_stage

    stage = get_stage("s6_keys")
    result = stage.run_stage(context)

    # The full pipeline, in execution order:
    stages = default_stages()
"""

from __future__ import annotations

from valwizard.stages.base import BaseStage, StageExecutionError
from valwizard.stages.s1_credentials import CredentialsStage
from valwizard.stages.s2_upstream import UpstreamStage, resolve_upstream_peer
from valwizard.stages.s3_configure import ConfigureStage
from valwizard.stages.s4_template import TemplateStage
from valwizard.stages.s5_autopay import AutopayStage
from valwizard.stages.s6_keys import KeysStage
from valwizard.stages.s7_genesis import GenesisStage
from valwizard.stages.s8_mining import MiningStage
from valwizard.stages.s9_manifest import ManifestStage

# ---------------------------------------------------------------------------
# Stage registry: stage_id -> stage class
# ---------------------------------------------------------------------------

STAGE_REGISTRY: dict[str, type[BaseStage]] = {
    "s1_credentials": CredentialsStage,
    "s2_upstream": UpstreamStage,
    "s3_configure": ConfigureStage,
    "s4_template": TemplateStage,
    "s5_autopay": AutopayStage,
    "s6_keys": KeysStage,
    "s7_genesis": GenesisStage,
    "s8_mining": MiningStage,
    "s9_manifest": ManifestStage,
}

# Execution order. The manifest is always last.
STAGE_ORDER: list[str] = list(STAGE_REGISTRY)


def get_stage(stage_id: str) -> BaseStage:
    """Instantiate and return a stage by its ``stage_id``.

    Raises ``KeyError`` if the stage_id is not registered.
    """
    try:
        cls = STAGE_REGISTRY[stage_id]
    except KeyError:
        raise KeyError(
            f"Unknown stage_id {stage_id!r}. "
            f"Registered stages: {sorted(STAGE_REGISTRY.keys())}"
        ) from None
    return cls()


def default_stages() -> list[BaseStage]:
    return [get_stage(sid) for sid in STAGE_ORDER]


__all__ = [
    # Base
    "BaseStage",
    "StageExecutionError",
    # Registry
    "STAGE_REGISTRY",
    "STAGE_ORDER",
    "get_stage",
    "default_stages",
    # Concrete stages
    "CredentialsStage",
    "UpstreamStage",
    "ConfigureStage",
    "TemplateStage",
    "AutopayStage",
    "KeysStage",
    "GenesisStage",
    "MiningStage",
    "ManifestStage",
    # Helpers
    "resolve_upstream_peer",
]
