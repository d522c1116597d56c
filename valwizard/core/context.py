"""Run context and collaborator bundle shared by every onboarding stage."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict

from valwizard.autopay.batch import build_autopay_batch
from valwizard.bridge.upstream import fetch_template
from valwizard.config import WizardSettings
from valwizard.keys.key_store import initialize_validator_keys
from valwizard.keys.wallet import prompt_for_account
from valwizard.manifest.writer import write_account_manifest
from valwizard.miner.block import mine_genesis_proof
from valwizard.models.autopay import SignedPayoutBatch
from valwizard.models.credentials import Credentials
from valwizard.models.node_config import NodeConfig
from valwizard.models.request import OnboardingRequest
from valwizard.node.app_config import init_app_config
from valwizard.node.files import write_node_config_files
from valwizard.node.genesis import copy_test_genesis, fetch_genesis_files


class Collaborators:
    """The external operations the pipeline drives.

    Defaults are the real implementations; tests swap single entries for
    fakes (a failing template fetch, an instant miner, ...).
    """

    def __init__(
        self,
        *,
        prompt_for_account: Callable[..., Credentials] = prompt_for_account,
        init_app_config: Callable[..., NodeConfig] = init_app_config,
        fetch_template: Callable[..., Path] = fetch_template,
        build_autopay_batch: Callable[..., SignedPayoutBatch] = build_autopay_batch,
        initialize_validator_keys: Callable[..., Path] = initialize_validator_keys,
        fetch_genesis_files: Callable[..., Path] = fetch_genesis_files,
        copy_test_genesis: Callable[..., Path] = copy_test_genesis,
        write_node_config_files: Callable[..., list[Path]] = write_node_config_files,
        mine_genesis_proof: Callable[..., Path] = mine_genesis_proof,
        write_account_manifest: Callable[..., Path] = write_account_manifest,
    ) -> None:
        self.prompt_for_account = prompt_for_account
        self.init_app_config = init_app_config
        self.fetch_template = fetch_template
        self.build_autopay_batch = build_autopay_batch
        self.initialize_validator_keys = initialize_validator_keys
        self.fetch_genesis_files = fetch_genesis_files
        self.copy_test_genesis = copy_test_genesis
        self.write_node_config_files = write_node_config_files
        self.mine_genesis_proof = mine_genesis_proof
        self.write_account_manifest = write_account_manifest


class OnboardingContext(BaseModel):
    """Mutable state carried from stage to stage.

    Each field is set by exactly one stage and read by later ones.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    request: OnboardingRequest
    settings: WizardSettings
    collaborators: Collaborators

    credentials: Credentials | None = None  # s1
    upstream_peer: str | None = None  # s2
    node_config: NodeConfig | None = None  # s3
    template_path: Path | None = None  # s4
    autopay: SignedPayoutBatch | None = None  # s5
    key_store_path: Path | None = None  # s6
    genesis_path: Path | None = None  # s7
    node_files: list[Path] = []  # s7
    block_path: Path | None = None  # s8
    manifest_path: Path | None = None  # s9

    stage_results: dict[str, dict[str, Any]] = {}

    def require_credentials(self) -> Credentials:
        if self.credentials is None:
            raise RuntimeError("credentials have not been captured yet")
        return self.credentials

    def require_config(self) -> NodeConfig:
        if self.node_config is None:
            raise RuntimeError("node config has not been initialized yet")
        return self.node_config

    def require_autopay(self) -> SignedPayoutBatch:
        if self.autopay is None:
            raise RuntimeError("autopay batch has not been built yet")
        return self.autopay
