"""Tests for the account manifest writer and verifier."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

import pytest

from valwizard.autopay.batch import build_autopay_batch
from valwizard.config import WizardSettings
from valwizard.core.errors import MissingProofError
from valwizard.keys.scheme import KeyScheme
from valwizard.manifest.writer import (
    build_account_manifest,
    load_account_manifest,
    verify_account_manifest,
    write_account_manifest,
)
from valwizard.miner.block import mine_genesis_proof
from valwizard.models.autopay import SignedPayoutBatch
from valwizard.models.credentials import Wallet
from valwizard.models.manifest import ACCOUNT_MANIFEST_FILE_NAME
from valwizard.models.node_config import NodeConfig


@pytest.fixture
def signed_batch(
    make_autopay_file: Callable[..., Path], node_config: NodeConfig, wallet: Wallet
) -> SignedPayoutBatch:
    make_autopay_file()
    return build_autopay_batch(
        None, None, node_config.node_home, node_config, wallet, False, False
    )


class TestBuildAccountManifest:
    def test_fields(
        self,
        wallet: Wallet,
        node_config: NodeConfig,
        settings: WizardSettings,
        signed_batch: SignedPayoutBatch,
    ):
        mine_genesis_proof(node_config, settings=settings)
        manifest = build_account_manifest(
            wallet, node_config, signed_batch.instructions, signed_batch.signed
        )
        keys = KeyScheme.from_wallet(wallet)
        assert manifest.ow_human_name == node_config.profile.account
        assert manifest.op_address == keys.operator.account
        assert manifest.op_consensus_pubkey == keys.consensus.public_key
        assert manifest.op_human_name == node_config.profile.account + "-oper"
        assert manifest.op_validator_network_addresses == "/ip4/127.0.0.1/tcp/6180"
        assert manifest.block_zero is not None
        assert len(manifest.autopay_signed) == 2

    def test_missing_proof_required(self, wallet: Wallet, node_config: NodeConfig):
        with pytest.raises(MissingProofError, match="skip-mining"):
            build_account_manifest(wallet, node_config, [], None)

    def test_missing_proof_allowed(self, wallet: Wallet, node_config: NodeConfig):
        manifest = build_account_manifest(wallet, node_config, [], None, require_proof=False)
        assert manifest.block_zero is None

    def test_no_private_material(
        self,
        wallet: Wallet,
        node_config: NodeConfig,
        signed_batch: SignedPayoutBatch,
    ):
        manifest = build_account_manifest(
            wallet,
            node_config,
            signed_batch.instructions,
            signed_batch.signed,
            require_proof=False,
        )
        dumped = manifest.model_dump_json()
        keys = KeyScheme.from_wallet(wallet)
        for role in ("owner", "operator", "consensus"):
            assert getattr(keys, role).private_key.get_secret_value() not in dumped


class TestWriteAccountManifest:
    def test_written_to_node_home_by_default(
        self,
        wallet: Wallet,
        node_config: NodeConfig,
        settings: WizardSettings,
        signed_batch: SignedPayoutBatch,
    ):
        mine_genesis_proof(node_config, settings=settings)
        path = write_account_manifest(
            None, wallet, node_config, signed_batch.instructions, signed_batch.signed
        )
        assert path == node_config.node_home / ACCOUNT_MANIFEST_FILE_NAME
        assert json.loads(path.read_text())["chain_id"] == node_config.chain_info.chain_id

    def test_output_directory_and_ports(
        self, wallet: Wallet, node_config: NodeConfig, tmp_path: Path
    ):
        out = tmp_path / "out"
        path = write_account_manifest(
            out,
            wallet,
            node_config,
            [],
            None,
            require_proof=False,
            validator_port=7000,
            fullnode_port=7001,
        )
        assert path == out / ACCOUNT_MANIFEST_FILE_NAME
        manifest = load_account_manifest(out)
        assert manifest.op_validator_network_addresses.endswith("/tcp/7000")
        assert manifest.op_fullnode_network_addresses.endswith("/tcp/7001")

    def test_failed_write_leaves_no_manifest(self, wallet: Wallet, node_config: NodeConfig):
        with pytest.raises(MissingProofError):
            write_account_manifest(None, wallet, node_config, [], None)
        assert not (node_config.node_home / ACCOUNT_MANIFEST_FILE_NAME).exists()


class TestVerifyAccountManifest:
    def test_valid_manifest(
        self,
        wallet: Wallet,
        node_config: NodeConfig,
        settings: WizardSettings,
        signed_batch: SignedPayoutBatch,
    ):
        mine_genesis_proof(node_config, settings=settings)
        path = write_account_manifest(
            None, wallet, node_config, signed_batch.instructions, signed_batch.signed
        )
        assert verify_account_manifest(load_account_manifest(path)) == []

    def test_missing_proof_reported(self, wallet: Wallet, node_config: NodeConfig):
        manifest = build_account_manifest(wallet, node_config, [], None, require_proof=False)
        assert verify_account_manifest(manifest) == ["no block zero proof"]

    def test_forged_signature_reported(
        self,
        wallet: Wallet,
        node_config: NodeConfig,
        signed_batch: SignedPayoutBatch,
    ):
        manifest = build_account_manifest(
            wallet,
            node_config,
            signed_batch.instructions,
            signed_batch.signed,
            require_proof=False,
        )
        forged_txn = manifest.autopay_signed[0].model_copy(update={"signature": "00" * 64})
        forged = manifest.model_copy(
            update={"autopay_signed": [forged_txn, *manifest.autopay_signed[1:]]}
        )
        problems = verify_account_manifest(forged)
        assert "signature of autopay transaction 0 does not verify" in problems
