"""Manifest writer — assemble and persist the validator's ``account.json``.

The manifest combines the block zero proof, public keys derived from the
wallet, the node address and the autopay batch. It is written in a single
atomic step: a concurrent reader sees either no manifest or a complete one.
"""

from __future__ import annotations

import logging
from pathlib import Path

from valwizard.core.errors import ManifestError, MissingProofError
from valwizard.core.hasher import atomic_write_bytes
from valwizard.keys.scheme import KeyScheme
from valwizard.miner.block import parse_block_file, verify_block
from valwizard.models.autopay import PayInstruction, SignedPayoutBatch, SignedTransaction
from valwizard.models.credentials import Wallet
from valwizard.models.manifest import (
    ACCOUNT_MANIFEST_FILE_NAME,
    BLOCK_ZERO_FILE_NAME,
    AccountManifest,
)
from valwizard.models.node_config import NodeConfig

logger = logging.getLogger(__name__)

# Operator human names follow the same "-oper" convention as namespaces.
OPERATOR_NAME_SUFFIX = "-oper"


def build_account_manifest(
    wallet: Wallet,
    config: NodeConfig,
    autopay_instructions: list[PayInstruction] | None,
    signed_transactions: list[SignedTransaction] | None,
    *,
    require_proof: bool = True,
    validator_port: int = 6180,
    fullnode_port: int = 6179,
) -> AccountManifest:
    keys = KeyScheme.from_wallet(wallet)
    block_path = config.get_block_dir() / BLOCK_ZERO_FILE_NAME
    if block_path.is_file():
        block = parse_block_file(block_path)
    elif require_proof:
        raise MissingProofError(
            f"Block zero proof not found at {block_path}. Mine it first or use --skip-mining."
        )
    else:
        block = None

    ip = str(config.profile.ip)
    return AccountManifest(
        block_zero=block,
        ow_human_name=config.profile.account,
        op_address=keys.operator.account,
        op_auth_key_prefix=keys.operator.auth_key[:32],
        op_consensus_pubkey=keys.consensus.public_key,
        op_validator_network_addresses=f"/ip4/{ip}/tcp/{validator_port}",
        op_fullnode_network_addresses=f"/ip4/{ip}/tcp/{fullnode_port}",
        op_human_name=config.profile.account + OPERATOR_NAME_SUFFIX,
        node_ip=ip,
        chain_id=config.chain_info.chain_id,
        autopay_instructions=autopay_instructions,
        autopay_signed=signed_transactions,
    )


def write_account_manifest(
    output_path: Path | None,
    wallet: Wallet,
    config: NodeConfig,
    autopay_instructions: list[PayInstruction] | None,
    signed_transactions: list[SignedTransaction] | None,
    *,
    require_proof: bool = True,
    validator_port: int = 6180,
    fullnode_port: int = 6179,
) -> Path:
    """Write ``account.json`` into *output_path* (default: node home).

    Parameters
    ----------
    output_path:
        Directory to write into. ``None`` uses the node home.
    require_proof:
        When ``True`` a missing ``blocks/block_0.json`` raises
        ``MissingProofError``. The orchestrator passes ``False`` when mining
        was skipped.
    validator_port, fullnode_port:
        TCP ports advertised in the operator's network addresses.
    """
    manifest = build_account_manifest(
        wallet,
        config,
        autopay_instructions,
        signed_transactions,
        require_proof=require_proof,
        validator_port=validator_port,
        fullnode_port=fullnode_port,
    )
    target_dir = Path(output_path) if output_path is not None else config.node_home
    path = target_dir / ACCOUNT_MANIFEST_FILE_NAME
    try:
        atomic_write_bytes(path, manifest.model_dump_json(indent=2).encode("utf-8"))
    except OSError as exc:
        raise ManifestError(f"could not write account manifest {path}: {exc}") from exc

    logger.info("Account manifest written to %s", path)
    return path


def load_account_manifest(path: Path) -> AccountManifest:
    """Read an ``account.json`` (or the directory holding one)."""
    path = Path(path)
    if path.is_dir():
        path = path / ACCOUNT_MANIFEST_FILE_NAME
    return AccountManifest.model_validate_json(path.read_bytes())


def verify_account_manifest(manifest: AccountManifest) -> list[str]:
    """Check a manifest offline; returns a list of problems (empty == valid).

    Checks the block zero proof, every transaction signature, and the 1:1
    alignment between instructions and signed transactions.
    """
    problems: list[str] = []
    if manifest.block_zero is None:
        problems.append("no block zero proof")
    elif not verify_block(manifest.block_zero):
        problems.append("block zero proof does not verify")

    for index, txn in enumerate(manifest.autopay_signed or []):
        if not txn.verify():
            problems.append(f"signature of autopay transaction {index} does not verify")
        if txn.raw_txn.sender != manifest.ow_human_name:
            problems.append(f"autopay transaction {index} is not sent by the owner account")

    if manifest.autopay_signed is not None:
        try:
            SignedPayoutBatch(
                instructions=manifest.autopay_instructions or [],
                signed=manifest.autopay_signed,
            )
        except ValueError as exc:
            problems.append(f"autopay batch misaligned: {exc}")
    return problems
