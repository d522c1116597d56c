"""Block zero miner.

The proof is a sequential SHA-256 hash chain over a preimage that binds the
operator's auth key and chain id: ``proof = sha256^difficulty(preimage)``.
It cannot be parallelised, so wall-clock time scales with ``difficulty``;
with the default difficulty expect minutes, not seconds. There is no
timeout.
"""

from __future__ import annotations

import hashlib
import logging
import time
from pathlib import Path

from pydantic import ValidationError

from valwizard.config import WizardSettings
from valwizard.core.errors import MiningError
from valwizard.core.hasher import atomic_write_json, canonical_json_bytes
from valwizard.models.manifest import BLOCK_ZERO_FILE_NAME, Block
from valwizard.models.node_config import NodeConfig

logger = logging.getLogger(__name__)

_PROGRESS_EVERY = 1_000_000


def block_zero_preimage(config: NodeConfig) -> bytes:
    return canonical_json_bytes(
        {
            "auth_key": config.profile.auth_key,
            "chain_id": config.chain_info.chain_id,
            "height": 0,
        }
    )


def compute_proof(preimage: bytes, difficulty: int) -> bytes:
    if difficulty <= 0:
        raise MiningError(f"difficulty must be positive, got {difficulty}")
    digest = preimage
    for round_no in range(1, difficulty + 1):
        digest = hashlib.sha256(digest).digest()
        if round_no % _PROGRESS_EVERY == 0:
            logger.debug("mining: %d/%d rounds", round_no, difficulty)
    return digest


def verify_block(block: Block) -> bool:
    """Recompute the hash chain and compare with the stored proof."""
    try:
        preimage = bytes.fromhex(block.preimage)
    except ValueError:
        return False
    return compute_proof(preimage, block.difficulty).hex() == block.proof


def mine_genesis_proof(
    config: NodeConfig,
    *,
    difficulty: int | None = None,
    settings: WizardSettings | None = None,
) -> Path:
    """Mine block zero and write it to ``<home>/blocks/block_0.json``."""
    settings = settings or WizardSettings()
    difficulty = difficulty or settings.mining_difficulty
    preimage = block_zero_preimage(config)

    logger.info("Mining block zero (difficulty=%d)...", difficulty)
    started = time.monotonic()
    proof = compute_proof(preimage, difficulty)
    elapsed = time.monotonic() - started

    block = Block(
        height=0,
        elapsed_secs=round(elapsed, 3),
        preimage=preimage.hex(),
        proof=proof.hex(),
        difficulty=difficulty,
    )
    path = config.get_block_dir() / BLOCK_ZERO_FILE_NAME
    try:
        atomic_write_json(path, block.model_dump(mode="json"))
    except OSError as exc:
        raise MiningError(f"could not write {path}: {exc}") from exc

    logger.info("Block zero mined in %.1fs -> %s", elapsed, path)
    return path


def parse_block_file(path: Path) -> Block:
    """Load a block proof file."""
    try:
        return Block.model_validate_json(Path(path).read_bytes())
    except ValidationError as exc:
        raise MiningError(f"malformed block file {path}: {exc}") from exc
