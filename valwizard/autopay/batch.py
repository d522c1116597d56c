"""Autopay batch builder.

Reads the operator's pay instructions, turns each into a transaction script
and signs the lot with the account's owner key. In ceremony mode the
instructions go into genesis as data, so nothing is signed.

Signed batches carry a bounded expiration: seven days from signing for real
onboarding, roughly a century when generating test fixtures so that
long-lived test suites never see them expire.
"""

from __future__ import annotations

import logging
from pathlib import Path

from valwizard.autopay.instructions import parse_pay_instructions
from valwizard.autopay.scripts import process_instructions
from valwizard.autopay.signer import resolve_tx_params, sign_instructions
from valwizard.bridge.upstream import TEMPLATE_FILE_NAME
from valwizard.models.autopay import SignedPayoutBatch, TxType
from valwizard.models.credentials import Wallet
from valwizard.models.node_config import NodeConfig

logger = logging.getLogger(__name__)

AUTOPAY_FILE_NAME = "autopay_batch.json"

TX_EXPIRATION_SECS = 7 * 24 * 60 * 60
TEST_TX_EXPIRATION_SECS = 100 * 360 * 24 * 60 * 60


def autopay_source_path(template: str | None, file_path: Path | None, home_path: Path) -> Path:
    """Explicit file first, then the downloaded template, then the batch file."""
    if file_path is not None:
        return Path(file_path)
    file_name = TEMPLATE_FILE_NAME if template is not None else AUTOPAY_FILE_NAME
    return Path(home_path) / file_name


def tx_expiration_secs(is_test_environment: bool) -> int:
    return TEST_TX_EXPIRATION_SECS if is_test_environment else TX_EXPIRATION_SECS


def build_autopay_batch(
    template: str | None,
    file_path: Path | None,
    home_path: Path,
    config: NodeConfig,
    wallet: Wallet,
    is_test_environment: bool,
    is_ceremony: bool,
    *,
    now: int | None = None,
) -> SignedPayoutBatch:
    """Parse and (outside ceremony mode) sign the autopay batch.

    The file is parsed before anything else, so a missing or malformed file
    fails before any parameters are resolved.
    """
    source = autopay_source_path(template, file_path, home_path)
    starting_epoch = config.chain_info.base_epoch or 0
    instructions = parse_pay_instructions(source, starting_epoch, None)

    if is_ceremony:
        logger.info("Ceremony mode: %d instructions kept unsigned", len(instructions))
        return SignedPayoutBatch(instructions=instructions, signed=None)

    scripts = process_instructions(instructions)
    tx_params = resolve_tx_params(
        config,
        TxType.MINER,
        wallet,
        config.what_url(False),
        None,
        is_test_environment,
    )
    tx_params = tx_params.model_copy(
        update={"user_tx_timeout": tx_expiration_secs(is_test_environment)}
    )
    signed = sign_instructions(scripts, 0, tx_params, now=now)
    return SignedPayoutBatch(instructions=instructions, signed=signed)
