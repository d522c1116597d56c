"""Transaction parameter resolution and signing."""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence

from valwizard.bridge.crypto_bridge import key_fingerprint, sign_data
from valwizard.core.errors import SigningError, TxParamsError
from valwizard.keys.scheme import KEY_INDICES, derive_key
from valwizard.models.autopay import (
    RawTransaction,
    SignedTransaction,
    TransactionScript,
    TxParams,
    TxType,
)
from valwizard.models.credentials import Wallet
from valwizard.models.node_config import NodeConfig

logger = logging.getLogger(__name__)

# (max_gas_unit_for_tx, coin_price_per_unit, user_tx_timeout seconds)
TX_COSTS: dict[TxType, tuple[int, int, int]] = {
    TxType.CRITICAL: (1_000_000, 1, 5_000),
    TxType.MGMT: (100_000, 1, 5_000),
    TxType.MINER: (10_000, 1, 5_000),
    TxType.CHEAP: (1_000, 1, 5_000),
}


def resolve_tx_params(
    config: NodeConfig,
    tx_type: TxType,
    wallet: Wallet | None,
    url: str,
    timeout: int | None = None,
    is_swarm: bool = False,
) -> TxParams:
    """Build ``TxParams`` for the configured account.

    The wallet's owner key signs; it must match the auth key the config was
    created with.
    """
    if wallet is None:
        raise TxParamsError("A wallet is required to sign transactions.")

    owner = derive_key(wallet, KEY_INDICES["owner"])
    if owner.auth_key != config.profile.auth_key:
        raise TxParamsError(
            "Wallet does not match the configured account "
            f"(wallet auth key {owner.auth_key[:8]}..., config {config.profile.auth_key[:8]}...)."
        )

    max_gas, price, default_timeout = TX_COSTS[tx_type]
    params = TxParams(
        sender=config.profile.account,
        auth_key=owner.auth_key,
        public_key=owner.public_key,
        signing_key=owner.private_key,
        url=url,
        chain_id=config.chain_info.chain_id,
        max_gas_unit_for_tx=max_gas,
        coin_price_per_unit=price,
        user_tx_timeout=timeout if timeout is not None else default_timeout,
        waypoint=config.chain_info.base_waypoint,
        is_swarm=is_swarm,
    )
    logger.debug(
        "Tx params resolved: sender=%s url=%s key=%s swarm=%s",
        params.sender,
        params.url,
        key_fingerprint(params.public_key),
        is_swarm,
    )
    return params


def sign_instructions(
    scripts: Sequence[TransactionScript],
    start_sequence: int,
    tx_params: TxParams,
    *,
    now: int | None = None,
) -> list[SignedTransaction]:
    """Sign every script with consecutive sequence numbers.

    All transactions share one expiration, ``now + user_tx_timeout``. Any
    failure raises ``SigningError``; no partial list is returned.
    """
    issued_at = int(time.time()) if now is None else now
    expiration = issued_at + tx_params.user_tx_timeout
    private_key = tx_params.signing_key.get_secret_value()

    signed: list[SignedTransaction] = []
    for offset, script in enumerate(scripts):
        raw = RawTransaction(
            sender=tx_params.sender,
            sequence_number=start_sequence + offset,
            script=script,
            max_gas_amount=tx_params.max_gas_unit_for_tx,
            gas_unit_price=tx_params.coin_price_per_unit,
            expiration_timestamp_secs=expiration,
            chain_id=tx_params.chain_id,
        )
        try:
            signature = sign_data(raw.signing_bytes(), private_key)
        except (TypeError, ValueError) as exc:
            raise SigningError(
                f"could not sign transaction {raw.sequence_number}: {exc}"
            ) from exc
        signed.append(
            SignedTransaction(raw_txn=raw, public_key=tx_params.public_key, signature=signature)
        )

    logger.info("Signed %d transactions (expires at %d)", len(signed), expiration)
    return signed
