"""Validator key store — the on-disk secure storage a node boots from."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from valwizard.bridge.crypto_bridge import key_fingerprint
from valwizard.core.errors import KeyStoreError
from valwizard.core.hasher import atomic_write_json
from valwizard.keys.scheme import KeyScheme
from valwizard.models.credentials import Wallet
from valwizard.models.node_config import NodeConfig

logger = logging.getLogger(__name__)

KEY_STORE_FILE_NAME = "key_store.json"

# Operator namespaces are the owner auth key with this suffix appended.
OPERATOR_NAMESPACE_SUFFIX = "-oper"


def operator_namespace(auth_key: str) -> str:
    return auth_key + OPERATOR_NAMESPACE_SUFFIX


def initialize_validator_keys(
    wallet: Wallet,
    config: NodeConfig,
    base_waypoint: str | None,
    is_ceremony: bool,
) -> Path:
    """Write ``key_store.json`` under the node home and return its path.

    The store is keyed ``<namespace>/<role>``: owner material lives in the
    owner namespace (the auth key), everything the node runs with lives in
    the operator namespace. In ceremony mode the waypoint is not known yet
    and is left out.
    """
    scheme = KeyScheme.from_wallet(wallet)
    owner_ns = config.profile.auth_key
    oper_ns = operator_namespace(owner_ns)

    store: dict[str, Any] = {
        f"{owner_ns}/owner_account": config.profile.account,
        f"{owner_ns}/owner_key": scheme.owner.private_key.get_secret_value(),
        f"{oper_ns}/operator_account": scheme.operator.account,
        f"{oper_ns}/operator_key": scheme.operator.private_key.get_secret_value(),
        f"{oper_ns}/consensus": scheme.consensus.private_key.get_secret_value(),
        f"{oper_ns}/execution": scheme.executor.private_key.get_secret_value(),
        f"{oper_ns}/validator_network": scheme.validator_network.private_key.get_secret_value(),
        f"{oper_ns}/fullnode_network": scheme.fullnode_network.private_key.get_secret_value(),
        f"{oper_ns}/safety_data": {
            "epoch": config.chain_info.base_epoch or 0,
            "last_voted_round": 0,
            "preferred_round": 0,
        },
    }
    if base_waypoint is not None and not is_ceremony:
        store[f"{oper_ns}/waypoint"] = base_waypoint
        store[f"{oper_ns}/genesis-waypoint"] = base_waypoint

    path = config.node_home / KEY_STORE_FILE_NAME
    try:
        atomic_write_json(path, store, mode=0o600)
    except OSError as exc:
        raise KeyStoreError(f"could not initialize validator {KEY_STORE_FILE_NAME}: {exc}") from exc

    logger.info(
        "Key store written to %s (consensus key %s)",
        path,
        key_fingerprint(scheme.consensus.public_key),
    )
    return path
