"""Node file writer — validator and fullnode network configuration files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from valwizard.core.errors import NodeFilesError
from valwizard.core.hasher import atomic_write_bytes
from valwizard.keys.key_store import KEY_STORE_FILE_NAME

logger = logging.getLogger(__name__)

VALIDATOR_FILE_NAME = "validator.node.yaml"
FULLNODE_FILE_NAME = "fullnode.node.yaml"


def _storage_backend(home_path: Path, namespace: str) -> dict[str, Any]:
    return {
        "type": "on_disk_storage",
        "path": str(home_path / KEY_STORE_FILE_NAME),
        "namespace": namespace,
    }


def _waypoint_section(base_waypoint: str | None, backend: dict[str, Any]) -> dict[str, Any]:
    if base_waypoint is not None:
        return {"from_config": base_waypoint}
    return {"from_storage": backend}


def build_validator_config(
    home_path: Path,
    chain_id: int,
    namespace: str,
    genesis_path: Path | None,
    use_production: bool,
    base_waypoint: str | None,
    *,
    validator_port: int = 6180,
    rpc_port: int = 8080,
) -> dict[str, Any]:
    backend = _storage_backend(home_path, namespace)
    rpc_host = "0.0.0.0" if use_production else "127.0.0.1"
    return {
        "base": {
            "chain_id": chain_id,
            "data_dir": str(home_path),
            "role": "validator",
            "waypoint": _waypoint_section(base_waypoint, backend),
        },
        "consensus": {
            "safety_rules": {
                "backend": backend,
                "service": {"type": "local"},
            },
        },
        "execution": {
            "backend": backend,
            "genesis_file_location": str(genesis_path) if genesis_path else "",
        },
        "validator_network": {
            "discovery_method": "onchain",
            "listen_address": f"/ip4/0.0.0.0/tcp/{validator_port}",
            "identity": {
                "type": "from_storage",
                "backend": backend,
                "key_name": "validator_network",
                "peer_id_name": "owner_account",
            },
            "mutual_authentication": True,
        },
        "json_rpc": {"address": f"{rpc_host}:{rpc_port}"},
        "storage": {"dir": str(home_path / "db")},
    }


def build_fullnode_config(
    home_path: Path,
    chain_id: int,
    namespace: str,
    genesis_path: Path | None,
    base_waypoint: str | None,
    *,
    fullnode_port: int = 6179,
    rpc_port: int = 8080,
) -> dict[str, Any]:
    backend = _storage_backend(home_path, namespace)
    return {
        "base": {
            "chain_id": chain_id,
            "data_dir": str(home_path),
            "role": "full_node",
            "waypoint": _waypoint_section(base_waypoint, backend),
        },
        "execution": {
            "genesis_file_location": str(genesis_path) if genesis_path else "",
        },
        "full_node_networks": [
            {
                "discovery_method": "onchain",
                "listen_address": f"/ip4/0.0.0.0/tcp/{fullnode_port}",
                "identity": {
                    "type": "from_storage",
                    "backend": backend,
                    "key_name": "fullnode_network",
                    "peer_id_name": "owner_account",
                },
                "network_id": "public",
            }
        ],
        "json_rpc": {"address": f"0.0.0.0:{rpc_port}"},
        "storage": {"dir": str(home_path / "db")},
    }


def _deep_merge(base: dict[str, Any], extra: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in extra.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def write_node_config_files(
    home_path: Path,
    chain_id: int,
    github_org: str,
    repo: str,
    namespace: str,
    genesis_path: Path | None = None,
    use_production: bool = False,
    base_waypoint: str | None = None,
    extra: dict[str, Any] | None = None,
) -> list[Path]:
    """Write ``validator.node.yaml`` and ``fullnode.node.yaml`` under *home_path*.

    *extra* is deep-merged into the validator config. The genesis archive the
    blob came from is recorded under ``upstream`` so operators can trace it.
    """
    home_path = Path(home_path)
    if genesis_path is not None and not Path(genesis_path).is_file():
        raise NodeFilesError(f"Genesis file does not exist: {genesis_path}")

    origin = {"upstream": {"github_org": github_org, "repo": repo}}
    validator = _deep_merge(
        build_validator_config(
            home_path, chain_id, namespace, genesis_path, use_production, base_waypoint
        ),
        origin,
    )
    if extra:
        validator = _deep_merge(validator, extra)
    fullnode = _deep_merge(
        build_fullnode_config(home_path, chain_id, namespace, genesis_path, base_waypoint),
        origin,
    )

    written: list[Path] = []
    try:
        for name, document in ((VALIDATOR_FILE_NAME, validator), (FULLNODE_FILE_NAME, fullnode)):
            data = yaml.safe_dump(document, sort_keys=True).encode("utf-8")
            written.append(atomic_write_bytes(home_path / name, data))
    except OSError as exc:
        raise NodeFilesError(f"could not write node config files: {exc}") from exc

    logger.info("Node config files written: %s", ", ".join(p.name for p in written))
    return written
