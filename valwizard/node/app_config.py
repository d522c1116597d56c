"""Configuration initializer — derive and persist a node's ``NodeConfig``."""

from __future__ import annotations

import logging
from ipaddress import IPv4Address, IPv6Address
from pathlib import Path

from valwizard.config import WizardSettings
from valwizard.core.hasher import atomic_write_json
from valwizard.models.node_config import (
    CONFIG_FILE_NAME,
    ChainInfo,
    NodeConfig,
    Profile,
    Workspace,
)

logger = logging.getLogger(__name__)


def init_app_config(
    auth_key: str,
    account: str,
    upstream_peer: str | None = None,
    home_path: Path | None = None,
    epoch: int | None = None,
    waypoint: str | None = None,
    source_path: Path | None = None,
    *,
    ip: IPv4Address | IPv6Address | str | None = None,
    chain_id: int | None = None,
    settings: WizardSettings | None = None,
) -> NodeConfig:
    """Build the node configuration and write it to ``<home>/node_config.json``.

    Idempotent: the same inputs give an equal ``NodeConfig`` and the same
    file contents, so a failed run can simply be repeated.
    """
    settings = settings or WizardSettings()
    home = Path(home_path or settings.default_home).expanduser().absolute()

    config = NodeConfig(
        workspace=Workspace(
            node_home=home,
            source_path=source_path,
            db_path=home / "db",
        ),
        chain_info=ChainInfo(
            chain_id=chain_id if chain_id is not None else settings.default_chain_id,
            base_epoch=epoch,
            base_waypoint=waypoint,
        ),
        profile=Profile(
            auth_key=auth_key,
            account=account,
            ip=ip or settings.default_ip,
            upstream_nodes=[upstream_peer] if upstream_peer else [],
            default_node=f"http://127.0.0.1:{settings.query_port}",
        ),
    )

    config.get_block_dir().mkdir(parents=True, exist_ok=True)
    atomic_write_json(config.config_path, config.model_dump(mode="json"))
    logger.info("Node config written to %s", config.config_path)
    return config


def load_app_config(home_path: Path) -> NodeConfig:
    """Read back a config written by ``init_app_config``."""
    path = Path(home_path) / CONFIG_FILE_NAME
    return NodeConfig.model_validate_json(path.read_bytes())
