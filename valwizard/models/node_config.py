"""Node configuration models — workspace, chain metadata and operator profile."""

from __future__ import annotations

import re
from pathlib import Path

from pydantic import BaseModel, ConfigDict, IPvAnyAddress, field_validator

from valwizard.core.errors import WaypointError

CONFIG_FILE_NAME = "node_config.json"

_WAYPOINT_RE = re.compile(r"^(?P<version>\d+):(?P<value>[0-9a-f]{64})$")


def parse_waypoint(value: str) -> str:
    """Validate and normalize a ``<version>:<hash>`` waypoint string."""
    normalized = value.strip().lower()
    if not _WAYPOINT_RE.match(normalized):
        raise WaypointError(
            f"Invalid waypoint {value!r}: expected '<version>:<64 hex chars>'"
        )
    return normalized


class Workspace(BaseModel):
    """Filesystem layout of a node."""

    model_config = ConfigDict(frozen=True)

    node_home: Path
    source_path: Path | None = None
    block_dir: str = "blocks"
    db_path: Path


class ChainInfo(BaseModel):
    """Chain identity and trust anchor."""

    model_config = ConfigDict(frozen=True)

    chain_id: int = 1
    base_epoch: int | None = None
    base_waypoint: str | None = None

    @field_validator("base_waypoint")
    @classmethod
    def _check_waypoint(cls, value: str | None) -> str | None:
        return parse_waypoint(value) if value is not None else None


class Profile(BaseModel):
    """Operator identity and how to reach the chain."""

    model_config = ConfigDict(frozen=True)

    auth_key: str
    account: str
    ip: IPvAnyAddress
    upstream_nodes: list[str] = []
    default_node: str  # the local node's non-TLS JSON-RPC endpoint


class NodeConfig(BaseModel):
    """Application configuration derived once per onboarding run.

    Carries no timestamps: re-deriving it from identical inputs yields an
    equal object, which is what makes the config stage safe to re-run.
    """

    model_config = ConfigDict(frozen=True)

    workspace: Workspace
    chain_info: ChainInfo
    profile: Profile

    @property
    def node_home(self) -> Path:
        return self.workspace.node_home

    @property
    def config_path(self) -> Path:
        return self.workspace.node_home / CONFIG_FILE_NAME

    def get_block_dir(self) -> Path:
        return self.workspace.node_home / self.workspace.block_dir

    def what_url(self, use_upstream_url: bool) -> str:
        """Return the JSON-RPC endpoint transactions should target."""
        if use_upstream_url and self.profile.upstream_nodes:
            return self.profile.upstream_nodes[0]
        return self.profile.default_node
