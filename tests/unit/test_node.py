"""Tests for node home files: app config, genesis sourcing and node yaml."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

import httpx
import pytest
import yaml

from valwizard.config import WizardSettings
from valwizard.core.errors import GenesisSourceError, NodeFilesError, UpstreamConnectionError
from valwizard.keys.key_store import operator_namespace
from valwizard.models.credentials import Credentials
from valwizard.models.node_config import CONFIG_FILE_NAME, NodeConfig
from valwizard.models.request import GenesisSource, GenesisSourceKind
from valwizard.node.app_config import init_app_config, load_app_config
from valwizard.node.files import (
    FULLNODE_FILE_NAME,
    VALIDATOR_FILE_NAME,
    write_node_config_files,
)
from valwizard.node.genesis import (
    GENESIS_FILE_NAME,
    bundled_genesis_blob,
    copy_test_genesis,
    fetch_genesis_files,
    genesis_archive_url,
    source_genesis,
)


def _client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


# ---------------------------------------------------------------------------
# Test: App config
# ---------------------------------------------------------------------------


class TestAppConfig:
    def test_writes_config_and_block_dir(self, node_config: NodeConfig):
        assert node_config.config_path.name == CONFIG_FILE_NAME
        assert node_config.config_path.is_file()
        assert node_config.get_block_dir().is_dir()
        assert node_config.node_home.is_absolute()

    def test_round_trip(self, node_config: NodeConfig):
        assert load_app_config(node_config.node_home) == node_config

    def test_idempotent(
        self,
        credentials: Credentials,
        home: Path,
        settings: WizardSettings,
        upstream: str,
        waypoint: str,
    ):
        args = (credentials.auth_key, credentials.account, upstream, home, 4, waypoint)
        first = init_app_config(*args, settings=settings)
        first_bytes = first.config_path.read_bytes()
        second = init_app_config(*args, settings=settings)
        assert first == second
        assert second.config_path.read_bytes() == first_bytes

    def test_defaults_from_settings(self, credentials: Credentials, settings: WizardSettings):
        config = init_app_config(credentials.auth_key, credentials.account, settings=settings)
        assert config.node_home == settings.default_home.absolute()
        assert config.chain_info.chain_id == settings.default_chain_id
        assert str(config.profile.ip) == settings.default_ip
        assert config.profile.upstream_nodes == []
        assert config.what_url(True) == config.profile.default_node

    def test_upstream_preferred_when_asked(self, node_config: NodeConfig, upstream: str):
        assert node_config.what_url(True) == upstream
        assert node_config.what_url(False) == node_config.profile.default_node

    def test_invalid_waypoint_rejected(self, credentials: Credentials, settings: WizardSettings):
        with pytest.raises(ValueError, match="waypoint"):
            init_app_config(
                credentials.auth_key, credentials.account, waypoint="nope", settings=settings
            )


# ---------------------------------------------------------------------------
# Test: Genesis sourcing
# ---------------------------------------------------------------------------


class TestGenesis:
    def test_archive_url(self, settings: WizardSettings):
        url = genesis_archive_url("OLSF", "genesis", settings)
        assert url == "https://raw.githubusercontent.com/OLSF/genesis/main/genesis.blob"

    def test_fetch_writes_blob(self, home: Path, settings: WizardSettings):
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(str(request.url))
            return httpx.Response(200, content=b"GENESIS")

        path = fetch_genesis_files(
            home, "org", "repo", client=_client(handler), settings=settings
        )
        assert path == home / GENESIS_FILE_NAME
        assert path.read_bytes() == b"GENESIS"
        assert seen == [genesis_archive_url("org", "repo", settings)]

    def test_fetch_connection_failure(self, home: Path, settings: WizardSettings):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(UpstreamConnectionError):
            fetch_genesis_files(home, client=_client(handler), settings=settings)
        assert not (home / GENESIS_FILE_NAME).exists()

    def test_bundled_fixture_exists(self, settings: WizardSettings):
        assert bundled_genesis_blob(settings).is_file()

    def test_copy_test_genesis(self, home: Path, settings: WizardSettings):
        path = copy_test_genesis(home, settings)
        assert path.read_bytes() == bundled_genesis_blob(settings).read_bytes()

    def test_exactly_one_strategy_runs(self, home: Path, settings: WizardSettings):
        calls: list[str] = []

        def fetch(*args, **kwargs) -> Path:
            calls.append("fetch")
            return home / GENESIS_FILE_NAME

        def copy_fixture(*args, **kwargs) -> Path:
            calls.append("fixture")
            return home / GENESIS_FILE_NAME

        source = GenesisSource(kind=GenesisSourceKind.TEST_FIXTURE, github_org="o", repo="r")
        source_genesis(source, home, fetch=fetch, copy_fixture=copy_fixture, settings=settings)
        assert calls == ["fixture"]

        calls.clear()
        source = GenesisSource(kind=GenesisSourceKind.GIT_FETCH, github_org="o", repo="r")
        source_genesis(source, home, fetch=fetch, copy_fixture=copy_fixture, settings=settings)
        assert calls == ["fetch"]

    def test_prebuilt_path_used_as_is(self, tmp_path: Path, home: Path):
        blob = tmp_path / "my-genesis.blob"
        blob.write_bytes(b"x")
        source = GenesisSource(
            kind=GenesisSourceKind.PREBUILT, github_org="o", repo="r", prebuilt_path=blob
        )
        assert source_genesis(source, home) == blob

    def test_prebuilt_without_path_fails(self, home: Path):
        source = GenesisSource(kind=GenesisSourceKind.PREBUILT, github_org="o", repo="r")
        with pytest.raises(GenesisSourceError, match="required"):
            source_genesis(source, home)

    def test_prebuilt_missing_file_fails(self, tmp_path: Path, home: Path):
        source = GenesisSource(
            kind=GenesisSourceKind.PREBUILT,
            github_org="o",
            repo="r",
            prebuilt_path=tmp_path / "absent.blob",
        )
        with pytest.raises(GenesisSourceError, match="not found"):
            source_genesis(source, home)


# ---------------------------------------------------------------------------
# Test: Node yaml files
# ---------------------------------------------------------------------------


class TestNodeFiles:
    def test_writes_both_files(
        self, node_config: NodeConfig, settings: WizardSettings, waypoint: str
    ):
        home = node_config.node_home
        genesis = copy_test_genesis(home, settings)
        namespace = operator_namespace(node_config.profile.auth_key)

        written = write_node_config_files(home, 4, "org", "repo", namespace, genesis, False, waypoint)
        assert [p.name for p in written] == [VALIDATOR_FILE_NAME, FULLNODE_FILE_NAME]

        validator = yaml.safe_load((home / VALIDATOR_FILE_NAME).read_text())
        assert validator["base"]["chain_id"] == 4
        assert validator["base"]["waypoint"] == {"from_config": waypoint}
        assert validator["execution"]["genesis_file_location"] == str(genesis)
        assert validator["consensus"]["safety_rules"]["backend"]["namespace"] == namespace
        assert validator["json_rpc"]["address"].startswith("127.0.0.1:")
        assert validator["upstream"] == {"github_org": "org", "repo": "repo"}

        fullnode = yaml.safe_load((home / FULLNODE_FILE_NAME).read_text())
        assert fullnode["base"]["role"] == "full_node"

    def test_waypoint_from_storage_when_unknown(self, node_config: NodeConfig):
        home = node_config.node_home
        written = write_node_config_files(home, 1, "org", "repo", "ns")
        validator = yaml.safe_load(written[0].read_text())
        assert "from_storage" in validator["base"]["waypoint"]

    def test_production_listens_publicly(self, node_config: NodeConfig):
        written = write_node_config_files(node_config.node_home, 1, "o", "r", "ns", None, True)
        validator = yaml.safe_load(written[0].read_text())
        assert validator["json_rpc"]["address"].startswith("0.0.0.0:")

    def test_extra_is_deep_merged(self, node_config: NodeConfig):
        written = write_node_config_files(
            node_config.node_home,
            1,
            "o",
            "r",
            "ns",
            extra={"storage": {"prune_window": 100}},
        )
        validator = yaml.safe_load(written[0].read_text())
        assert validator["storage"]["prune_window"] == 100
        assert "dir" in validator["storage"]

    def test_missing_genesis_fails(self, node_config: NodeConfig, tmp_path: Path):
        with pytest.raises(NodeFilesError, match="does not exist"):
            write_node_config_files(
                node_config.node_home, 1, "o", "r", "ns", tmp_path / "absent.blob"
            )


# ---------------------------------------------------------------------------
# Test: node_config.json shape
# ---------------------------------------------------------------------------


class TestNodeConfigFile:
    def test_json_sections(self, node_config: NodeConfig):
        document = json.loads(node_config.config_path.read_text())
        assert set(document) == {"workspace", "chain_info", "profile"}
        assert document["profile"]["account"] == node_config.profile.account
