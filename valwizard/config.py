"""Wizard configuration — env-driven settings.

Centralized settings using pydantic-settings. Reads from a .env file and
VALWIZARD_* environment variables. The onboarding request carries the
per-run choices; this module holds the named defaults every run falls back
to, so default resolution lives in one place.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class WizardSettings(BaseSettings):
    """Wizard settings with environment variable overrides.

    Examples
    --------
    Override via environment::

        export VALWIZARD_LOG_LEVEL=DEBUG
        export VALWIZARD_IS_TEST=true
        export VALWIZARD_MINING_DIFFICULTY=1000

    Or via .env file::

        VALWIZARD_DEFAULT_HOME=/srv/validator
        VALWIZARD_GENESIS_REPO=genesis-archive
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="VALWIZARD_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging
    log_level: str = "INFO"
    debug: bool = False

    # Fixture generation: signed transactions get a near-infinite expiry
    is_test: bool = False

    # Node workspace
    default_home: Path = Path.home() / ".valwizard"
    default_ip: str = "127.0.0.1"

    # Chain defaults
    default_chain_id: int = 1
    genesis_github_org: str = "OLSF"
    genesis_repo: str = "experimental-genesis"
    genesis_archive_base_url: str = "https://raw.githubusercontent.com"
    genesis_archive_branch: str = "main"

    # Ports: JSON-RPC query port and the web port serving account templates
    query_port: int = 8080
    web_port: int = 3030
    validator_network_port: int = 6180
    fullnode_network_port: int = 6179

    # Network fetches are single-shot
    http_timeout_seconds: float = 30.0

    # Miner: number of sequential SHA-256 rounds for block zero
    mining_difficulty: int = 5_000_000

    # CI: supply the mnemonic without a prompt
    mnemonic: SecretStr | None = None

    # Overrides the bundled test genesis fixture
    test_genesis_path: Path | None = None
