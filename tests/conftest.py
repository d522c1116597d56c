"""Shared test fixtures for valwizard."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from valwizard.config import WizardSettings
from valwizard.keys.wallet import credentials_from_wallet, wallet_from_mnemonic
from valwizard.models.credentials import Credentials, Wallet
from valwizard.models.node_config import NodeConfig
from valwizard.models.request import OnboardingRequest
from valwizard.node.app_config import init_app_config

# Standard BIP-39 test vector mnemonic (24 words).
MNEMONIC = " ".join(["abandon"] * 23 + ["art"])
OTHER_MNEMONIC = " ".join(["zoo"] * 11 + ["wrong"])

WAYPOINT = "0:" + "ab" * 32
UPSTREAM = "http://10.0.0.5:8080/"

SAMPLE_INSTRUCTIONS: list[dict[str, Any]] = [
    {
        "uid": 1,
        "destination": "0x" + "ab" * 16,
        "type_of": "PercentOfBalance",
        "value": 10,
        "duration_epochs": 100,
        "note": "community wallet",
    },
    {
        "uid": 2,
        "destination": "cd" * 16,
        "type_of": "FixedOnce",
        "value": 5,
        "end_epoch": 50,
    },
]


@pytest.fixture
def home(tmp_path: Path) -> Path:
    """Node home directory (not created up front)."""
    return tmp_path / "node"


@pytest.fixture
def settings(home: Path) -> WizardSettings:
    """Settings isolated from the developer's .env, with a cheap miner."""
    return WizardSettings(
        _env_file=None,
        default_home=home,
        mining_difficulty=64,
        mnemonic=MNEMONIC,
    )


@pytest.fixture
def wallet() -> Wallet:
    return wallet_from_mnemonic(MNEMONIC)


@pytest.fixture
def credentials(wallet: Wallet) -> Credentials:
    return credentials_from_wallet(wallet)


@pytest.fixture
def node_config(credentials: Credentials, home: Path, settings: WizardSettings) -> NodeConfig:
    """A node config written to ``home`` with an upstream peer and waypoint."""
    return init_app_config(
        credentials.auth_key,
        credentials.account,
        UPSTREAM,
        home,
        None,
        WAYPOINT,
        settings=settings,
    )


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------


@pytest.fixture
def make_autopay_file(home: Path) -> Callable[..., Path]:
    """Factory fixture: write an instruction file, batch layout by default."""

    def _factory(
        instructions: list[dict[str, Any]] | None = None,
        path: Path | None = None,
        layout: str = "batch",
    ) -> Path:
        entries = SAMPLE_INSTRUCTIONS if instructions is None else instructions
        target = path or home / "autopay_batch.json"
        target.parent.mkdir(parents=True, exist_ok=True)
        if layout == "batch":
            document: dict[str, Any] = {"autopay": {"instructions": entries}}
        else:
            document = {"autopay_instructions": entries}
        target.write_text(json.dumps(document), encoding="utf-8")
        return target

    return _factory


@pytest.fixture
def make_request(home: Path) -> Callable[..., OnboardingRequest]:
    """Factory fixture: a CI onboarding request rooted at ``home``."""

    def _factory(**overrides: Any) -> OnboardingRequest:
        defaults: dict[str, Any] = {
            "home_path": home,
            "ci": True,
            "upstream_peer": UPSTREAM,
        }
        defaults.update(overrides)
        return OnboardingRequest(**defaults)

    return _factory


# ---------------------------------------------------------------------------
# Constants as fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mnemonic() -> str:
    return MNEMONIC


@pytest.fixture
def other_mnemonic() -> str:
    return OTHER_MNEMONIC


@pytest.fixture
def waypoint() -> str:
    return WAYPOINT


@pytest.fixture
def upstream() -> str:
    return UPSTREAM


@pytest.fixture
def sample_instructions() -> list[dict[str, Any]]:
    return [dict(entry) for entry in SAMPLE_INSTRUCTIONS]
