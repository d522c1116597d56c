"""Tests for wizard settings — env-driven defaults."""

from __future__ import annotations

from pathlib import Path

import pytest

from valwizard.config import WizardSettings


class TestWizardSettings:
    def test_defaults(self):
        settings = WizardSettings(_env_file=None)
        assert settings.log_level == "INFO"
        assert settings.debug is False
        assert settings.default_chain_id == 1
        assert settings.query_port == 8080
        assert settings.web_port == 3030
        assert settings.is_test is False
        assert settings.mnemonic is None

    def test_default_home_under_user_home(self):
        settings = WizardSettings(_env_file=None)
        assert settings.default_home == Path.home() / ".valwizard"

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("VALWIZARD_IS_TEST", "true")
        monkeypatch.setenv("VALWIZARD_MINING_DIFFICULTY", "10")
        monkeypatch.setenv("VALWIZARD_GENESIS_REPO", "genesis-archive")
        settings = WizardSettings(_env_file=None)
        assert settings.is_test is True
        assert settings.mining_difficulty == 10
        assert settings.genesis_repo == "genesis-archive"

    def test_mnemonic_is_secret(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("VALWIZARD_MNEMONIC", "abandon art")
        settings = WizardSettings(_env_file=None)
        assert settings.mnemonic is not None
        assert settings.mnemonic.get_secret_value() == "abandon art"
        assert "abandon" not in repr(settings)
