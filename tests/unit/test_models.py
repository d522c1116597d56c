"""Tests for the onboarding request model — validation and default resolution."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest
from pydantic import ValidationError

from valwizard.config import WizardSettings
from valwizard.core.errors import GenesisSourceError
from valwizard.models.request import GenesisSourceKind, OnboardingRequest


class TestOnboardingRequest:
    def test_frozen(self, make_request: Callable[..., OnboardingRequest]):
        request = make_request()
        with pytest.raises(ValidationError):
            request.ci = False

    def test_conflicting_genesis_sources(self, make_request: Callable[..., OnboardingRequest]):
        with pytest.raises(GenesisSourceError, match="cannot be combined"):
            make_request(fetch_git_genesis=True)

    def test_no_genesis_source(self, make_request: Callable[..., OnboardingRequest]):
        with pytest.raises(GenesisSourceError, match="No genesis source"):
            make_request(ci=False)

    def test_ceremony_needs_no_genesis_source(
        self, make_request: Callable[..., OnboardingRequest], settings: WizardSettings
    ):
        request = make_request(ci=False, genesis_ceremony=True)
        assert request.genesis_source(settings) is None

    @pytest.mark.parametrize(
        "options, kind",
        [
            ({"ci": True}, GenesisSourceKind.TEST_FIXTURE),
            ({"ci": False, "fetch_git_genesis": True}, GenesisSourceKind.GIT_FETCH),
            ({"ci": False, "prebuilt_genesis": Path("/tmp/g.blob")}, GenesisSourceKind.PREBUILT),
        ],
    )
    def test_genesis_source_selection(
        self,
        make_request: Callable[..., OnboardingRequest],
        settings: WizardSettings,
        options: dict,
        kind: GenesisSourceKind,
    ):
        source = make_request(**options).genesis_source(settings)
        assert source is not None
        assert source.kind is kind
        if kind is GenesisSourceKind.PREBUILT:
            assert source.prebuilt_path == Path("/tmp/g.blob")
        else:
            assert source.prebuilt_path is None

    def test_defaults_resolve_from_settings(
        self, make_request: Callable[..., OnboardingRequest], settings: WizardSettings
    ):
        request = make_request()
        assert request.resolve_chain_id(settings) == settings.default_chain_id
        assert request.resolve_github_org(settings) == settings.genesis_github_org
        assert request.resolve_repo(settings) == settings.genesis_repo

    def test_explicit_values_win(
        self, make_request: Callable[..., OnboardingRequest], settings: WizardSettings
    ):
        request = make_request(chain_id=0, github_org="me", repo="genesis")
        assert request.resolve_chain_id(settings) == 0
        source = request.genesis_source(settings)
        assert (source.github_org, source.repo) == ("me", "genesis")

    @pytest.mark.parametrize("url", ["ftp://node", "not a url", "http://"])
    def test_bad_urls_rejected(self, make_request: Callable[..., OnboardingRequest], url: str):
        with pytest.raises(ValidationError):
            make_request(template_url=url)

    def test_bad_waypoint_rejected(self, make_request: Callable[..., OnboardingRequest]):
        with pytest.raises(ValidationError, match="waypoint"):
            make_request(waypoint="12:xyz")

    def test_bad_ip_rejected(self, make_request: Callable[..., OnboardingRequest]):
        with pytest.raises(ValidationError):
            make_request(ip="300.1.1.1")
