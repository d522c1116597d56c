"""Onboarding request — everything the operator decides before the run starts."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

import httpx
from pydantic import BaseModel, ConfigDict, IPvAnyAddress, field_validator, model_validator

from valwizard.config import WizardSettings
from valwizard.core.errors import GenesisSourceError
from valwizard.models.node_config import parse_waypoint


class GenesisSourceKind(str, Enum):
    """Where the genesis blob comes from. Exactly one per run."""

    GIT_FETCH = "git_fetch"
    TEST_FIXTURE = "test_fixture"
    PREBUILT = "prebuilt"


class GenesisSource(BaseModel):
    """Tagged variant selected once from the request."""

    model_config = ConfigDict(frozen=True)

    kind: GenesisSourceKind
    github_org: str
    repo: str
    prebuilt_path: Path | None = None


class OnboardingRequest(BaseModel):
    """Operator-supplied parameters for one wizard run.

    Immutable once the pipeline starts. Options left unset fall back to
    ``WizardSettings`` through the ``resolve_*`` helpers below, never inside
    the stages.
    """

    model_config = ConfigDict(frozen=True)

    output_path: Path | None = None
    home_path: Path | None = None
    chain_id: int | None = None
    github_org: str | None = None
    repo: str | None = None
    prebuilt_genesis: Path | None = None
    fetch_git_genesis: bool = False
    ci: bool = False
    skip_mining: bool = False
    template_url: str | None = None
    autopay_file: Path | None = None
    upstream_peer: str | None = None
    source_path: Path | None = None
    waypoint: str | None = None
    epoch: int | None = None
    ip: IPvAnyAddress | None = None
    genesis_ceremony: bool = False

    @field_validator("template_url", "upstream_peer")
    @classmethod
    def _check_url(cls, value: str | None) -> str | None:
        if value is None:
            return None
        try:
            url = httpx.URL(value)
        except httpx.InvalidURL as exc:
            raise ValueError(f"Invalid URL {value!r}: {exc}") from exc
        if url.scheme not in ("http", "https") or not url.host:
            raise ValueError(f"Expected an http(s) URL with a host, got {value!r}")
        return str(url)

    @field_validator("waypoint")
    @classmethod
    def _check_waypoint(cls, value: str | None) -> str | None:
        return parse_waypoint(value) if value is not None else None

    @model_validator(mode="after")
    def _check_genesis_options(self) -> OnboardingRequest:
        if self.fetch_git_genesis and self.ci:
            raise GenesisSourceError(
                "Choose one genesis source: --fetch-git-genesis and --ci "
                "cannot be combined."
            )
        if (
            not self.genesis_ceremony
            and not self.fetch_git_genesis
            and not self.ci
            and self.prebuilt_genesis is None
        ):
            raise GenesisSourceError(
                "No genesis source selected. Pass --fetch-git-genesis, --ci, "
                "or --prebuilt-genesis <path>."
            )
        return self

    # ------------------------------------------------------------------
    # Default resolution
    # ------------------------------------------------------------------

    def resolve_chain_id(self, settings: WizardSettings) -> int:
        return self.chain_id if self.chain_id is not None else settings.default_chain_id

    def resolve_github_org(self, settings: WizardSettings) -> str:
        return self.github_org or settings.genesis_github_org

    def resolve_repo(self, settings: WizardSettings) -> str:
        return self.repo or settings.genesis_repo

    def genesis_source(self, settings: WizardSettings) -> GenesisSource | None:
        """Select the genesis sourcing strategy; ``None`` in ceremony mode."""
        if self.genesis_ceremony:
            return None
        if self.fetch_git_genesis:
            kind = GenesisSourceKind.GIT_FETCH
        elif self.ci:
            kind = GenesisSourceKind.TEST_FIXTURE
        else:
            kind = GenesisSourceKind.PREBUILT
        return GenesisSource(
            kind=kind,
            github_org=self.resolve_github_org(settings),
            repo=self.resolve_repo(settings),
            prebuilt_path=self.prebuilt_genesis if kind is GenesisSourceKind.PREBUILT else None,
        )
