"""Genesis sourcing — fetch, copy or reference the network's genesis blob.

Exactly one strategy runs per onboarding: the ``GenesisSource`` variant is
selected once from the request and dispatched here.
"""

from __future__ import annotations

import logging
import shutil
from importlib import resources
from pathlib import Path

import httpx

from valwizard.bridge.upstream import fetch_bytes
from valwizard.config import WizardSettings
from valwizard.core.errors import GenesisSourceError
from valwizard.core.hasher import atomic_write_bytes, sha256_hex
from valwizard.models.request import GenesisSource, GenesisSourceKind

logger = logging.getLogger(__name__)

GENESIS_FILE_NAME = "genesis.blob"


def genesis_archive_url(github_org: str, repo: str, settings: WizardSettings) -> str:
    base = settings.genesis_archive_base_url.rstrip("/")
    return f"{base}/{github_org}/{repo}/{settings.genesis_archive_branch}/{GENESIS_FILE_NAME}"


def fetch_genesis_files(
    home_path: Path,
    github_org: str | None = None,
    repo: str | None = None,
    *,
    client: httpx.Client | None = None,
    settings: WizardSettings | None = None,
) -> Path:
    """Download ``genesis.blob`` from the genesis archive into *home_path*."""
    settings = settings or WizardSettings()
    url = genesis_archive_url(
        github_org or settings.genesis_github_org,
        repo or settings.genesis_repo,
        settings,
    )
    blob = fetch_bytes(url, client=client, timeout=settings.http_timeout_seconds)
    path = atomic_write_bytes(Path(home_path) / GENESIS_FILE_NAME, blob)
    logger.info("Genesis blob %s downloaded to %s", sha256_hex(blob)[:16], path)
    return path


def bundled_genesis_blob(settings: WizardSettings | None = None) -> Path:
    """Path of the bundled test genesis fixture (overridable in settings)."""
    settings = settings or WizardSettings()
    if settings.test_genesis_path is not None:
        return settings.test_genesis_path
    return Path(str(resources.files("valwizard.fixtures").joinpath(GENESIS_FILE_NAME)))


def copy_test_genesis(home_path: Path, settings: WizardSettings | None = None) -> Path:
    """Copy the test genesis fixture into *home_path*."""
    source = bundled_genesis_blob(settings)
    target = Path(home_path) / GENESIS_FILE_NAME
    target.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(source, target)
    logger.info("Test genesis copied from %s to %s", source, target)
    return target


def source_genesis(
    source: GenesisSource,
    home_path: Path,
    *,
    fetch=fetch_genesis_files,
    copy_fixture=copy_test_genesis,
    settings: WizardSettings | None = None,
) -> Path:
    """Run the selected strategy and return the resolved genesis path."""
    if source.kind is GenesisSourceKind.GIT_FETCH:
        return fetch(home_path, source.github_org, source.repo, settings=settings)
    if source.kind is GenesisSourceKind.TEST_FIXTURE:
        return copy_fixture(home_path, settings=settings)

    if source.prebuilt_path is None:
        raise GenesisSourceError("A prebuilt genesis path is required; pass --prebuilt-genesis.")
    if not source.prebuilt_path.is_file():
        raise GenesisSourceError(f"Prebuilt genesis not found: {source.prebuilt_path}")
    logger.info("Using prebuilt genesis %s", source.prebuilt_path)
    return source.prebuilt_path
