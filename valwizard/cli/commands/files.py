"""``valwizard files`` — (re)write genesis and node files for a node home.

Reads ``node_config.json`` from the home written by an earlier wizard run,
obtains ``genesis.blob`` and writes the validator and fullnode yaml files.
Useful after a chain restart publishes a new genesis.
"""

from __future__ import annotations

from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from valwizard.config import WizardSettings
from valwizard.core.errors import WizardError
from valwizard.keys.key_store import operator_namespace
from valwizard.models.node_config import CONFIG_FILE_NAME
from valwizard.models.request import GenesisSource, GenesisSourceKind
from valwizard.node.app_config import load_app_config
from valwizard.node.files import write_node_config_files
from valwizard.node.genesis import source_genesis

console = Console()


def files_cmd(
    home_path: Path = typer.Option(None, "--home-path", help="Node home directory."),
    github_org: str = typer.Option(None, "--github-org", help="Genesis archive organization."),
    repo: str = typer.Option(None, "--repo", help="Genesis archive repository."),
    prebuilt_genesis: Path = typer.Option(
        None, "--prebuilt-genesis", help="Use an existing genesis.blob instead of downloading."
    ),
    ci: bool = typer.Option(False, "--ci", help="Use the bundled test genesis."),
) -> None:
    """Download genesis and write node config files."""
    settings = WizardSettings()
    home = Path(home_path or settings.default_home).expanduser().absolute()

    if ci and prebuilt_genesis is not None:
        console.print("[bold red]Choose one of --ci and --prebuilt-genesis.[/bold red]")
        raise typer.Exit(code=1)

    try:
        config = load_app_config(home)
    except (OSError, ValidationError) as exc:
        console.print(
            f"[bold red]No usable {CONFIG_FILE_NAME} in {home}:[/bold red] {escape(str(exc))}\n"
            "Run [bold]valwizard wizard[/bold] first."
        )
        raise typer.Exit(code=1) from exc

    if prebuilt_genesis is not None:
        kind = GenesisSourceKind.PREBUILT
    elif ci:
        kind = GenesisSourceKind.TEST_FIXTURE
    else:
        kind = GenesisSourceKind.GIT_FETCH
    source = GenesisSource(
        kind=kind,
        github_org=github_org or settings.genesis_github_org,
        repo=repo or settings.genesis_repo,
        prebuilt_path=prebuilt_genesis,
    )

    try:
        genesis_path = source_genesis(source, home, settings=settings)
        written = write_node_config_files(
            home,
            config.chain_info.chain_id,
            source.github_org,
            source.repo,
            operator_namespace(config.profile.auth_key),
            genesis_path,
            False,
            config.chain_info.base_waypoint,
        )
    except WizardError as exc:
        console.print(f"[bold red]Could not write node files:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc

    table = Table(title="Node files", show_header=True, header_style="bold cyan")
    table.add_column("File", style="cyan")
    table.add_column("Path")
    table.add_row("genesis", str(genesis_path))
    for path in written:
        table.add_row(path.name, str(path))
    console.print(table)
