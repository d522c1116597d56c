"""``valwizard wizard`` — onboard a validator node end to end.

Builds an ``OnboardingRequest`` from the options, then runs every stage
with live progress output. On failure the failing stage and its cause are
printed and the command exits with status 1; files already written stay in
place so the run can be repeated.
"""

from __future__ import annotations

from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from valwizard.config import WizardSettings
from valwizard.core.errors import InputError
from valwizard.core.orchestrator import OnboardingOrchestrator
from valwizard.models.request import OnboardingRequest
from valwizard.monitor.renderer import ProgressRenderer
from valwizard.stages import StageExecutionError

console = Console()


def wizard_cmd(
    output_path: Path = typer.Option(
        None, "--output-path", "-o", help="Directory for account.json (default: node home)."
    ),
    home_path: Path = typer.Option(None, "--home-path", help="Node home directory."),
    chain_id: int = typer.Option(None, "--chain-id", help="Chain id (default from settings)."),
    github_org: str = typer.Option(None, "--github-org", help="Genesis archive organization."),
    repo: str = typer.Option(None, "--repo", help="Genesis archive repository."),
    prebuilt_genesis: Path = typer.Option(
        None, "--prebuilt-genesis", help="Use an existing genesis.blob."
    ),
    fetch_git_genesis: bool = typer.Option(
        False, "--fetch-git-genesis", help="Download genesis.blob from the archive."
    ),
    ci: bool = typer.Option(
        False, "--ci", help="Use the bundled test genesis fixture."
    ),
    skip_mining: bool = typer.Option(False, "--skip-mining", help="Do not mine block zero."),
    template_url: str = typer.Option(
        None, "--template-url", "-u", help="Copy autopay instructions from this node."
    ),
    autopay_file: Path = typer.Option(
        None, "--autopay-file", "-a", help="Pay instructions JSON file."
    ),
    upstream_peer: str = typer.Option(
        None, "--upstream-peer", help="URL of a node to query the chain through."
    ),
    source_path: Path = typer.Option(None, "--source-path", help="Node source checkout."),
    waypoint: str = typer.Option(None, "--waypoint", help="Base waypoint <version>:<hash>."),
    epoch: int = typer.Option(None, "--epoch", help="Base epoch."),
    ip: str = typer.Option(None, "--ip", help="Public IP of this node."),
    genesis_ceremony: bool = typer.Option(
        False, "--genesis-ceremony", help="Genesis ceremony: record autopay unsigned."
    ),
) -> None:
    """Onboard a new validator node.

    Set VALWIZARD_MNEMONIC to skip the mnemonic prompt in any mode.
    """
    settings = WizardSettings()

    try:
        request = OnboardingRequest(
            output_path=output_path,
            home_path=home_path,
            chain_id=chain_id,
            github_org=github_org,
            repo=repo,
            prebuilt_genesis=prebuilt_genesis,
            fetch_git_genesis=fetch_git_genesis,
            ci=ci,
            skip_mining=skip_mining,
            template_url=template_url,
            autopay_file=autopay_file,
            upstream_peer=upstream_peer,
            source_path=source_path,
            waypoint=waypoint,
            epoch=epoch,
            ip=ip,
            genesis_ceremony=genesis_ceremony,
        )
    except (InputError, ValidationError) as exc:
        console.print(f"[bold red]Invalid options:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc

    renderer = ProgressRenderer(console=console)
    orchestrator = OnboardingOrchestrator(request, settings=settings, reporter=renderer)

    console.print(
        Panel(
            "[bold]Validator onboarding[/bold]\n\n"
            f"Run: {orchestrator.run_id}\n"
            f"Mode: {'genesis ceremony' if genesis_ceremony else 'join existing chain'}",
            border_style="cyan",
            padding=(1, 2),
        )
    )

    try:
        context = orchestrator.run()
    except StageExecutionError as exc:
        console.print(
            renderer.render_summary(
                orchestrator.stages, orchestrator.get_states(), run_id=orchestrator.run_id
            )
        )
        console.print(
            f"[bold red]Stage {exc.stage_id} failed:[/bold red] {escape(str(exc.cause))}"
        )
        raise typer.Exit(code=1) from exc

    console.print(
        renderer.render_summary(
            orchestrator.stages, orchestrator.get_states(), run_id=orchestrator.run_id
        )
    )
    config = context.require_config()
    console.print(f"[green]Account manifest:[/green] {context.manifest_path}")
    console.print(
        "Start your node, then ask someone with GAS to run "
        f"[bold]create-validator -u http://{config.profile.ip}[/bold]"
    )
