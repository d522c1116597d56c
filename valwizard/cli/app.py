"""Main Typer application — imports and registers all CLI commands.

Entry point: ``valwizard`` (configured via pyproject.toml scripts).

Commands: wizard, files, verify, version.
"""

from __future__ import annotations

import typer
from rich.console import Console

from valwizard import __version__
from valwizard.cli.commands.files import files_cmd
from valwizard.cli.commands.verify import verify_cmd
from valwizard.cli.commands.wizard import wizard_cmd
from valwizard.cli.logging_utils import configure_logging
from valwizard.config import WizardSettings

app = typer.Typer(
    name="valwizard",
    help="Validator onboarding wizard: keys, genesis, node files and account manifest.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


@app.callback()
def main_callback(
    log_level: str = typer.Option(
        None, "--log-level", help="Log level (default: VALWIZARD_LOG_LEVEL or INFO)."
    ),
) -> None:
    """Configure logging before any subcommand runs."""
    settings = WizardSettings()
    configure_logging((log_level or settings.log_level).upper(), debug=settings.debug)


# Register subcommands
app.command(name="wizard", help="Onboard a new validator node.")(wizard_cmd)
app.command(name="files", help="Download genesis and write node config files.")(files_cmd)
app.command(name="verify", help="Verify an account manifest offline.")(verify_cmd)


@app.command(name="version", help="Show the installed version.")
def version_cmd() -> None:
    """Print the valwizard version."""
    Console().print(f"valwizard [bold]{__version__}[/bold]")


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
