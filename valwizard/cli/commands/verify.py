"""``valwizard verify PATH`` — check an account manifest offline.

Verifies the block zero proof, every autopay signature and the alignment
between instructions and signed transactions. Exits 1 on any problem.
"""

from __future__ import annotations

from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from valwizard.manifest.writer import load_account_manifest, verify_account_manifest

console = Console()


def verify_cmd(
    path: Path = typer.Argument(..., help="account.json, or the directory holding it."),
) -> None:
    """Verify an account manifest."""
    try:
        manifest = load_account_manifest(path)
    except (OSError, ValidationError) as exc:
        console.print(f"[bold red]Cannot read manifest:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc

    table = Table(title="Account manifest", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Account", manifest.ow_human_name)
    table.add_row("Operator", manifest.op_address)
    table.add_row("Node IP", manifest.node_ip)
    table.add_row("Chain id", str(manifest.chain_id))
    table.add_row(
        "Block zero",
        "present" if manifest.block_zero is not None else "[yellow]missing[/yellow]",
    )
    table.add_row("Autopay instructions", str(len(manifest.autopay_instructions or [])))
    table.add_row(
        "Autopay signed",
        "unsigned" if manifest.autopay_signed is None else str(len(manifest.autopay_signed)),
    )
    console.print(table)

    problems = verify_account_manifest(manifest)
    if problems:
        for problem in problems:
            console.print(f"[bold red]✗[/bold red] {escape(problem)}")
        raise typer.Exit(code=1)
    console.print("[bold green]Manifest verified.[/bold green]")
