"""Rich terminal renderer for onboarding progress.

Prints one line per finished stage as the run advances and a summary
table once it ends.

Color scheme
------------
- green     : PASSED
- red       : FAILED
- yellow    : RUNNING
- cyan      : SKIPPED
- dim       : NOT_STARTED
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from valwizard.models.stages import StageState

if TYPE_CHECKING:
    from valwizard.stages.base import BaseStage, StageExecutionError


# ---------------------------------------------------------------------------
# State -> Rich markup mapping
# ---------------------------------------------------------------------------

_STATE_ICONS: dict[StageState, str] = {
    StageState.PASSED: "[green]PASSED[/green]",
    StageState.FAILED: "[bold red]FAILED[/bold red]",
    StageState.RUNNING: "[yellow]RUNNING[/yellow]",
    StageState.SKIPPED: "[cyan]SKIPPED[/cyan]",
    StageState.NOT_STARTED: "[dim]NOT STARTED[/dim]",
}


class ProgressRenderer:
    """Streams stage outcomes to a Rich console.

    Parameters
    ----------
    console:
        Rich Console instance.  A new one is created if not provided.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    # ------------------------------------------------------------------
    # Per-stage events
    # ------------------------------------------------------------------

    def stage_passed(self, stage: BaseStage, result: dict[str, Any]) -> None:
        marker = stage.completion_marker or f"{stage.display_name} done"
        self.console.print(f"[green]✓[/green] {marker}")

    def stage_skipped(self, stage: BaseStage) -> None:
        self.console.print(f"[dim]- {stage.display_name} skipped[/dim]")

    def stage_failed(self, stage: BaseStage, error: StageExecutionError) -> None:
        self.console.print(
            f"[bold red]✗ {stage.display_name} failed:[/bold red] {escape(str(error.cause))}"
        )

    # ------------------------------------------------------------------
    # Summary
    # ------------------------------------------------------------------

    def render_summary(
        self,
        stages: Sequence[BaseStage],
        states: dict[str, StageState],
        *,
        run_id: str = "",
    ) -> Panel:
        """Render final stage states as a Panel containing a Table."""
        table = Table(show_header=True, header_style="bold cyan", expand=True)
        table.add_column("#", style="dim", width=3, justify="right")
        table.add_column("Stage", min_width=22)
        table.add_column("ID", style="dim")
        table.add_column("State", min_width=12, justify="center")

        for index, stage in enumerate(stages, start=1):
            state = states.get(stage.stage_id, StageState.NOT_STARTED)
            table.add_row(str(index), stage.display_name, stage.stage_id, _STATE_ICONS[state])

        failed = any(state == StageState.FAILED for state in states.values())
        return Panel(
            table,
            title=f"[bold]Validator onboarding[/bold] {run_id}".rstrip(),
            border_style="red" if failed else "green",
            padding=(1, 2),
        )
