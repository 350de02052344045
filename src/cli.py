"""Click CLI: loads config, checks the backend, and drives the dashboard session."""

import asyncio
import logging
import sys
from pathlib import Path

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn

from config.config_loader import ApiConfig, AppConfig, load_config
from src.backend.http_backend import HttpAnalysisBackend
from src.healthcheck import check_backend
from src.models import Phase, SessionState
from src.orchestrator import AnalysisOrchestrator
from src.output import print_dashboard, print_history, save_report
from src.view import PANEL_RESULT, project

logger = logging.getLogger(__name__)

console = Console(legacy_windows=False)

_PHASE_DESCRIPTIONS = {
    Phase.IDLE: "Loading parties...",
    Phase.LOADING_SNAPSHOT: "Fetching latest snapshot for {party}...",
    Phase.LOADING_ANALYSIS: "Analyzing {party}...",
    Phase.READY: "Done",
    Phase.FAILED: "Failed",
}

_HELP_LINE = "[dim]number/name: select party · r: refresh · h: history · s: save · q: quit · enter: redraw[/dim]"


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


def _describe(state: SessionState) -> str:
    party = state.selected_party.name if state.selected_party else ""
    return _PHASE_DESCRIPTIONS[state.phase].format(party=party)


async def _probe_backend(api_config: ApiConfig, timeout_sec: float) -> tuple[bool, str]:
    async with HttpAnalysisBackend(api_config) as backend:
        return await check_backend(backend, timeout_sec)


def _check_backend_or_confirm(api_config: ApiConfig, timeout_sec: float) -> None:
    """Ping the backend; on failure ask whether to continue with offline data.

    Exits if the user declines.
    """
    console.print("\n[bold]Checking backend...[/bold]")
    ok, err = asyncio.run(_probe_backend(api_config, timeout_sec))
    if ok:
        console.print("  [green]OK  [/green] analysis service reachable\n")
        return

    short_err = err.splitlines()[0][:120] if err else "unknown error"
    console.print(f"  [red]FAIL[/red] {escape(short_err)}")
    if not click.confirm("Continue with the offline party list?", default=True):
        sys.exit(0)
    console.print()


def _resolve_command(command: str, orchestrator: AnalysisOrchestrator) -> str | None:
    """Map interactive input to an action name, selecting a party when asked.

    Returns the action ("redraw", "refresh", "history", "save", "quit") or None
    when a party was selected.
    """
    command = command.strip()
    lowered = command.lower()
    if lowered in {"", "d"}:
        return "redraw"
    if lowered in {"q", "quit", "exit"}:
        return "quit"
    if lowered in {"r", "refresh"}:
        return "refresh"
    if lowered in {"h", "history"}:
        return "history"
    if lowered in {"s", "save"}:
        return "save"

    parties = orchestrator.state.parties
    if command.isdigit() and 1 <= int(command) <= len(parties):
        orchestrator.select(parties[int(command) - 1])
        return None
    orchestrator.select_by_name(command)
    return None


async def _run_interactive(orchestrator: AnalysisOrchestrator, output_dir: Path) -> None:
    """Prompt for commands while analyses resolve in the background."""
    print_dashboard(project(orchestrator.state))
    while True:
        console.print(_HELP_LINE)
        # The prompt blocks in a worker thread so pending requests keep resolving.
        command = await asyncio.to_thread(click.prompt, ">", default="", show_default=False)
        try:
            action = _resolve_command(command, orchestrator)
        except ValueError as exc:
            console.print(f"[red]{escape(str(exc))}[/red]")
            continue

        if action == "quit":
            break
        if action == "refresh":
            if orchestrator.refresh() is None:
                console.print("[yellow]Select a party first.[/yellow]")
        elif action == "history":
            party = orchestrator.state.selected_party
            if party is not None:
                print_history(party, await orchestrator.history(party))
                continue
        elif action == "save":
            try:
                saved = save_report(project(orchestrator.state), output_dir)
                console.print(f"[dim]Saved to: {saved}[/dim]")
            except ValueError as exc:
                console.print(f"[yellow]{escape(str(exc))}[/yellow]")
            continue

        print_dashboard(project(orchestrator.state))


async def _run_dashboard(
    config: AppConfig,
    party_name: str | None,
    force_refresh: bool,
    show_history: bool,
    interactive: bool,
    save_dir: Path | None,
) -> SessionState:
    """Run one dashboard session and return the final state."""
    async with HttpAnalysisBackend(config.api) as backend:
        auto_select = config.dashboard.auto_select_first and party_name is None

        if interactive:
            orchestrator = AnalysisOrchestrator(backend, auto_select=auto_select)
            await orchestrator.load_parties()
            if party_name:
                orchestrator.select_by_name(party_name)
            await _run_interactive(orchestrator, save_dir or config.dashboard.output_dir)
            await orchestrator.wait_idle()
            return orchestrator.state

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            TimeElapsedColumn(),
            console=console,
            transient=True,
        ) as progress:
            task_id = progress.add_task("Loading parties...", total=None)

            def on_change(state: SessionState) -> None:
                progress.update(task_id, description=_describe(state))

            orchestrator = AnalysisOrchestrator(backend, on_change=on_change, auto_select=auto_select)
            await orchestrator.load_parties()
            if party_name:
                orchestrator.select_by_name(party_name)
            if force_refresh:
                # Supersedes the pending snapshot lookup of the selection above.
                orchestrator.refresh()
            await orchestrator.wait_idle()

        view = project(orchestrator.state)
        print_dashboard(view)

        party = orchestrator.state.selected_party
        if show_history and party is not None:
            print_history(party, await orchestrator.history(party))

        if save_dir is not None and view.panel == PANEL_RESULT:
            saved = save_report(view, save_dir)
            console.print(f"\n[dim]Saved to: {saved}[/dim]")

        return orchestrator.state


@click.command()
@click.option("--party", "party_name", default=None, help="Party to show (default: first in the catalog)")
@click.option("--refresh", "force_refresh", is_flag=True, help="Force a fresh analysis, bypassing the snapshot")
@click.option("--history", "show_history", is_flag=True, help="Also print past analyses for the party")
@click.option("--interactive", is_flag=True, help="Keep the dashboard open and read commands")
@click.option("--save", "save_path", default=None, type=click.Path(file_okay=False),
              help="Write a markdown report of the result into this directory")
@click.option("--api-url", default=None, help="Backend base URL (default: from config / environment)")
@click.option("--verbose", is_flag=True, help="Enable DEBUG-level logging")
@click.option("--skip-health-check", is_flag=True, default=False,
              help="Skip the backend connectivity check at startup")
def main(
    party_name: str | None,
    force_refresh: bool,
    show_history: bool,
    interactive: bool,
    save_path: str | None,
    api_url: str | None,
    verbose: bool,
    skip_health_check: bool,
) -> None:
    """TN Election Pulse -- political sentiment dashboard.

    \b
    Examples:
      python -m src.cli
      python -m src.cli --party AIADMK --refresh
      python -m src.cli --party DMK --history --save ./reports
      python -m src.cli --interactive
      python -m src.cli --api-url http://analysis.local:3000/api/v1
    """
    if sys.platform == "win32":
        if hasattr(sys.stdout, "reconfigure"):
            sys.stdout.reconfigure(encoding="utf-8", errors="replace")
        if hasattr(sys.stderr, "reconfigure"):
            sys.stderr.reconfigure(encoding="utf-8", errors="replace")

    load_dotenv()
    _setup_logging(verbose)

    try:
        config = load_config()
    except FileNotFoundError as exc:
        console.print(f"[bold red]Config error:[/bold red] {escape(str(exc))}")
        sys.exit(1)

    if api_url:
        config.api.base_url = api_url

    if not skip_health_check:
        _check_backend_or_confirm(config.api, config.dashboard.health_check_timeout_sec)

    try:
        state = asyncio.run(
            _run_dashboard(
                config=config,
                party_name=party_name,
                force_refresh=force_refresh,
                show_history=show_history,
                interactive=interactive,
                save_dir=Path(save_path) if save_path else None,
            )
        )
    except ValueError as exc:
        console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        sys.exit(1)

    if state.phase is Phase.FAILED:
        sys.exit(2)


if __name__ == "__main__":
    main()
