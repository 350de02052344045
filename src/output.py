"""Rich console rendering of the dashboard view and markdown report export."""

import logging
from datetime import datetime
from pathlib import Path

from rich.columns import Columns
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table
from rich.text import Text

from src.models import AnalysisResult, Party
from src.view import PANEL_EMPTY, PANEL_ERROR, PANEL_LOADING, PANEL_RESULT, DashboardView

logger = logging.getLogger(__name__)

console = Console(legacy_windows=False)

_GAUGE_WIDTH = 20


def _slug(text: str, max_len: int = 40) -> str:
    """Convert text to a filename-safe slug."""
    import re
    slug = re.sub(r"[^\w\s-]", "", text.lower())
    slug = re.sub(r"[\s_-]+", "-", slug).strip("-")
    return slug[:max_len]


def render_party_picker(view: DashboardView) -> Text:
    """One numbered button per party; the active one is highlighted."""
    picker = Text()
    for index, button in enumerate(view.parties, start=1):
        if index > 1:
            picker.append("  ")
        label = f" {index}. {button.name} "
        if button.active:
            picker.append(label, style=f"bold white on {button.color}")
        else:
            picker.append(label, style=button.color)
    if view.is_fallback:
        picker.append("  (offline party list)", style="dim italic")
    return picker


def render_gauge(score: int, color: str) -> Text:
    filled = round(score / 100 * _GAUGE_WIDTH)
    gauge = Text()
    gauge.append("█" * filled, style=color)
    gauge.append("░" * (_GAUGE_WIDTH - filled), style="dim")
    gauge.append(f"  {score}", style=f"bold {color}")
    gauge.append(" / 100", style="dim")
    return gauge


def render_result_grid(view: DashboardView) -> Panel:
    gauge = Panel(
        render_gauge(view.sentiment_score or 0, view.score_color or "white"),
        title="Digital Momentum Score",
        subtitle=view.score_band,
    )
    if view.key_topics:
        topics_body = Text(" · ".join(view.key_topics))
    else:
        topics_body = Text("No specific topics found", style="dim")
    topics = Panel(topics_body, title="Key Topics")
    emotion_style = "bold" if view.emotion else "dim"
    emotion = Panel(Text(view.emotion_label or "", style=emotion_style), title="Dominant Emotion")

    return Panel(
        Columns([gauge, topics, emotion], expand=True),
        title=f"[bold]{escape(view.selected_party_name or '')}[/bold]",
        subtitle="[yellow]Refreshing data...[/yellow]" if view.updating else None,
        border_style="yellow" if view.updating else "green",
    )


def render_dashboard(view: DashboardView) -> list:
    """Build the renderables for the current view, top to bottom."""
    parts: list = [render_party_picker(view)]

    if view.panel == PANEL_LOADING:
        parts.append(Panel(Text(view.loading_message), border_style="cyan"))
    elif view.panel == PANEL_ERROR:
        parts.append(
            Panel(
                Text.assemble(
                    (view.error or "", "red"),
                    "\n",
                    ("Press r to try again.", "dim"),
                ),
                title="[bold red]Oops! Something went wrong.[/bold red]",
                border_style="red",
            )
        )
    elif view.panel == PANEL_EMPTY:
        parts.append(
            Panel(
                Text("Select a party to view their digital momentum.", style="dim"),
                title="No Data Yet",
            )
        )
    else:
        parts.append(render_result_grid(view))

    parts.append(Text(f"[{view.refresh_label}]", style="bold" if view.can_refresh else "dim"))
    return parts


def print_dashboard(view: DashboardView) -> None:
    """Print the dashboard to the console."""
    console.print(Rule("[bold cyan]TN Election Pulse[/bold cyan]"))
    for part in render_dashboard(view):
        console.print(part)


def print_history(party: Party, results: list[AnalysisResult]) -> None:
    """Print past analyses for a party as a table."""
    if not results:
        console.print(f"[dim]No history for {escape(party.name)}.[/dim]")
        return
    table = Table(title=Text(f"{party.name} history"))
    table.add_column("Date")
    table.add_column("Score", justify="right")
    table.add_column("Emotion")
    table.add_column("Key topics")
    for result in results:
        table.add_row(
            escape(result.created_at or "-"),
            str(result.sentiment_score),
            escape(result.emotion or "-"),
            escape(", ".join(result.key_topics) or "-"),
        )
    console.print(table)


def save_report(view: DashboardView, output_dir: Path) -> Path:
    """Save the currently displayed analysis as a markdown file.

    Raises:
        ValueError: If the view does not show an analysis result.

    Returns:
        Path to the saved file.
    """
    if view.panel != PANEL_RESULT or view.selected_party_name is None:
        raise ValueError("No analysis result to save")

    output_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    filepath = output_dir / f"{timestamp}_{_slug(view.selected_party_name)}.md"

    lines: list[str] = [
        f"# Election Pulse: {view.selected_party_name}",
        "",
        f"**Date:** {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
        f"**Score:** {view.sentiment_score} / 100 ({view.score_band})",
        f"**Dominant emotion:** {view.emotion_label}",
    ]
    if view.is_fallback:
        lines.append("**Party list:** offline fallback")
    lines += ["", "## Key Topics", ""]
    if view.key_topics:
        lines += [f"- {topic}" for topic in view.key_topics]
    else:
        lines.append("No specific topics found")
    lines.append("")

    filepath.write_text("\n".join(lines), encoding="utf-8")
    logger.info("Report saved to: %s", filepath)
    return filepath
