# problem_finder/interface/cli.py

from typing import List, Optional
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.prompt import Prompt
from rich import box

from problem_finder.domain.models import PlatformStatus, QueryResult, TrainingStats


console = Console()


def display_welcome_banner() -> None:
    console.print(Panel.fit(
        "[bold cyan]🔍 Problem Finder[/bold cyan]\n"
        "[dim]TF-IDF keyword search over competitive-programming problems[/dim]",
        box=box.DOUBLE,
        border_style="cyan",
    ))


def prompt_for_query() -> str:
    return Prompt.ask("\n[bold yellow]❓ Search problems[/bold yellow]")


def display_results(query: str, results: List[QueryResult], limit: int = 10) -> None:
    console.print(f"\n[bold]Results for:[/bold] [italic]\"{query}\"[/italic]\n")

    if not results:
        console.print("[dim]No matching problems.[/dim]")
        return

    table = Table(box=box.ROUNDED, show_lines=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Problem", style="bold white")
    table.add_column("Score", justify="right")
    table.add_column("URL", style="cyan", overflow="fold")

    shown = results[:limit] if limit > 0 else results
    for rank, result in enumerate(shown, start=1):
        score_color = _score_to_color(result.score)
        table.add_row(
            str(rank),
            result.name,
            f"[{score_color}]{result.score:.3f}[/{score_color}]",
            result.url,
        )

    console.print(table)
    if len(shown) < len(results):
        console.print(f"[dim]… {len(results) - len(shown)} more[/dim]")


def display_statuses(statuses: List[PlatformStatus]) -> None:
    table = Table(title="Platforms", box=box.ROUNDED)
    table.add_column("Platform", style="bold")
    table.add_column("Data")
    table.add_column("Loaded")
    table.add_column("Problems", justify="right")
    table.add_column("Vocabulary", justify="right")
    table.add_column("Note", style="dim")

    for status in statuses:
        note = status.error or ("fallback search" if status.degraded else "")
        table.add_row(
            status.platform,
            _flag(status.data_ready),
            _flag(status.initialized),
            str(status.problem_count),
            str(status.vocabulary_size),
            note,
        )

    console.print(table)


def display_training_stats(platform: str, stats: TrainingStats) -> None:
    console.print(
        f"\n[green]✓[/green] {platform} index built: "
        f"[bold]{stats.problem_count}[/bold] problems, "
        f"[bold]{stats.vocabulary_size}[/bold] terms "
        f"(matrix {stats.matrix_rows}x{stats.matrix_columns}).\n"
    )


def display_analysis(analysis: Optional[dict]) -> None:
    if not analysis:
        display_error("Query analysis is not available for this platform.")
        return

    table = Table(title=f"Analysis: \"{analysis['query']}\"", box=box.SIMPLE)
    table.add_column("Metric", style="dim")
    table.add_column("Value", justify="right")
    table.add_row("Query terms", ", ".join(analysis["query_terms"]) or "-")
    table.add_row("Non-zero features", f"{analysis['non_zero_features']}/{analysis['total_features']}")
    table.add_row("Max similarity", f"{analysis['max_similarity']:.4f}")
    table.add_row("Min similarity", f"{analysis['min_similarity']:.4f}")
    table.add_row("Avg similarity", f"{analysis['avg_similarity']:.4f}")
    table.add_row("Above threshold", str(analysis["above_threshold"]))
    table.add_row("Significant matches", str(analysis["significant_matches"]))
    console.print(table)


def display_error(message: str) -> None:
    console.print(f"\n[bold red]✗ Error:[/bold red] {message}\n")


def ask_continue() -> bool:
    answer = Prompt.ask(
        "\n[dim]Search again?[/dim]",
        choices=["y", "n"],
        default="y",
    )
    return answer.lower() == "y"


def _flag(value: bool) -> str:
    return "[green]✓[/green]" if value else "[red]✗[/red]"


def _score_to_color(score: float) -> str:
    if score >= 0.5:
        return "green"
    elif score >= 0.2:
        return "yellow"
    else:
        return "red"
