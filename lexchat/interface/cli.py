# lexchat/interface/cli.py

from typing import List
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.prompt import Prompt
from rich import box

from lexchat.domain.models import Entity


console = Console()


def display_welcome_banner() -> None:
    console.print(Panel.fit(
        "[bold cyan]⚖️  LexChat Legal Assistant[/bold cyan]\n"
        "[dim]Hashed bag-of-words retrieval + Gemini / OpenRouter[/dim]",
        box=box.DOUBLE,
        border_style="cyan",
    ))


def display_summary(summary: str, model: str) -> None:
    console.print(Panel(
        summary,
        title="[bold]Summary[/bold]",
        subtitle=f"[dim]{model}[/dim]",
        border_style=_model_to_color(model),
        box=box.ROUNDED,
        padding=(1, 2),
    ))


def display_entities(entities: List[Entity], limit: int = 20) -> None:
    if not entities:
        console.print("[dim]No entities found.[/dim]")
        return

    table = Table(title="Entities", box=box.SIMPLE_HEAVY)
    table.add_column("Label", style="bold")
    table.add_column("Text")
    table.add_column("Offset", justify="right", style="dim")
    for entity in entities[:limit]:
        table.add_row(entity.label, entity.text, str(entity.start))
    console.print(table)

    if len(entities) > limit:
        console.print(f"[dim]... and {len(entities) - limit} more[/dim]")


def display_suggestions(questions: List[str]) -> None:
    console.print("\n[bold]Suggested questions:[/bold]")
    for rank, question in enumerate(questions, start=1):
        console.print(f"  [yellow]{rank}.[/yellow] {question}")


def prompt_for_question() -> str:
    return Prompt.ask("\n[bold yellow]❓ Your question[/bold yellow]")


def display_answer(question: str, answer: str, model: str) -> None:
    console.print(Panel(
        answer,
        title=f"[bold]{question[:60]}[/bold]",
        subtitle=f"[dim]{model}[/dim]",
        border_style=_model_to_color(model),
        box=box.ROUNDED,
        padding=(1, 2),
    ))


def display_error(message: str) -> None:
    console.print(f"\n[bold red]✗ Error:[/bold red] {message}\n")


def ask_continue() -> bool:
    answer = Prompt.ask(
        "\n[dim]Ask another question?[/dim]",
        choices=["y", "n"],
        default="y",
    )
    return answer.lower() == "y"


def _model_to_color(model: str) -> str:
    if model in ("local-fallback", "fallback"):
        return "yellow"
    return "green"
