"""Rich console shared by the CLI."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape

console = Console()


def print_success(message: str) -> None:
    console.print(f"[green]✓[/green] {escape(message)}")


def print_warning(message: str) -> None:
    console.print(f"[yellow]![/yellow] {escape(message)}")


def print_error(message: str) -> None:
    console.print(f"[red]✗[/red] {escape(message)}", highlight=False)
