"""Styled console output for benchmark scripts."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape

console = Console(highlight=False)

RULE_WIDTH = 60


def header(title: str) -> None:
    lines = title.split("\n")
    width = max(max(len(line) for line in lines), 58)
    border = "─" * (width + 2)

    console.print()
    console.print(f"[cyan]┌{border}┐[/cyan]")
    for line in lines:
        console.print(f"[cyan]│[/cyan] [bold white]{escape(line.ljust(width))}[/bold white] [cyan]│[/cyan]")
    console.print(f"[cyan]└{border}┘[/cyan]")
    console.print()


def section(title: str) -> None:
    console.print()
    console.print(f"[cyan]{'─' * RULE_WIDTH}[/cyan]")
    console.print(f"[bold white]  {escape(title)}[/bold white]")
    console.print(f"[cyan]{'─' * RULE_WIDTH}[/cyan]")
    console.print()


def step(num: int, description: str) -> None:
    console.print(f"\n[cyan]  Step {num}: [/cyan]{escape(description)}")


def info(message: str) -> None:
    console.print(f"[bright_black]    → [/bright_black]{escape(message)}")


def success(message: str) -> None:
    console.print(f"[green]    ✓ [/green]{escape(message)}")


def warn(message: str) -> None:
    console.print(f"[yellow]    ⚠ [/yellow]{escape(message)}")


def error(message: str) -> None:
    console.print(f"[red]    ✗ [/red]{escape(message)}")


def config(model: str, target_url: str) -> None:
    console.print(f"[bright_black]  Model: [/bright_black]{escape(model)}")
    console.print(f"[bright_black]  Server: [/bright_black]{escape(target_url)}")


def format_number(value: float) -> str:
    return f"{round(value):,}"


def format_bytes(size: int) -> str:
    return f"{size / 1024:.1f} KB"
