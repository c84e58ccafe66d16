"""Shared console output helpers."""
from rich.console import Console
from rich.markup import escape

# Initialize Rich console
console = Console(soft_wrap=True)


def log_info(message: str) -> None:
    console.print(f"[blue]\\[INFO][/] {escape(message)}")


def log_success(message: str) -> None:
    console.print(f"[green]\\[SUCCESS][/] {escape(message)}")


def log_warning(message: str) -> None:
    console.print(f"[yellow]\\[WARNING][/] {escape(message)}")


def log_error(message: str) -> None:
    console.print(f"[bold red]\\[ERROR][/] {escape(message)}")


def log_debug(message: str, enabled: bool = True) -> None:
    """Print a debug line when debugging is enabled."""
    if enabled:
        console.print(f"[dim]Debug: {escape(message)}[/]")
