"""Rich console output utilities for the gallery CLI."""

from typing import Any

from rich.console import Console
from rich.table import Table

from gallery.models import Extension, GalleryOutput, Release


console = Console()
error_console = Console(stderr=True)


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]✓[/green] {message}")


def print_error(message: str) -> None:
    """Print an error message to stderr."""
    error_console.print(f"[red]✗[/red] {message}")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]![/yellow] {message}")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]→[/blue] {message}")


def print_settings(settings: dict[str, Any]) -> None:
    """Print run settings as a table."""
    table = Table(show_header=True, header_style="bold")
    table.add_column("Setting")
    table.add_column("Value")

    for key, value in sorted(settings.items()):
        table.add_row(key, str(value))

    console.print(table)


def print_extensions(extensions: list[Extension], title: str = "Extensions") -> None:
    """Print extensions as a table."""
    if not extensions:
        print_info("No extensions published.")
        return

    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("Name", style="cyan")
    table.add_column("Latest", style="green")
    table.add_column("Released")
    table.add_column("Versions", justify="right")
    table.add_column("Min Connect", style="yellow")
    table.add_column("Category")
    table.add_column("Tags")

    for ext in extensions:
        latest = ext.latest_version
        table.add_row(
            ext.name,
            latest.version,
            latest.released[:10],
            str(len(ext.versions)),
            latest.minimum_connect_version,
            ext.category or "-",
            ", ".join(ext.tags) or "-",
        )

    console.print(table)


def print_gallery(output: GalleryOutput) -> None:
    """Print a gallery document: categories, extensions and vocabulary."""
    if output.categories:
        table = Table(title="Categories", show_header=True, header_style="bold")
        table.add_column("ID", style="cyan")
        table.add_column("Title")
        table.add_column("Extensions", justify="right")

        for category in output.categories:
            category_id = str(category.get("id", ""))
            count = sum(1 for e in output.extensions if e.category == category_id)
            table.add_row(category_id, str(category.get("title") or ""), str(count))
        console.print(table)

    print_extensions(output.extensions)

    console.print(f"[dim]Tags:[/dim] {', '.join(output.tags) or '-'}")
    console.print(
        f"[dim]Required features:[/dim] {', '.join(output.required_features) or '-'}"
    )


def print_releases(releases: list[Release]) -> None:
    """Print canonical releases as a table."""
    if not releases:
        print_info("No releases found.")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Tag", style="cyan")
    table.add_column("Published")
    table.add_column("Assets")

    for release in releases:
        table.add_row(
            release.tag_name,
            release.published_at[:10] or "-",
            ", ".join(a.name for a in release.assets) or "-",
        )

    console.print(table)
