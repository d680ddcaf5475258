"""Output formatting utilities with rich."""

import json
from typing import Any, Iterable

import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from launchcraft.core.errors import FieldError
from launchcraft.schemas.session import Project


def dump_payload(data: Any, output_format: str = "json") -> str:
    """Serialize a wire payload as JSON or YAML, keeping non-ASCII text readable."""
    if output_format == "yaml":
        return yaml.safe_dump(data, allow_unicode=True, default_flow_style=False, sort_keys=False)
    return json.dumps(data, indent=2, ensure_ascii=False)


class OutputFormatter:
    """Formats CLI output; messages go to stderr so stdout stays pipeable."""

    def __init__(self, force_color: bool = False):
        """Initialize formatter."""
        self.console = Console(force_terminal=force_color or None)
        self.err_console = Console(stderr=True, force_terminal=force_color or None)

    def print_stats(self, stats: dict[str, Any], title: str = "Generation Statistics") -> None:
        """Print statistics in a formatted table."""
        table = Table(title=title, show_header=True, header_style="bold magenta")
        table.add_column("Metric", style="cyan")
        table.add_column("Value", style="green")

        for key, value in stats.items():
            table.add_row(key.replace("_", " ").title(), str(value))

        self.err_console.print(table)

    def print_field_errors(self, errors: Iterable[FieldError]) -> None:
        table = Table(title="Validation Errors", show_header=True, header_style="bold red")
        table.add_column("Field", style="cyan")
        table.add_column("Message")

        for error in errors:
            table.add_row(escape(error.field), escape(error.message))

        self.err_console.print(table)

    def print_projects(self, projects: list[Project], current_id: str | None = None) -> None:
        if not projects:
            self.print_info("No saved projects")
            return

        table = Table(title="Projects", show_header=True, header_style="bold magenta")
        table.add_column("ID", style="cyan", no_wrap=True)
        table.add_column("Category")
        table.add_column("Concept")
        table.add_column("Results")
        table.add_column("Updated", style="dim")

        for project in projects:
            marker = " *" if project.id == current_id else ""
            concept = project.description.concept
            table.add_row(
                project.id + marker,
                project.description.category.value,
                concept[:40] + "..." if len(concept) > 40 else concept,
                ", ".join(kind.value for kind in project.results) or "-",
                project.updated_at.strftime("%Y-%m-%d %H:%M"),
            )

        self.console.print(table)

    def print_catalog(self, catalog: dict[str, Any]) -> None:
        """Print each catalog section as a value/label table."""
        for section, entries in catalog.items():
            table = Table(title=section, show_header=True, header_style="bold magenta")
            table.add_column("Value", style="cyan")
            table.add_column("Label")
            for entry in entries:
                table.add_row(entry["value"], entry["label"])
            self.console.print(table)

    def print_success(self, message: str) -> None:
        """Print success message."""
        self.err_console.print(f"[green]✓[/green] {escape(message)}")

    def print_error(self, message: str) -> None:
        """Print error message."""
        self.err_console.print(f"[red]✗[/red] {escape(message)}")

    def print_info(self, message: str) -> None:
        """Print info message."""
        self.err_console.print(f"[blue]ℹ[/blue] {escape(message)}")
