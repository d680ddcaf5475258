"""CLI interface for LaunchCraft."""

import json
import os
import sys
from pathlib import Path
from typing import Any

import click
import yaml

from launchcraft.cli.formatters import OutputFormatter, dump_payload
from launchcraft.core.config import API_KEY_ENV_VARS, Config
from launchcraft.core.errors import ConfigurationError, GenerationError, ProjectValidationError
from launchcraft.core.logging import configure_logging
from launchcraft.core.pipeline import CopyPipeline
from launchcraft.core.provider_factory import SUPPORTED_PROVIDERS, create_generation_client
from launchcraft.core.store import FileStateRepository, ProjectStore
from launchcraft.core.usage import UsageTracker
from launchcraft.core.validator import validate_project
from launchcraft.schemas.catalog import catalog_as_dict
from launchcraft.schemas.copy import GenerationKind


def _read_project_file(path: Path) -> Any:
    """Read a project description from a JSON or YAML file ('-' for stdin)."""
    if str(path) == "-":
        content = sys.stdin.read()
        suffix = ".json"
    else:
        content = path.read_text(encoding="utf-8")
        suffix = path.suffix.lower()

    if suffix in (".yaml", ".yml"):
        return yaml.safe_load(content)
    return json.loads(content)


def _load_project_or_exit(formatter: OutputFormatter, path: str) -> Any:
    try:
        return _read_project_file(Path(path))
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        formatter.print_error(f"Could not parse {path}: {e}")
        sys.exit(1)


def _open_store(config: Config, session: str) -> ProjectStore:
    return ProjectStore(FileStateRepository(config.get_data_dir() / "sessions"), session_id=session)


@click.group()
@click.version_option(package_name="launchcraft")
@click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Path to configuration file (YAML or JSON)",
)
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    help="Logging level (default: from config, INFO)",
)
@click.option(
    "--log-file",
    type=click.Path(),
    default=None,
    help="Path to log file (default: stderr only)",
)
@click.option(
    "--json-logging",
    is_flag=True,
    default=False,
    help="Output logs in JSON format",
)
@click.pass_context
def main(ctx: click.Context, config_file: str | None, log_level: str | None, log_file: str | None, json_logging: bool):
    """
    LaunchCraft - App Store listing copy generator.

    Describe an app once and generate names, subtitles, descriptions,
    keywords, promotional text and release notes for its store listing.

    Supported providers:
      - OpenAI (requires OPENAI_API_KEY)
      - OpenRouter (requires OPENROUTER_API_KEY)

    Use 'launchcraft generate --help' for detailed usage information.
    """
    config = Config.load(config_file=Path(config_file) if config_file else None)
    if log_level:
        config.log_level = log_level.upper()
    if json_logging:
        config.json_logging = True

    configure_logging(level=config.log_level, json_output=config.json_logging, log_file=log_file)
    ctx.obj = {"config": config}


@main.command()
@click.argument("input_source", type=click.Path(exists=True, dir_okay=False, allow_dash=True))
@click.option(
    "--lenient-interests",
    is_flag=True,
    default=False,
    help="Accept interests outside the catalog vocabulary",
)
@click.pass_context
def validate(ctx: click.Context, input_source: str, lenient_interests: bool):
    """
    Validate a project description file.

    INPUT_SOURCE is a JSON or YAML file, or '-' for JSON on stdin.
    """
    formatter = OutputFormatter()
    config: Config = ctx.obj["config"]
    raw = _load_project_or_exit(formatter, input_source)

    try:
        description = validate_project(raw, strict_interests=config.strict_interests and not lenient_interests)
    except ProjectValidationError as e:
        formatter.print_field_errors(e.errors)
        formatter.print_error(f"{len(e.errors)} validation error(s) in {input_source}")
        sys.exit(1)

    formatter.print_success(
        f"Valid project: {description.category.value}, {len(description.core_functions)} core function(s)"
    )


@main.command()
@click.argument("input_source", type=click.Path(exists=True, dir_okay=False, allow_dash=True))
@click.option(
    "--type",
    "-t",
    "kind",
    type=click.Choice([kind.value for kind in GenerationKind]),
    default=GenerationKind.ALL.value,
    help="Kind of copy to generate (default: all)",
)
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["json", "yaml"], case_sensitive=False),
    default="json",
    help="Output format (default: json)",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(writable=True, dir_okay=False),
    default=None,
    help="Output file (default: stdout)",
)
@click.option(
    "--provider",
    "-p",
    type=click.Choice(SUPPORTED_PROVIDERS, case_sensitive=False),
    default=None,
    help="Provider (default: from config, openai)",
)
@click.option("--model", "-m", default=None, help="Model name (default: from config)")
@click.option("--temperature", type=float, default=None, help="Sampling temperature (default: 0.7)")
@click.option("--api-key", default=None, help="API key (or use OPENAI_API_KEY/OPENROUTER_API_KEY)")
@click.option("--max-retries", type=int, default=None, help="Retry rate limits and server errors N times")
@click.option("--save", is_flag=True, default=False, help="Store the project and result in the session")
@click.option("--session", default="default", help="Session to store results in (default: default)")
@click.option("--stats/--no-stats", default=False, help="Show token usage and estimated cost")
@click.pass_context
def generate(
    ctx: click.Context,
    input_source: str,
    kind: str,
    output_format: str,
    output: str | None,
    provider: str | None,
    model: str | None,
    temperature: float | None,
    api_key: str | None,
    max_retries: int | None,
    save: bool,
    session: str,
    stats: bool,
):
    """
    Generate listing copy for a project description file.

    INPUT_SOURCE is a JSON or YAML file, or '-' for JSON on stdin.

    Examples:

      # Five app names and a subtitle
      launchcraft generate app.yaml --type app_name

      # Everything at once, stored in the default session
      launchcraft generate app.json --save -o listing.json
    """
    formatter = OutputFormatter()
    config: Config = ctx.obj["config"]

    cli_config = {
        "provider": provider.lower() if provider else None,
        "model": model,
        "temperature": temperature,
        "api_key": api_key,
        "max_retries": max_retries,
    }
    for key, value in cli_config.items():
        if value is not None:
            setattr(config, key, value)
    if provider and not api_key:
        # Provider changed after the key was resolved; pick that provider's key
        config.api_key = os.getenv(API_KEY_ENV_VARS[config.provider]) or None

    raw = _load_project_or_exit(formatter, input_source)
    usage_tracker = UsageTracker()

    try:
        client = create_generation_client(config, usage_tracker=usage_tracker)
        store = _open_store(config, session) if save else None
        pipeline = CopyPipeline(client, strict_interests=config.strict_interests, store=store)
        result = pipeline.run(raw, kind)
    except ProjectValidationError as e:
        formatter.print_field_errors(e.errors)
        formatter.print_error("Invalid project description")
        sys.exit(1)
    except ConfigurationError as e:
        formatter.print_error(f"{e.user_message}: {e.message}")
        formatter.print_info("Set OPENAI_API_KEY (or OPENROUTER_API_KEY with --provider openrouter)")
        sys.exit(1)
    except GenerationError as e:
        formatter.print_error(f"{e.user_message}: {e.message}")
        if getattr(e, "retryable", False):
            formatter.print_info("This failure is usually temporary; try again or pass --max-retries")
        sys.exit(1)

    content = dump_payload(result.data.to_wire(), output_format)
    if output:
        Path(output).write_text(content, encoding="utf-8")
        formatter.print_success(f"Copy written to: {output}")
    else:
        click.echo(content)

    if save:
        formatter.print_success(f"Saved to project {store.current_project.id} (session '{session}')")

    if stats:
        summary = usage_tracker.get_summary()
        formatter.print_stats(
            {
                "model": result.model,
                "prompt_tokens": result.usage.get("prompt_tokens", 0),
                "completion_tokens": result.usage.get("completion_tokens", 0),
                "estimated_cost": f"${summary['total_cost']:.4f}",
            }
        )


@main.group()
def projects():
    """Saved project commands."""
    pass


@projects.command("list")
@click.option("--session", default="default", help="Session id (default: default)")
@click.pass_context
def projects_list(ctx: click.Context, session: str):
    """List saved projects (* marks the active one)."""
    store = _open_store(ctx.obj["config"], session)
    current = store.current_project
    OutputFormatter().print_projects(store.projects, current_id=current.id if current else None)


@projects.command("show")
@click.argument("project_id")
@click.option("--session", default="default", help="Session id (default: default)")
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["json", "yaml"], case_sensitive=False),
    default="json",
    help="Output format (default: json)",
)
@click.pass_context
def projects_show(ctx: click.Context, project_id: str, session: str, output_format: str):
    """Show one saved project with its results."""
    store = _open_store(ctx.obj["config"], session)
    project = store.get_project(project_id)
    if project is None:
        OutputFormatter().print_error(f"Project not found: {project_id}")
        sys.exit(1)
    click.echo(dump_payload(project.model_dump(mode="json", by_alias=True), output_format))


@projects.command("delete")
@click.argument("project_id")
@click.option("--session", default="default", help="Session id (default: default)")
@click.pass_context
def projects_delete(ctx: click.Context, project_id: str, session: str):
    """Delete a saved project."""
    formatter = OutputFormatter()
    store = _open_store(ctx.obj["config"], session)
    if not store.delete_project(project_id):
        formatter.print_error(f"Project not found: {project_id}")
        sys.exit(1)
    formatter.print_success(f"Deleted project {project_id}")


@projects.command("clear")
@click.option("--session", default="default", help="Session id (default: default)")
@click.confirmation_option(prompt="Delete every project in this session?")
@click.pass_context
def projects_clear(ctx: click.Context, session: str):
    """Delete every project of a session."""
    store = _open_store(ctx.obj["config"], session)
    store.clear_all()
    OutputFormatter().print_success(f"Cleared session '{session}'")


@main.command()
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["table", "json", "yaml"], case_sensitive=False),
    default="table",
    help="Output format (default: table)",
)
def catalog(output_format: str):
    """Show the accepted categories, brand tones, audiences and pricing models."""
    data = catalog_as_dict()
    if output_format == "table":
        OutputFormatter().print_catalog(data)
    else:
        click.echo(dump_payload(data, output_format))


@main.group()
def config():
    """Configuration management commands."""
    pass


@config.command("export")
@click.option(
    "--output",
    "-o",
    type=click.Path(),
    default=None,
    help="Output file path (default: stdout)",
)
@click.option(
    "--format",
    "-f",
    type=click.Choice(["yaml", "json"], case_sensitive=False),
    default="yaml",
    help="Output format (default: yaml)",
)
@click.pass_context
def config_export(ctx: click.Context, output: str | None, format: str):
    """Export current configuration to file."""
    config_obj: Config = ctx.obj["config"]

    if output:
        output_path = Path(output)
        config_obj.save(output_path, format=format)
        click.echo(f"Configuration exported to: {output_path}")
    else:
        click.echo(dump_payload(config_obj.to_dict(), format))


@main.command()
@click.option("--host", default="127.0.0.1", help="Interface to bind (default: 127.0.0.1)")
@click.option("--port", type=int, default=8000, help="Port to listen on (default: 8000)")
@click.option("--reload/--no-reload", default=False, help="Restart the server on code changes")
def serve(host: str, port: int, reload: bool):
    """Run the HTTP API (POST /generate, POST /register) with Django's development server."""
    os.environ.setdefault("DJANGO_SETTINGS_MODULE", "launchcraft.webapp.settings")

    import django
    from django.core.management import call_command

    django.setup()
    call_command("runserver", f"{host}:{port}", use_reloader=reload)


if __name__ == "__main__":
    main()
