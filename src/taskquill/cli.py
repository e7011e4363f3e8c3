"""Command-line interface for taskquill."""

import logging
import sys
from pathlib import Path

import click
import yaml
from rich.logging import RichHandler
from rich.markup import escape

from taskquill import __version__
from taskquill.config.loader import (
    get_home_config_path,
    get_local_config_path,
    home_config_exists,
    load_config,
    load_yaml_config,
    local_config_exists,
    resolve_override_resolver,
    save_config,
)
from taskquill.config.schema import TaskquillConfig
from taskquill.console import console, err_console
from taskquill.inputs import InputError, load_params_file, parse_params
from taskquill.prompts.override import OVERRIDE_STRATEGIES, OverrideRule, no_overrides
from taskquill.prompts.update_task_content import get_update_task_content_prompt
from taskquill.templates import (
    FileTemplateStore,
    TemplateNotFoundError,
    copy_default_templates_to_user,
    get_global_templates_path,
    get_local_templates_path,
    get_package_templates_path,
)

logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    """Route log records to stderr through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _layer_status(exists: bool) -> str:
    return "[green]found[/green]" if exists else "[dim]not found[/dim]"


def _get_source_label(path: Path) -> str:
    """Get a display label for where a template file lives."""
    if path.is_relative_to(get_local_templates_path()):
        return "[dim](local)[/dim]"
    if path.is_relative_to(get_global_templates_path()):
        return "[dim](global)[/dim]"
    if path.is_relative_to(get_package_templates_path()):
        return "[dim](bundled)[/dim]"
    return ""


def version_callback(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
    """Print version and exit."""
    if not value or ctx.resilient_parsing:
        return
    console.print(f"taskquill [bold cyan]{__version__}[/bold cyan]")
    ctx.exit()


@click.group(invoke_without_command=True)
@click.option(
    "--version",
    is_flag=True,
    callback=version_callback,
    expose_value=False,
    is_eager=True,
    help="Show version and exit.",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """Taskquill - compose task-tool responses from prompt templates."""
    _configure_logging(verbose)

    if ctx.invoked_subcommand is None:
        console.print("[bold]taskquill[/bold] - prompt templates for task tools")
        console.print("\nRun [cyan]taskquill --help[/cyan] for available commands.")


@main.command()
@click.argument("input_file", type=click.Path(dir_okay=False, allow_dash=True))
@click.option(
    "--templates-use",
    "-t",
    help="Template language folder to use (overrides config, e.g. en, zh).",
)
@click.option(
    "--no-overrides",
    "skip_overrides",
    is_flag=True,
    help="Ignore MCP_PROMPT_* variables and configured prompt overrides.",
)
def render(input_file: str, templates_use: str | None, skip_overrides: bool) -> None:
    """Render the update_task_content response for INPUT_FILE.

    INPUT_FILE is a YAML or JSON document with task_id, task, success,
    message, validation_error, empty_update and updated_task. Use '-' to
    read from stdin.
    """
    try:
        if input_file == "-":
            params = parse_params(sys.stdin.read())
        else:
            params = load_params_file(Path(input_file))
    except InputError as e:
        console.print(f"[red]Invalid input: {escape(str(e))}[/red]")
        raise SystemExit(1) from None

    config = load_config()
    store = FileTemplateStore.for_language(templates_use or config.templates_use)
    resolver = no_overrides if skip_overrides else resolve_override_resolver(config)

    try:
        output = get_update_task_content_prompt(params, store, resolver)
    except TemplateNotFoundError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise SystemExit(1) from None

    click.echo(output, nl=False)


@main.group(invoke_without_command=True)
@click.pass_context
def templates(ctx: click.Context) -> None:
    """Inspect and customize prompt templates.

    Use subcommands: taskquill templates list, taskquill templates init
    """
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@templates.command("list")
@click.option(
    "--templates-use",
    "-t",
    help="Template language folder to list (overrides config).",
)
def templates_list(templates_use: str | None) -> None:
    """List resolvable templates and where each one comes from."""
    config = load_config()
    store = FileTemplateStore.for_language(templates_use or config.templates_use)
    names = store.names()

    if not names:
        console.print("[yellow]No templates found.[/yellow]")
        return

    console.print("[bold]Available Templates:[/bold]\n")
    for name, path in names.items():
        console.print(f"  [cyan]{name}[/cyan] {_get_source_label(path)}")


@templates.command("init")
@click.option(
    "--local",
    "local",
    is_flag=True,
    help="Copy into ./.taskquill/templates/ instead of ~/.taskquill/templates/.",
)
@click.option("--overwrite", is_flag=True, help="Replace existing copies.")
def templates_init(local: bool, overwrite: bool) -> None:
    """Copy bundled templates so they can be edited."""
    copied = copy_default_templates_to_user(overwrite=overwrite, local=local)
    target = get_local_templates_path() if local else get_global_templates_path()

    if copied:
        console.print(
            f"[green]Copied {len(copied)} template set(s) to {target}:[/green] "
            f"{', '.join(copied)}"
        )
    else:
        console.print(
            f"[dim]Templates already present in {target}. "
            "Use --overwrite to replace them.[/dim]"
        )


@main.group(invoke_without_command=True)
@click.pass_context
def config(ctx: click.Context) -> None:
    """Show and edit configuration."""
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@config.command("show")
def config_show() -> None:
    """Print the merged configuration as YAML."""
    merged = load_config()
    console.print(
        f"[dim]Global: {get_home_config_path()}[/dim] "
        f"{_layer_status(home_config_exists())}"
    )
    console.print(
        f"[dim]Local:  {get_local_config_path()}[/dim] "
        f"{_layer_status(local_config_exists())}\n"
    )
    click.echo(
        yaml.safe_dump(
            merged.to_dict(),
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        ),
        nl=False,
    )


@config.command("set")
@click.option(
    "--local",
    "local",
    is_flag=True,
    help="Write ./.taskquill/config.yaml instead of ~/.taskquill/config.yaml.",
)
@click.option("--templates-use", "-t", help="Template language folder to use.")
@click.option(
    "--override",
    "override_name",
    help="Logical prompt name to override (e.g. UPDATE_TASK_CONTENT).",
)
@click.option(
    "--mode",
    type=click.Choice(sorted(OVERRIDE_STRATEGIES)),
    default="replace",
    show_default=True,
    help="How the override text is combined with the prompt.",
)
@click.option("--text", help="Override text for --override.")
def config_set(
    local: bool,
    templates_use: str | None,
    override_name: str | None,
    mode: str,
    text: str | None,
) -> None:
    """Save settings to the global or local config file."""
    if override_name is not None and text is None:
        console.print("[red]--override requires --text.[/red]")
        raise SystemExit(1)
    if templates_use is None and override_name is None:
        console.print("[red]Nothing to set. Use --templates-use or --override.[/red]")
        raise SystemExit(1)

    update = TaskquillConfig(templates_use=templates_use)
    if override_name is not None and text is not None:
        update.prompt_overrides[override_name.upper()] = OverrideRule(
            mode=mode, text=text
        )

    # Merge into the target file only, not the layered result
    path = get_local_config_path() if local else get_home_config_path()
    existing = TaskquillConfig.from_dict(load_yaml_config(path) or {})
    save_config(existing.merge(update), path)
    console.print(f"[green]Saved config to {escape(str(path))}[/green]")
