"""CLI main entry point."""

import json
import shlex
import sys

import click
from rich.console import Console
from rich.markup import escape

from . import __version__
from .config import CONFIG_KEYS, get_config_path, load_config, save_config, unset_config
from .errors import CommandError, E2EError
from .harness.workspace import EncapsulatedWorkspace, new_encapsulated_workspace
from .shared.logging import configure_logging, level_for_verbosity
from .utils import parse_env_overrides

console = Console(stderr=True)


def fail(message: str) -> None:
    """Print an error and exit 1."""
    console.print(f"[red]Error:[/red] {escape(message)}")
    sys.exit(1)


@click.group()
@click.option("-v", "--verbose", count=True, help="Increase verbosity")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
@click.pass_context
def cli(ctx: click.Context, verbose: int, json_output: bool) -> None:
    """Provision and drive encapsulated nx workspaces."""
    ctx.ensure_object(dict)
    config = load_config()
    configure_logging(level_for_verbosity(verbose, config.log_level), log_file=config.log_file)
    ctx.obj["config"] = config
    ctx.obj["json_output"] = json_output


@cli.command()
def version() -> None:
    """Show version information."""
    click.echo(f"encapsulated-e2e version {__version__}")


@cli.command()
@click.option("--name", help="Workspace directory name (default: generated)")
@click.option("--published-version", help="Tool version to install")
@click.pass_context
def provision(ctx: click.Context, name: str | None, published_version: str | None) -> None:
    """Create a new encapsulated workspace."""
    config = ctx.obj["config"]
    if published_version:
        config.published_version = published_version

    try:
        workspace = new_encapsulated_workspace(name, config)
    except (ValueError, E2EError) as e:
        fail(str(e))

    if ctx.obj["json_output"]:
        click.echo(json.dumps({"name": workspace.name, "path": str(workspace.path)}))
    else:
        click.echo(f"Provisioned {workspace.name} at {workspace.path}")


@cli.command(context_settings={"ignore_unknown_options": True})
@click.argument("name")
@click.argument("command", nargs=-1, required=True, type=click.UNPROCESSED)
@click.option("-e", "--env", "env_pairs", multiple=True, help="Environment KEY=VALUE")
@click.pass_context
def run(
    ctx: click.Context, name: str, command: tuple[str, ...], env_pairs: tuple[str, ...]
) -> None:
    """Run an nx command in an existing workspace."""
    try:
        env = parse_env_overrides(env_pairs)
    except ValueError as e:
        fail(str(e))

    workspace = EncapsulatedWorkspace(name, ctx.obj["config"])
    if not workspace.path.exists():
        fail(f"Workspace '{name}' not found at {workspace.path}")

    try:
        output = workspace.run(shlex.join(command), env=env)
    except CommandError as e:
        click.echo(e.output, nl=False)
        fail(str(e))
    except E2EError as e:
        fail(str(e))

    click.echo(output, nl=False)


@cli.command("check-isolation")
@click.argument("name")
@click.pass_context
def check_isolation(ctx: click.Context, name: str) -> None:
    """Check that no package-manager files leaked to the workspace root."""
    from .formatters import print_isolation_result

    workspace = EncapsulatedWorkspace(name, ctx.obj["config"])
    if not workspace.path.exists():
        fail(f"Workspace '{name}' not found at {workspace.path}")

    artifacts = workspace.root_package_artifacts()
    if ctx.obj["json_output"]:
        click.echo(json.dumps({"path": str(workspace.path), "artifacts": artifacts}))
    else:
        print_isolation_result(workspace.path, artifacts)

    if artifacts:
        sys.exit(1)


@cli.command()
@click.argument("name")
@click.option("--skip-reset", is_flag=True, help="Do not run 'nx reset' first")
@click.option("--keep", is_flag=True, help="Keep the workspace directory")
@click.pass_context
def cleanup(ctx: click.Context, name: str, skip_reset: bool, keep: bool) -> None:
    """Reset and remove a workspace."""
    workspace = EncapsulatedWorkspace(name, ctx.obj["config"])
    if not workspace.path.exists():
        fail(f"Workspace '{name}' not found at {workspace.path}")

    workspace.cleanup(skip_reset=skip_reset, remove=not keep)
    click.echo(f"Cleaned up {name}")


@cli.group()
def config() -> None:
    """Manage harness configuration."""
    pass


@config.command("show")
@click.pass_context
def config_show(ctx: click.Context) -> None:
    """Show the effective configuration and where each value came from."""
    from .formatters import print_config_sources

    cfg = ctx.obj["config"]
    if ctx.obj["json_output"]:
        data = {
            "values": cfg.values(),
            "sources": {key: cfg.get_source(key) for key in CONFIG_KEYS},
            "config_file": str(get_config_path()),
        }
        click.echo(json.dumps(data, indent=2))
    else:
        print_config_sources(cfg, get_config_path())


@config.command("set")
@click.argument("key", type=click.Choice(CONFIG_KEYS))
@click.argument("value")
def config_set(key: str, value: str) -> None:
    """Persist a configuration value."""
    try:
        save_config(key, value)
    except ValueError:
        fail(f"{key} must be an integer")
    click.echo(f"Set {key} = {value}")


@config.command("unset")
@click.argument("key", type=click.Choice(CONFIG_KEYS))
def config_unset(key: str) -> None:
    """Remove a persisted configuration value."""
    if unset_config(key):
        click.echo(f"Unset {key}")
    else:
        click.echo(f"{key} was not set")


def main() -> None:
    """Main entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
