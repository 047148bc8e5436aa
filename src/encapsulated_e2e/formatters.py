"""CLI output formatting helpers."""

from pathlib import Path

import click

from .config import E2EConfig


def print_config_sources(config: E2EConfig, config_path: Path) -> None:
    """Print each config value with where it came from."""
    click.echo("Encapsulated E2E Configuration")
    click.echo(f"Config file: {config_path}\n")
    for key, value in config.values().items():
        shown = "(not set)" if value is None else value
        click.echo(f"  {key}: {shown}  [{config.get_source(key)}]")


def print_isolation_result(workspace: Path, artifacts: list[str]) -> None:
    """Print the root package-manager artifacts found in a workspace.

    Args:
        workspace: Workspace root
        artifacts: Artifacts present at the root
    """
    click.echo(f"Workspace: {workspace}\n")
    if not artifacts:
        click.echo("✓ No package-manager artifacts at the workspace root")
        return
    click.echo("Found at the workspace root:")
    for artifact in artifacts:
        click.echo(f"  ✗ {artifact}")
