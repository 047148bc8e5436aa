"""Encapsulated workspace provisioning and teardown.

An encapsulated workspace keeps the tool and its plugins under
``.nx/installation`` and drives everything through the ``./nx`` wrapper
script that ``nx init --encapsulated`` drops at the project root.
"""

from __future__ import annotations

import shutil
import sys
from collections.abc import Mapping

from ..config import E2EConfig, load_config
from ..errors import CommandError, CommandTimeoutError
from ..shared import paths
from ..shared.logging import get_logger
from ..utils import uniq
from .process import run_command

logger = get_logger(__name__)

INIT_COMMAND = "{runner} nx@{version} init --encapsulated"


def npx_command(package_manager: str) -> str:
    """Package runner used to bootstrap a workspace for a package manager."""
    return {"pnpm": "pnpm dlx", "bun": "bunx"}.get(package_manager, "npx")


class EncapsulatedWorkspace:
    """A workspace whose tool installation lives under .nx/installation.

    Instances are callable: ``workspace("report")`` runs ``./nx report``.
    """

    def __init__(self, name: str | None = None, config: E2EConfig | None = None):
        """Initialize the workspace handle.

        Args:
            name: Project directory name (default: a unique "encapsulated" name)
            config: Harness configuration (default: load_config())
        """
        self.config = config or load_config()
        self.name = name or uniq("encapsulated")
        self.path = paths.e2e_cwd(self.config.e2e_root) / self.name

    @property
    def wrapper(self) -> str:
        """The wrapper script invocation for this platform."""
        return ".\\nx.bat" if sys.platform == "win32" else "./nx"

    def activate(self) -> None:
        """Make this workspace the target of project-relative file helpers."""
        paths.set_e2e_root(self.path.parent.parent)
        paths.set_project_name(self.name)

    def provision(self) -> EncapsulatedWorkspace:
        """Create the project directory and run the encapsulated init.

        Raises:
            ValueError: If no published version is configured
            CommandError: If init fails
        """
        version = self.config.published_version
        if not version:
            raise ValueError("published_version is not configured (set PUBLISHED_VERSION)")

        self.path.mkdir(parents=True, exist_ok=True)
        self.activate()
        init = INIT_COMMAND.format(
            runner=npx_command(self.config.package_manager), version=version
        )
        logger.info("workspace_provision", path=str(self.path), version=version)
        run_command(init, cwd=self.path, timeout=self.config.timeout, fail_on_error=True)
        return self

    def run(self, command: str, env: Mapping[str, str] | None = None) -> str:
        """Run a CLI command through the wrapper and return stdout.

        Raises:
            CommandError: If the command exits non-zero
        """
        return run_command(
            f"{self.wrapper} {command}",
            cwd=self.path,
            env=env,
            timeout=self.config.timeout,
            fail_on_error=True,
        )

    def __call__(self, command: str, env: Mapping[str, str] | None = None) -> str:
        return self.run(command, env=env)

    def root_package_artifacts(self) -> list[str]:
        """Package-manager artifacts present at the workspace root."""
        return [a for a in paths.ROOT_PACKAGE_ARTIFACTS if (self.path / a).exists()]

    def cleanup(self, skip_reset: bool = False, remove: bool | None = None) -> None:
        """Reset the tool's state and remove the workspace directory.

        Args:
            skip_reset: Do not run ``nx reset`` first
            remove: Delete the directory (default: unless keep_workspace)
        """
        if remove is None:
            remove = not self.config.keep_workspace

        if not skip_reset and self.path.exists():
            try:
                self.run("reset")
            except (CommandError, CommandTimeoutError) as e:
                logger.warning("workspace_reset_failed", path=str(self.path), error=str(e))

        if remove:
            shutil.rmtree(self.path, ignore_errors=True)
            logger.info("workspace_removed", path=str(self.path))
        else:
            logger.info("workspace_kept", path=str(self.path))

        if paths.get_project_name() == self.name:
            paths.set_project_name(None)


_active: EncapsulatedWorkspace | None = None


def new_encapsulated_workspace(
    name: str | None = None, config: E2EConfig | None = None
) -> EncapsulatedWorkspace:
    """Provision a fresh encapsulated workspace and make it active.

    Returns:
        The workspace; call it with a command line to run the CLI
    """
    global _active
    _active = EncapsulatedWorkspace(name, config).provision()
    return _active


def cleanup_project(skip_reset: bool = False) -> None:
    """Tear down the active workspace, if any."""
    global _active
    if _active is None:
        return
    _active.cleanup(skip_reset=skip_reset)
    _active = None
