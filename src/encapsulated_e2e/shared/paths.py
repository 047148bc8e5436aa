"""Path management for encapsulated-e2e.

Layout of the e2e scratch area and of an encapsulated workspace:

    <NX_E2E_ROOT or $TMPDIR/nx-e2e>/
        nx/                      # e2e cwd
            <project>/           # one provisioned workspace
                nx.json
                .nx/installation/  # tool + plugins live here
                .nx/cache/
"""

import os
import tempfile
from pathlib import Path

from ..errors import WorkspaceNotProvisionedError

# Hidden directory holding the contained installation and the cache
ENCAPSULATED_DIR = ".nx"
INSTALLATION_DIR = f"{ENCAPSULATED_DIR}/installation"
INSTALLATION_MODULES_DIR = f"{INSTALLATION_DIR}/node_modules"
CACHE_DIR = f"{ENCAPSULATED_DIR}/cache"
TERMINAL_OUTPUTS_DIR = f"{CACHE_DIR}/terminalOutputs"

# Tool source carrying the testing-fetch markers
MIGRATE_SOURCE = f"{INSTALLATION_MODULES_DIR}/nx/src/command-line/migrate.js"

NX_JSON = "nx.json"
MIGRATIONS_JOURNAL = "migrations.json"

# Files a package manager would leave at the root of a non-encapsulated repo
ROOT_PACKAGE_ARTIFACTS = (
    "node_modules",
    "package.json",
    "package-lock.json",
    "yarn-lock.json",
    "pnpm-lock.yaml",
)

_project_name: str | None = None
_e2e_root: Path | None = None


def e2e_root() -> Path:
    """Root of the e2e scratch area."""
    if _e2e_root is not None:
        return _e2e_root
    override = os.environ.get("NX_E2E_ROOT")
    if override:
        return Path(override)
    return Path(tempfile.gettempdir()) / "nx-e2e"


def set_e2e_root(root: str | Path | None) -> None:
    """Override the scratch-area root (None restores the default)."""
    global _e2e_root
    _e2e_root = Path(root) if root is not None else None


def e2e_cwd(root: str | Path | None = None) -> Path:
    """Directory workspaces are provisioned in, under `root` or the scratch root."""
    return (Path(root) if root is not None else e2e_root()) / "nx"


def set_project_name(name: str | None) -> None:
    """Make `name` the active project (None deactivates)."""
    global _project_name
    _project_name = name


def get_project_name() -> str | None:
    return _project_name


def tmp_proj_path(*parts: str | Path) -> Path:
    """Get a path inside the active project.

    Args:
        parts: Path segments relative to the project root

    Returns:
        Absolute path under <e2e cwd>/<project>

    Raises:
        WorkspaceNotProvisionedError: If no project is active
    """
    if _project_name is None:
        raise WorkspaceNotProvisionedError()
    return e2e_cwd().joinpath(_project_name, *parts)


def installation_module_path(package: str, *parts: str) -> str:
    """Project-relative path of a package inside the contained installation."""
    return "/".join([INSTALLATION_MODULES_DIR, package, *parts])
