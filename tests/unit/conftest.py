"""Fixtures for harness unit tests.

- project: an active project directory for project-relative file helpers
- fake_workspace: a workspace whose ./nx wrapper is a small Python script
"""

import os
import stat
import sys
from collections.abc import Generator
from pathlib import Path

import pytest

from encapsulated_e2e.config import E2EConfig
from encapsulated_e2e.harness.workspace import EncapsulatedWorkspace
from encapsulated_e2e.shared import paths

# =============================================================================
# Fake nx wrapper - echoes what it was called with
# =============================================================================

FAKE_NX_SCRIPT = """\
#!{python}
import os
import sys

args = sys.argv[1:]
if args and args[0] == "fail":
    print("partial output")
    print("boom", file=sys.stderr)
    sys.exit(3)
if args and args[0] == "reset":
    open("reset.marker", "w").close()
print("args: " + " ".join(args))
for key in ("FORCE_COLOR", "NX_MIGRATE_SKIP_INSTALL", "NX_DAEMON", "NX_E2E_FLAG"):
    print(key + "=" + os.environ.get(key, ""))
"""


def write_fake_nx(directory: Path) -> Path:
    """Write an executable ./nx stand-in into `directory`."""
    script = directory / "nx"
    script.write_text(FAKE_NX_SCRIPT.format(python=sys.executable))
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return script


@pytest.fixture(autouse=True)
def _reset_paths() -> Generator[None, None, None]:
    """Keep module-level path state from leaking between tests."""
    yield
    paths.set_project_name(None)
    paths.set_e2e_root(None)


@pytest.fixture
def e2e_config(tmp_path: Path) -> E2EConfig:
    """Config rooted in the test's temp dir."""
    return E2EConfig(
        published_version="9999.0.2",
        e2e_root=str(tmp_path / "e2e"),
        timeout=30,
        keep_workspace=False,
    )


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """An active, empty project directory."""
    paths.set_e2e_root(tmp_path / "e2e")
    paths.set_project_name("proj")
    root = paths.tmp_proj_path()
    root.mkdir(parents=True)
    return root


@pytest.fixture
def fake_workspace(e2e_config: E2EConfig) -> EncapsulatedWorkspace:
    """A workspace directory with a fake ./nx wrapper, already active."""
    if sys.platform == "win32":
        pytest.skip("fake wrapper is a POSIX script")
    workspace = EncapsulatedWorkspace("fake", e2e_config)
    workspace.path.mkdir(parents=True)
    write_fake_nx(workspace.path)
    workspace.activate()
    return workspace


@pytest.fixture
def clean_nx_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove NX_* variables the developer's shell might carry."""
    for key in list(os.environ):
        if key.startswith("NX_"):
            monkeypatch.delenv(key, raising=False)
