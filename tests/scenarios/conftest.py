"""Shared fixtures for encapsulated workspace scenarios.

One workspace is provisioned per module and shared by every scenario in
it, so scenarios see each other's file changes and run in declaration
order.

Requirements:
  PUBLISHED_VERSION set to the tool version under test
  a Node package runner (npx by default) on PATH
"""

from __future__ import annotations

import shutil
from collections.abc import Generator

import pytest

from encapsulated_e2e.config import E2EConfig, load_config
from encapsulated_e2e.harness import EncapsulatedWorkspace, cleanup_project
from encapsulated_e2e.harness.workspace import new_encapsulated_workspace, npx_command
from encapsulated_e2e.shared.logging import configure_logging

# Flags that keep migrate from installing packages or reaching the registry
MIGRATE_ENV = {
    "NX_MIGRATE_SKIP_INSTALL": "true",
    "NX_MIGRATE_USE_LOCAL": "true",
    "NX_WRAPPER_SKIP_INSTALL": "true",
}


@pytest.fixture(scope="module")
def scenario_config() -> E2EConfig:
    """Harness config. Skips scenarios when no version is under test."""
    config = load_config()
    if not config.published_version:
        pytest.skip("PUBLISHED_VERSION not set. Publish the tool and export its version.")
    runner = npx_command(config.package_manager).split()[0]
    if shutil.which(runner) is None:
        pytest.skip(f"{runner} not found on PATH")
    configure_logging(config.log_level, log_file=config.log_file)
    return config


@pytest.fixture(scope="module")
def published_version(scenario_config: E2EConfig) -> str:
    return scenario_config.published_version


@pytest.fixture(scope="module")
def run_encapsulated(
    scenario_config: E2EConfig,
) -> Generator[EncapsulatedWorkspace, None, None]:
    """The invocation function of a freshly provisioned workspace."""
    workspace = new_encapsulated_workspace(config=scenario_config)
    yield workspace
    cleanup_project(skip_reset=True)


@pytest.fixture(autouse=True)
def _active_workspace(request: pytest.FixtureRequest) -> None:
    """Point project-relative file helpers at the module's workspace."""
    if "run_encapsulated" in request.fixturenames:
        request.getfixturevalue("run_encapsulated").activate()


@pytest.fixture
def migrate_env() -> dict[str, str]:
    return dict(MIGRATE_ENV)
