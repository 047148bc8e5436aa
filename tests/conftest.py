"""Shared test fixtures for encapsulated-e2e tests."""

from pathlib import Path

import pytest

from encapsulated_e2e.config import ENV_VARS
from encapsulated_e2e.shared.logging import configure_logging


@pytest.fixture(autouse=True, scope="session")
def _configure_logging() -> None:
    configure_logging("warning")


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the config file at a temp path and clear config env vars."""
    config_file = tmp_path / "e2e-config" / "config.yaml"
    monkeypatch.setenv("ENCAPSULATED_E2E_CONFIG", str(config_file))
    for env_var in ENV_VARS.values():
        monkeypatch.delenv(env_var, raising=False)
    monkeypatch.delenv("CI", raising=False)
    return config_file
