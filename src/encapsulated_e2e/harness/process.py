"""Running shell commands against a provisioned workspace."""

from __future__ import annotations

import os
import subprocess
from collections.abc import Mapping
from pathlib import Path

from ..errors import CommandError, CommandTimeoutError
from ..shared.logging import get_logger

logger = get_logger(__name__)

# Worker variables the outer test runner sets; they change the tool's behaviour
_RUNNER_VARS = {"PYTEST_CURRENT_TEST", "PYTEST_XDIST_WORKER", "PYTEST_XDIST_WORKER_COUNT"}


def stripped_environment(base: Mapping[str, str] | None = None) -> dict[str, str]:
    """Copy of the environment without the tool's own NX_* settings.

    NX_E2E_* variables configure the harness and are kept.
    """
    source = os.environ if base is None else base
    env: dict[str, str] = {}
    for key, value in source.items():
        if key.startswith("NX_E2E_"):
            env[key] = value
        elif key.startswith("NX_") or key in _RUNNER_VARS:
            continue
        else:
            env[key] = value
    return env


def _verbose() -> bool:
    return os.environ.get("NX_VERBOSE_LOGGING", "").lower() == "true"


def run_command(
    command: str,
    cwd: str | Path,
    env: Mapping[str, str] | None = None,
    timeout: float | None = None,
    fail_on_error: bool = False,
) -> str:
    """Run a shell command and return its stdout.

    Args:
        command: Command line, run through the shell
        cwd: Working directory
        env: Variables layered over the stripped environment
        timeout: Seconds before the command is killed
        fail_on_error: Raise on non-zero exit instead of returning output

    Returns:
        stdout on success; stdout + stderr on failure when not failing

    Raises:
        CommandError: Non-zero exit and fail_on_error
        CommandTimeoutError: The command outlived its timeout
    """
    run_env = stripped_environment()
    run_env["FORCE_COLOR"] = "false"
    if env:
        run_env.update(env)

    logger.debug("command_start", command=command, cwd=str(cwd))
    try:
        result = subprocess.run(
            command,
            shell=True,
            cwd=str(cwd),
            env=run_env,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as e:
        logger.error("command_timeout", command=command, timeout=timeout)
        raise CommandTimeoutError(command=command, timeout=timeout) from e

    if result.returncode == 0:
        if _verbose():
            logger.info("command_output", command=command, output=result.stdout)
        logger.debug("command_done", command=command)
        return result.stdout

    logger.error(
        "command_failed",
        command=command,
        returncode=result.returncode,
        output=f"{result.stdout}\n\n{result.stderr}",
    )
    if fail_on_error:
        raise CommandError(
            command=command,
            returncode=result.returncode,
            stdout=result.stdout,
            stderr=result.stderr,
        )
    return result.stdout + result.stderr
