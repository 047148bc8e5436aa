"""Error types raised by the e2e harness."""

from dataclasses import dataclass
from pathlib import Path


@dataclass
class E2EError(Exception):
    """Base error class for harness errors."""

    message: str

    def __str__(self) -> str:
        return self.message


@dataclass
class CommandError(E2EError):
    """A command expected to succeed exited non-zero."""

    message: str = ""
    command: str = ""
    returncode: int = 1
    stdout: str = ""
    stderr: str = ""

    def __post_init__(self) -> None:
        if not self.message:
            self.message = f"Command failed with exit code {self.returncode}: {self.command}"

    @property
    def output(self) -> str:
        """Combined stdout and stderr."""
        return f"{self.stdout}{self.stderr}"


@dataclass
class CommandTimeoutError(E2EError):
    """A command did not finish within its timeout."""

    message: str = ""
    command: str = ""
    timeout: float | None = None

    def __post_init__(self) -> None:
        if not self.message:
            self.message = f"Command timed out after {self.timeout}s: {self.command}"


@dataclass
class WorkspaceNotProvisionedError(E2EError):
    """A project-relative path was used before any workspace was provisioned."""

    message: str = "No e2e workspace is active. Call new_encapsulated_workspace() first."


@dataclass
class MarkerNotFoundError(E2EError):
    """A marker comment delimiting a source region is missing."""

    message: str = ""
    path: Path | str = ""
    marker: str = ""

    def __post_init__(self) -> None:
        if not self.message:
            self.message = f"Marker '{self.marker}' not found in {self.path}"


@dataclass
class FileCheckError(E2EError, AssertionError):
    """A file presence check failed."""

    message: str = ""
    path: str = ""
    expected_present: bool = True

    def __post_init__(self) -> None:
        if not self.message:
            if self.expected_present:
                self.message = f"File '{self.path}' does not exist"
            else:
                self.message = f"File '{self.path}' does exist"
