"""Builders for the fixture documents the scenarios write.

Covers the workspace configuration (nx.json), project descriptors, migration
packages placed inside the contained installation, and the migrations
journal the tool produces.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from ..shared.paths import MIGRATIONS_JOURNAL, NX_JSON, installation_module_path
from .fileops import JsonUpdater, read_json, update_file, update_json

# ---------------------------------------------------------------------------
# Workspace configuration
# ---------------------------------------------------------------------------


def set_cacheable_operations(nx_json: dict[str, Any], operations: list[str]) -> dict[str, Any]:
    """Mark `operations` as cacheable on the default tasks runner."""
    options = (
        nx_json.setdefault("tasksRunnerOptions", {})
        .setdefault("default", {})
        .setdefault("options", {})
    )
    options["cacheableOperations"] = list(operations)
    return nx_json


def set_plugins(nx_json: dict[str, Any], plugins: dict[str, str]) -> dict[str, Any]:
    """Replace the installed plugin map."""
    nx_json.setdefault("installation", {})["plugins"] = dict(plugins)
    return nx_json


def add_plugin(nx_json: dict[str, Any], name: str, version: str) -> dict[str, Any]:
    """Add one plugin, keeping the ones already installed."""
    installation = nx_json.setdefault("installation", {})
    if installation.get("plugins") is None:
        installation["plugins"] = {}
    installation["plugins"][name] = version
    return nx_json


def set_installation(
    nx_json: dict[str, Any], version: str, plugins: dict[str, str]
) -> dict[str, Any]:
    """Replace the whole installation section."""
    nx_json["installation"] = {"version": version, "plugins": dict(plugins)}
    return nx_json


def installed_plugins(root: Path | None = None) -> dict[str, str]:
    return read_json(NX_JSON, root=root).get("installation", {}).get("plugins") or {}


# ---------------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------------


def project_descriptor(name: str, targets: dict[str, str]) -> dict[str, Any]:
    """project.json body with one command target per entry."""
    return {
        "name": name,
        "targets": {target: {"command": command} for target, command in targets.items()},
    }


def write_project(name: str, targets: dict[str, str], *, root: Path | None = None) -> Path:
    return update_file(
        f"projects/{name}/project.json",
        json.dumps(project_descriptor(name, targets)),
        root=root,
    )


# ---------------------------------------------------------------------------
# Migration packages
# ---------------------------------------------------------------------------


class HostMethod(Enum):
    """File mutations a migration host exposes."""

    CREATE = "create"
    WRITE = "write"


@dataclass
class HostOperation:
    """One file mutation a migration script performs."""

    method: HostMethod
    path: str
    content: str

    def render_js(self) -> str:
        return f"host.{self.method.value}({json.dumps(self.path)}, {json.dumps(self.content)})"


def factory_script(operations: list[HostOperation]) -> str:
    """A migration whose default export returns the transform."""
    body = "\n".join(f"      {op.render_js()};" for op in operations)
    return (
        "\nexports.default = function default_1() {\n"
        "  return function (host) {\n"
        f"{body}\n"
        "  };\n"
        "};\n"
    )


def implementation_script(operations: list[HostOperation]) -> str:
    """A migration whose default export is the transform itself."""
    body = "\n".join(f"  {op.render_js()};" for op in operations)
    return f"\nexports.default = function (host) {{\n{body}\n}};\n"


@dataclass
class MigrationGenerator:
    """An entry of a migrations manifest.

    Exactly one of ``factory`` or ``implementation`` names the script module.
    """

    name: str
    version: str
    description: str = ""
    factory: str | None = None
    implementation: str | None = None

    def __post_init__(self) -> None:
        if (self.factory is None) == (self.implementation is None):
            raise ValueError(
                f"Generator '{self.name}' needs exactly one of factory or implementation"
            )
        if not self.description:
            self.description = self.version

    def to_dict(self) -> dict[str, Any]:
        data = {"version": self.version, "description": self.description}
        if self.factory is not None:
            data["factory"] = self.factory
        else:
            data["implementation"] = self.implementation
        return data


@dataclass
class MigrationPackage:
    """A package installed next to the tool, optionally shipping migrations."""

    name: str
    version: str
    generators: list[MigrationGenerator] = field(default_factory=list)
    # module path (relative, without .js) -> script source
    scripts: dict[str, str] = field(default_factory=dict)
    manifest: str = "./migrations.json"

    def package_json(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name, "version": self.version}
        if self.generators:
            data["nx-migrations"] = self.manifest
        return data

    def migrations_json(self) -> dict[str, Any]:
        return {"schematics": {g.name: g.to_dict() for g in self.generators}}

    def write(self, *, root: Path | None = None) -> list[Path]:
        """Write the package into the contained installation.

        Returns:
            Paths of the written files
        """
        written = [
            update_file(
                installation_module_path(self.name, "package.json"),
                json.dumps(self.package_json()),
                root=root,
            )
        ]
        if self.generators:
            written.append(
                update_file(
                    installation_module_path(self.name, self.manifest.removeprefix("./")),
                    json.dumps(self.migrations_json()),
                    root=root,
                )
            )
        for module, source in self.scripts.items():
            filename = f"{module.removeprefix('./')}.js"
            written.append(
                update_file(installation_module_path(self.name, filename), source, root=root)
            )
        return written


# ---------------------------------------------------------------------------
# Migrations journal
# ---------------------------------------------------------------------------


@dataclass
class MigrationRecord:
    """One migration selected by the resolve phase."""

    package: str
    version: str
    name: str
    cli: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MigrationRecord:
        return cls(
            package=data["package"],
            version=data["version"],
            name=data["name"],
            cli=data.get("cli"),
        )

    def to_dict(self) -> dict[str, Any]:
        data = {"package": self.package, "version": self.version, "name": self.name}
        if self.cli is not None:
            data["cli"] = self.cli
        return data


@dataclass
class MigrationJournal:
    """The ordered migrations the execute phase will apply."""

    migrations: list[MigrationRecord] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MigrationJournal:
        return cls([MigrationRecord.from_dict(m) for m in data.get("migrations", [])])

    def to_dict(self) -> dict[str, Any]:
        return {"migrations": [m.to_dict() for m in self.migrations]}


def read_journal(path: str = MIGRATIONS_JOURNAL, *, root: Path | None = None) -> MigrationJournal:
    return MigrationJournal.from_dict(read_json(path, root=root))


def update_nx_json(updater: JsonUpdater, *, root: Path | None = None) -> dict[str, Any]:
    """Apply an updater to the workspace configuration document."""
    return update_json(NX_JSON, updater, root=root)
