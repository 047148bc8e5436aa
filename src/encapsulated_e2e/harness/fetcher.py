"""Deterministic migration-metadata fetcher for the migrate scenarios.

The tool resolves migration metadata for a package through a fetcher
created by ``createFetcher(logger)`` in its migrate command source. Tests
describe the metadata they want with a FixedMigrationFetcher; installing it
renders an equivalent JS fetcher into the region of that source delimited
by the testing-fetch markers, so the tool resolves packages from memory
instead of the registry.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..errors import MarkerNotFoundError
from ..shared.logging import get_logger
from ..shared.paths import MIGRATE_SOURCE
from .fileops import update_file

logger = get_logger(__name__)

FETCH_START_MARKER = "// testing-fetch-start"
FETCH_END_MARKER = "// testing-fetch-end"


@dataclass
class GeneratorVersion:
    """A generator as the registry advertises it."""

    version: str
    cli: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"version": self.version}
        if self.cli:
            data["cli"] = self.cli
        return data


@dataclass
class PackageUpdate:
    """Target version of one package in a package.json update rule."""

    version: str
    always_add_to_package_json: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "alwaysAddToPackageJson": self.always_add_to_package_json,
        }


@dataclass
class PackageJsonUpdate:
    """A rule bumping dependent packages once a version is reached."""

    version: str
    packages: dict[str, PackageUpdate] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "packages": {name: p.to_dict() for name, p in self.packages.items()},
        }


@dataclass
class PackageMetadata:
    """What the fetcher returns for one package."""

    version: str
    generators: dict[str, GeneratorVersion] = field(default_factory=dict)
    package_json_updates: dict[str, PackageJsonUpdate] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"version": self.version}
        if self.generators:
            data["generators"] = {n: g.to_dict() for n, g in self.generators.items()}
        if self.package_json_updates:
            data["packageJsonUpdates"] = {
                n: u.to_dict() for n, u in self.package_json_updates.items()
            }
        return data


@dataclass
class FixedMigrationFetcher:
    """Resolves known packages to fixed metadata, anything else to a version."""

    packages: dict[str, PackageMetadata] = field(default_factory=dict)
    default_version: str = "0.0.0"

    def fetch(self, package_name: str) -> dict[str, Any]:
        """Metadata the installed fetcher returns for `package_name`."""
        if package_name in self.packages:
            return self.packages[package_name].to_dict()
        return {"version": self.default_version}

    def render_js(self) -> str:
        """Source of a ``createFetcher(logger)`` with the same behaviour."""
        fixed = json.dumps({n: m.to_dict() for n, m in self.packages.items()}, indent=2)
        default = json.dumps({"version": self.default_version})
        return (
            "\n"
            "function createFetcher(logger) {\n"
            f"  const fixed = {fixed};\n"
            "  return function fetch(packageName) {\n"
            "    if (Object.prototype.hasOwnProperty.call(fixed, packageName)) {\n"
            "      return Promise.resolve(fixed[packageName]);\n"
            "    }\n"
            f"    return Promise.resolve({default});\n"
            "  };\n"
            "}\n"
        )


def replace_between_markers(
    text: str,
    replacement: str,
    start_marker: str = FETCH_START_MARKER,
    end_marker: str = FETCH_END_MARKER,
    source: Path | str = "<text>",
) -> str:
    """Replace the span from `start_marker` up to `end_marker`.

    The start marker is replaced along with the span; the end marker and
    everything after it are kept.

    Raises:
        MarkerNotFoundError: If a marker is missing or out of order
    """
    start = text.find(start_marker)
    if start == -1:
        raise MarkerNotFoundError(path=source, marker=start_marker)
    end = text.find(end_marker, start)
    if end == -1:
        raise MarkerNotFoundError(path=source, marker=end_marker)
    return f"{text[:start]}{replacement}{text[end:]}"


def install_fetcher(
    fetcher: FixedMigrationFetcher,
    source: str | Path = MIGRATE_SOURCE,
    *,
    root: Path | None = None,
) -> Path:
    """Make the workspace's tool resolve migration metadata via `fetcher`.

    Args:
        fetcher: Metadata to serve
        source: Migrate command source, relative to the project
        root: Directory `source` is relative to (default: active project)

    Returns:
        Path of the patched source
    """
    js = fetcher.render_js()
    patched = update_file(
        source,
        lambda content: replace_between_markers(content, js, source=source),
        root=root,
    )
    logger.info("migration_fetcher_installed", path=str(patched), packages=list(fetcher.packages))
    return patched
