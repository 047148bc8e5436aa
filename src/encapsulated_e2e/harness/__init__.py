"""Harness for driving an encapsulated workspace end to end.

This package provides:
1. Workspace provisioning and the CLI invocation function
2. Fixture file operations and file-presence checks
3. Fixture document builders (projects, migration packages, journal)
4. A deterministic migration-metadata fetcher
"""

from .fetcher import (
    FixedMigrationFetcher,
    GeneratorVersion,
    PackageJsonUpdate,
    PackageMetadata,
    PackageUpdate,
    install_fetcher,
    replace_between_markers,
)
from .fileops import (
    check_files_do_not_exist,
    check_files_exist,
    create_file,
    exists,
    list_files,
    read_file,
    read_json,
    remove_file,
    update_file,
    update_json,
)
from .fixtures import (
    HostMethod,
    HostOperation,
    MigrationGenerator,
    MigrationJournal,
    MigrationPackage,
    MigrationRecord,
    add_plugin,
    factory_script,
    implementation_script,
    installed_plugins,
    read_journal,
    set_cacheable_operations,
    set_installation,
    set_plugins,
    update_nx_json,
    write_project,
)
from .process import run_command, stripped_environment
from .workspace import EncapsulatedWorkspace, cleanup_project, new_encapsulated_workspace

__all__ = [
    # Workspace
    "EncapsulatedWorkspace",
    "new_encapsulated_workspace",
    "cleanup_project",
    "run_command",
    "stripped_environment",
    # File operations
    "update_file",
    "update_json",
    "create_file",
    "read_file",
    "read_json",
    "remove_file",
    "exists",
    "list_files",
    "check_files_exist",
    "check_files_do_not_exist",
    # Fixtures
    "write_project",
    "set_cacheable_operations",
    "set_plugins",
    "add_plugin",
    "set_installation",
    "installed_plugins",
    "update_nx_json",
    "HostMethod",
    "HostOperation",
    "factory_script",
    "implementation_script",
    "MigrationGenerator",
    "MigrationPackage",
    "MigrationRecord",
    "MigrationJournal",
    "read_journal",
    # Fetcher
    "FixedMigrationFetcher",
    "GeneratorVersion",
    "PackageJsonUpdate",
    "PackageMetadata",
    "PackageUpdate",
    "install_fetcher",
    "replace_between_markers",
]
