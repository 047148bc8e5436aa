"""Shared modules for encapsulated-e2e.

This module provides functionality used by both the harness and the CLI:
- Logging configuration
- Workspace and scratch-area paths
"""

from .logging import configure_logging, get_logger
from .paths import (
    CACHE_DIR,
    ENCAPSULATED_DIR,
    INSTALLATION_DIR,
    MIGRATE_SOURCE,
    MIGRATIONS_JOURNAL,
    NX_JSON,
    ROOT_PACKAGE_ARTIFACTS,
    TERMINAL_OUTPUTS_DIR,
    e2e_cwd,
    e2e_root,
    tmp_proj_path,
)

__all__ = [
    # Paths
    "ENCAPSULATED_DIR",
    "INSTALLATION_DIR",
    "CACHE_DIR",
    "TERMINAL_OUTPUTS_DIR",
    "MIGRATE_SOURCE",
    "MIGRATIONS_JOURNAL",
    "NX_JSON",
    "ROOT_PACKAGE_ARTIFACTS",
    "e2e_root",
    "e2e_cwd",
    "tmp_proj_path",
    # Logging
    "configure_logging",
    "get_logger",
]
