"""Fixture file operations and file-presence checks.

Paths are relative to the active project (see shared.paths.tmp_proj_path)
unless an explicit ``root`` is passed.
"""

from __future__ import annotations

import json
import shutil
from collections.abc import Callable
from pathlib import Path
from typing import Any

from ..errors import FileCheckError
from ..shared.logging import get_logger
from ..shared.paths import tmp_proj_path
from ..utils import to_json

logger = get_logger(__name__)

JsonUpdater = Callable[[Any], Any]


def _resolve(path: str | Path, root: Path | None) -> Path:
    if root is not None:
        return Path(root) / path
    return tmp_proj_path(path)


def update_file(
    path: str | Path,
    content: str | Callable[[str], str],
    *,
    root: Path | None = None,
) -> Path:
    """Write a file, creating parent directories.

    Args:
        path: File path
        content: New text, or a function mapping the current text to the
            new text (the file must already exist in that case)
        root: Directory `path` is relative to (default: active project)

    Returns:
        Absolute path of the written file

    Raises:
        FileNotFoundError: If `content` is callable and the file is missing
    """
    target = _resolve(path, root)
    if callable(content):
        content = content(target.read_text())
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(content)
    logger.debug("fixture_written", path=str(target), size=len(content))
    return target


def create_file(path: str | Path, content: str = "", *, root: Path | None = None) -> Path:
    return update_file(path, content, root=root)


def read_file(path: str | Path, *, root: Path | None = None) -> str:
    return _resolve(path, root).read_text()


def read_json(path: str | Path, *, root: Path | None = None) -> Any:
    return json.loads(read_file(path, root=root))


def update_json(path: str | Path, updater: JsonUpdater, *, root: Path | None = None) -> Any:
    """Read a JSON document, apply `updater`, write it back.

    The updater may mutate the document in place, return a replacement,
    or both. Keys it does not touch are written back unchanged.

    Returns:
        The document as written
    """
    data = read_json(path, root=root)
    result = updater(data)
    if result is None:
        result = data
    update_file(path, to_json(result), root=root)
    return result


def remove_file(path: str | Path, *, root: Path | None = None) -> None:
    """Remove a file or directory tree if present."""
    target = _resolve(path, root)
    if target.is_dir() and not target.is_symlink():
        shutil.rmtree(target)
    elif target.exists() or target.is_symlink():
        target.unlink()


def exists(path: str | Path, *, root: Path | None = None) -> bool:
    return _resolve(path, root).exists()


def list_files(path: str | Path = ".", *, root: Path | None = None) -> list[str]:
    """Sorted entry names in a directory (empty if it does not exist)."""
    target = _resolve(path, root)
    if not target.is_dir():
        return []
    return sorted(entry.name for entry in target.iterdir())


def check_files_exist(*paths: str | Path, root: Path | None = None) -> None:
    """Raise FileCheckError for the first path that does not exist.

    Called with no paths, this passes trivially.
    """
    for path in paths:
        if not _resolve(path, root).exists():
            raise FileCheckError(path=str(path), expected_present=True)


def check_files_do_not_exist(*paths: str | Path, root: Path | None = None) -> None:
    """Raise FileCheckError for the first path that exists."""
    for path in paths:
        if _resolve(path, root).exists():
            raise FileCheckError(path=str(path), expected_present=False)
