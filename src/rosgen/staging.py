"""File staging helpers used to copy supplied artifacts into a project."""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import Iterable

from rosgen.exceptions import FileIOError, InvalidArgumentError, NotFoundError

logger = logging.getLogger(__name__)

_SEPARATOR = "/"


def exists_file_or_directory(path: str | Path) -> bool:
    """Return True if *path* names an existing file or directory."""
    return os.path.exists(path)


def filename_from_path(path: str | Path) -> str:
    """Return the part of *path* after its last separator.

    Raises:
        InvalidArgumentError: If *path* is empty or ends with a separator.
    """
    text = os.fspath(path)
    if not text:
        raise InvalidArgumentError("Cannot extract a filename from an empty path")
    filename = text.rsplit(_SEPARATOR, 1)[-1]
    if not filename:
        raise InvalidArgumentError(f"Path has no filename component: {text!r}")
    return filename


def filenames_from_paths(paths: Iterable[str | Path]) -> list[str]:
    """Apply :func:`filename_from_path` to each path, preserving order."""
    return [filename_from_path(path) for path in paths]


def copy_file(source: str | Path, destination: str | Path) -> Path:
    """Copy the contents of *source* to *destination*, replacing it if present.

    Raises:
        FileIOError: If either file cannot be opened or the copy fails.
    """
    try:
        shutil.copyfile(source, destination)
    except OSError as exc:
        raise FileIOError(str(source), f"unable to copy to '{destination}': {exc}") from exc
    return Path(destination)


def copy_files_to(paths: Iterable[str | Path], destination: str | Path) -> list[Path]:
    """Copy each of *paths* into the *destination* directory.

    Stops at the first failure; files copied before it are left in place.

    Returns:
        The destination paths written, in input order.

    Raises:
        NotFoundError: If *destination* or any source path does not exist.
        InvalidArgumentError: If a source path has no filename component.
        FileIOError: If a copy fails.
    """
    if not exists_file_or_directory(destination):
        raise NotFoundError(str(destination), "destination directory does not exist")

    copied: list[Path] = []
    for path in paths:
        if not exists_file_or_directory(path):
            raise NotFoundError(str(path), "source file does not exist")
        target = Path(destination) / filename_from_path(path)
        copied.append(copy_file(path, target))
        logger.debug("Staged %s -> %s", path, target)
    return copied
