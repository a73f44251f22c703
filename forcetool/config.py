"""Locating the metadata source directory of a project."""

from __future__ import annotations

import contextlib
import os

SOURCE_DIRS = ("src", "metadata")


def is_source_dir(path: str | os.PathLike[str]) -> bool:
    """Return True when path exists."""
    return os.path.exists(path)


def get_source_dir(base: str | os.PathLike[str] | None = None) -> str:
    """Return the source directory for base (default: the working directory).

    Subdirectories of base are checked first, then base and its parents. When
    nothing is found, a "src" directory is created with a "metadata" symlink
    pointing to it, and the symlink path is returned.
    """
    base = os.path.abspath(os.getcwd() if base is None else os.fspath(base))

    directory = base
    for name in SOURCE_DIRS:
        directory = os.path.join(base, name)
        if is_source_dir(directory):
            return directory

    while directory != os.path.dirname(directory):
        directory = os.path.dirname(directory)
        for name in SOURCE_DIRS:
            candidate = os.path.join(directory, name)
            if is_source_dir(candidate):
                return candidate

    source = os.path.join(base, "src")
    os.mkdir(source)
    symlink = os.path.join(base, "metadata")
    with contextlib.suppress(OSError):
        os.symlink(source, symlink)
    return symlink