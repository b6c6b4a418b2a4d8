"""Search-path scanning for installed modules."""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from modvers.models import ModuleRecord
from modvers.utils import (
    PACKAGE_INIT,
    SOURCE_SUFFIX,
    module_to_paths,
    path_to_module,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Sequence

LOGGER = logging.getLogger(__name__)


def default_search_path() -> list[str]:
    """Return a snapshot of the interpreter's import path."""
    return list(sys.path)


def _entry_to_root(entry: str) -> Path:
    # An empty sys.path entry stands for the current directory.
    return Path(entry or os.getcwd()).expanduser().absolute()


def scan_roots(search_path: Iterable[str]) -> list[Path]:
    """Return the directory roots of a search path, in order.

    Entries that are not directories (zip archives, missing paths) are
    skipped since no source file can be found under them.
    """
    roots: list[Path] = []
    for entry in search_path:
        root = _entry_to_root(entry)
        if root.is_dir():
            roots.append(root)
    return roots


def find_module_file(module: str, search_path: Iterable[str]) -> Path | None:
    """Resolve a dotted module name to its source file.

    Roots are tried in search-path order and the first existing candidate
    wins. Inside a root a package shadows a plain module of the same name.
    """
    candidates = module_to_paths(module)
    for root in scan_roots(search_path):
        for relative in candidates:
            path = root / relative
            if path.is_file():
                return path
    return None


def _is_package_dir(name: str) -> bool:
    return name.isidentifier()


def _walk_root(root: Path, seen_dirs: set[str]) -> Iterator[Path]:
    """Yield ``.py`` files under ``root`` in sorted, depth-first order.

    Symlinked directories are followed; a directory whose real path was
    already visited in this scan is not entered again.
    """
    for dirpath, dirnames, filenames in os.walk(root, followlinks=True):
        real_dir = os.path.realpath(dirpath)
        if real_dir in seen_dirs:
            dirnames[:] = []
            continue
        seen_dirs.add(real_dir)

        dirnames[:] = sorted(name for name in dirnames if _is_package_dir(name))
        for filename in sorted(filenames):
            if not filename.endswith(SOURCE_SUFFIX):
                continue
            # A regular package shadows a module of the same name.
            stem = filename[: -len(SOURCE_SUFFIX)]
            if stem in dirnames and os.path.isfile(
                os.path.join(dirpath, stem, PACKAGE_INIT + SOURCE_SUFFIX)
            ):
                continue
            yield Path(dirpath, filename)


def scan_modules(search_path: Sequence[str]) -> Iterator[ModuleRecord]:
    """Enumerate every module on the search path exactly once.

    The walk is lazy and re-reads the filesystem on every call. Records come
    out in search-path order, then in sorted traversal order within a root.
    A file whose real path was already emitted is skipped, as is a module
    name already emitted from an earlier root: the earlier root shadows the
    later one, just as it does at import time.

    Yields:
        ModuleRecord for each unique module, with an absolute ``file``.
    """
    seen_files: set[str] = set()
    seen_names: set[str] = set()

    for root in scan_roots(search_path):
        # Directory cycles are guarded per root so that nested roots
        # (site-packages under the stdlib dir) are still walked on their own.
        seen_dirs: set[str] = set()
        for path in _walk_root(root, seen_dirs):
            real_file = os.path.realpath(path)
            if real_file in seen_files:
                continue

            try:
                name = path_to_module(path.relative_to(root))
            except ValueError as exc:
                LOGGER.warning("skipping %s: %s", path, exc)
                continue

            if name in seen_names:
                continue

            seen_files.add(real_file)
            seen_names.add(name)
            yield ModuleRecord(name=name, file=path)


__all__ = [
    "default_search_path",
    "find_module_file",
    "scan_modules",
    "scan_roots",
]
