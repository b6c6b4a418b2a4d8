"""Search-path scanning for modvers."""

from modvers.scan.paths import (
    default_search_path,
    find_module_file,
    scan_modules,
    scan_roots,
)

__all__ = [
    "default_search_path",
    "find_module_file",
    "scan_modules",
    "scan_roots",
]
