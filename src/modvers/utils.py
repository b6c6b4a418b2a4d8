"""Module naming rules shared by the scanner, the driver and the strategies."""

from __future__ import annotations

from pathlib import Path, PurePosixPath

SOURCE_SUFFIX = ".py"
PACKAGE_INIT = "__init__"


def path_to_module(file_path: str | Path) -> str:
    """Convert a path relative to a search-path root to a dotted module name.

    Args:
        file_path: Relative file path (e.g., "pkg/sub/mod.py" or Path object)

    Returns:
        Module name (e.g., "pkg.sub.mod")

    Raises:
        ValueError: If the path is not a Python source file or does not map
            to a non-empty module name made of identifiers.

    Examples:
        >>> path_to_module("pkg/sub/mod.py")
        'pkg.sub.mod'
        >>> path_to_module("pkg/__init__.py")
        'pkg'
        >>> path_to_module(Path("foo/bar.py"))
        'foo.bar'
    """
    path_str = file_path.as_posix() if isinstance(file_path, Path) else str(file_path)
    module_parts = [part for part in path_str.replace("\\", "/").split("/") if part]

    if not module_parts or not module_parts[-1].endswith(SOURCE_SUFFIX):
        msg = f"not a Python source file: {path_str!r}"
        raise ValueError(msg)

    module_parts[-1] = module_parts[-1][: -len(SOURCE_SUFFIX)]

    if module_parts[-1] == PACKAGE_INIT:
        module_parts = module_parts[:-1]

    if not module_parts:
        msg = f"path {path_str!r} does not map to a non-empty module name"
        raise ValueError(msg)

    bad = [part for part in module_parts if not part.isidentifier()]
    if bad:
        msg = f"path {path_str!r} has non-identifier segment {bad[0]!r}"
        raise ValueError(msg)

    return ".".join(module_parts)


def module_to_paths(module: str) -> tuple[Path, Path]:
    """Return the candidate relative files for a dotted module name.

    The package form comes first, matching the order in which the import
    system's path finder searches a directory.

    Examples:
        >>> [p.as_posix() for p in module_to_paths("pkg.mod")]
        ['pkg/mod/__init__.py', 'pkg/mod.py']
    """
    parts = module.split(".")
    package = Path(*parts, PACKAGE_INIT + SOURCE_SUFFIX)
    plain = Path(*parts[:-1], parts[-1] + SOURCE_SUFFIX)
    return package, plain


def normalize_module_name(raw: str) -> str:
    """Normalize a user-supplied module name to dotted form.

    Accepts dotted names ("pkg.mod") as well as path forms ("pkg/mod.py",
    "pkg/mod").

    Raises:
        ValueError: If the name is empty or a segment is not an identifier.
    """
    candidate = raw.strip()
    if "/" in candidate or "\\" in candidate or candidate.endswith(SOURCE_SUFFIX):
        posix = PurePosixPath(candidate.replace("\\", "/"))
        if posix.is_absolute():
            msg = f"module name must be relative: {raw!r}"
            raise ValueError(msg)
        if posix.suffix != SOURCE_SUFFIX:
            posix = posix.with_name(posix.name + SOURCE_SUFFIX)
        return path_to_module(posix.as_posix())

    parts = candidate.split(".")
    if not candidate or not all(part.isidentifier() for part in parts):
        msg = f"invalid module name: {raw!r}"
        raise ValueError(msg)
    return candidate


__all__ = [
    "PACKAGE_INIT",
    "SOURCE_SUFFIX",
    "module_to_paths",
    "normalize_module_name",
    "path_to_module",
]
