"""Shared identity and fingerprint utilities for rebuildmap."""

from __future__ import annotations

import hashlib
import posixpath
from pathlib import Path, PurePath


def normalize_identity(path: str | PurePath) -> str:
    """Normalize a source path into the identity used as a key everywhere.

    Examples:
        >>> normalize_identity("contracts\\\\Token.sol")
        'contracts/Token.sol'
        >>> normalize_identity("./contracts/../lib/Math.sol")
        'lib/Math.sol'
        >>> normalize_identity("/abs/dir/")
        '/abs/dir'
    """
    path_str = path.as_posix() if isinstance(path, PurePath) else str(path)
    path_str = path_str.replace("\\", "/").strip()
    if not path_str:
        msg = "source identity must be a non-empty path"
        raise ValueError(msg)

    normalized = posixpath.normpath(path_str)
    if normalized == ".":
        msg = f"source identity must be a non-empty path, got {path_str!r}"
        raise ValueError(msg)
    # normpath keeps a leading '//' on POSIX; collapse it for stable keys.
    if normalized.startswith("//"):
        normalized = "/" + normalized.lstrip("/")
    return normalized


def fingerprint(text: str) -> str:
    """Return the SHA-256 hex digest of ``text`` encoded as UTF-8."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def path_to_module(file_path: str | Path) -> str:
    """Convert a file path to a Python module name.

    Examples:
        >>> path_to_module("src/rebuildmap_demo/cli.py")
        'rebuildmap_demo.cli'
        >>> path_to_module("src/rebuildmap_demo/__init__.py")
        'rebuildmap_demo'
        >>> path_to_module(Path("foo/bar.py"))
        'foo.bar'
    """
    path_str = file_path.as_posix() if isinstance(file_path, Path) else str(file_path)
    normalized_parts = [
        part for part in path_str.replace("\\", "/").split("/") if part and part != "."
    ]

    # Sources under src/<package>/... map to <package>.<submodules>.
    module_parts = (
        normalized_parts[1:]
        if len(normalized_parts) >= 2 and normalized_parts[0] == "src"
        else normalized_parts
    )

    if module_parts and module_parts[-1].endswith(".py"):
        module_parts[-1] = module_parts[-1][:-3]

    if module_parts and module_parts[-1] == "__init__":
        module_parts = module_parts[:-1]

    if not module_parts:
        msg = f"path {path_str!r} does not map to a non-empty module name"
        raise ValueError(msg)

    return ".".join(module_parts)
