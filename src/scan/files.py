"""Source file discovery."""

from __future__ import annotations

from fnmatch import fnmatch
from typing import TYPE_CHECKING, cast

from gitignore_parser import parse_gitignore  # type: ignore[import-untyped]

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Sequence
    from pathlib import Path


def _is_within_root(path: Path, root: Path) -> bool:
    """Return True when the resolved path stays within the resolved root."""
    try:
        path.resolve().relative_to(root.resolve())
    except (OSError, ValueError):
        return False
    return True


def _should_include_file(
    path: Path,
    root: Path,
    *,
    output_dir: str,
    gitignore_matches: Callable[[str], bool] | None,
    include_patterns: Sequence[str] | None,
    exclude_patterns: Sequence[str] | None,
) -> bool:
    """Check if a file should be included based on all filtering rules."""
    if not path.is_file() or path.is_symlink():
        return False

    if not _is_within_root(path, root):
        return False

    try:
        rel_path = path.relative_to(root)
    except ValueError:
        return False
    rel_path_str = rel_path.as_posix()

    if output_dir and rel_path.parts and rel_path.parts[0] == output_dir:
        return False

    if gitignore_matches is not None and gitignore_matches(str(path)):
        return False

    if include_patterns and not any(fnmatch(rel_path_str, pat) for pat in include_patterns):
        return False

    return not (exclude_patterns and any(fnmatch(rel_path_str, pat) for pat in exclude_patterns))


def _iter_gitignore_files(root: Path) -> list[Path]:
    """Return sorted list of .gitignore files under root (including root)."""
    gitignore_paths = [root / ".gitignore"]
    gitignore_paths.extend(root.rglob(".gitignore"))
    unique_paths = {
        path for path in gitignore_paths if path.is_file() and not path.is_symlink()
    }
    return sorted(unique_paths, key=lambda p: p.relative_to(root).as_posix())


def _build_gitignore_matcher(
    root: Path,
    *,
    nested_gitignore: bool,
) -> Callable[[str], bool] | None:
    if not nested_gitignore:
        gitignore_path = root / ".gitignore"
        if gitignore_path.is_file():
            return cast("Callable[[str], bool]", parse_gitignore(gitignore_path))
        return None

    gitignore_paths = _iter_gitignore_files(root)
    if not gitignore_paths:
        return None

    matchers = [parse_gitignore(path) for path in gitignore_paths]

    def matches(path_str: str) -> bool:
        for matcher in matchers:
            try:
                if matcher(path_str):
                    return True
            except ValueError:
                continue
        return False

    return matches


def find_source_files(
    directory: Path,
    *,
    suffixes: Sequence[str],
    root: Path | None = None,
    output_dir: str = ".rebuildmap",
    include_patterns: Sequence[str] | None = None,
    exclude_patterns: Sequence[str] | None = None,
    nested_gitignore: bool = False,
) -> Iterator[Path]:
    """Find source files under ``directory``, respecting .gitignore.

    Args:
        directory: Directory to search
        suffixes: File suffixes to collect (e.g. ``(".sol",)``)
        root: Project root that patterns, ``.gitignore`` and ``output_dir``
            are relative to (defaults to ``directory``)
        output_dir: Directory name under root to skip
        include_patterns: Optional fnmatch patterns; if provided, files must
            match at least one pattern to be included
        exclude_patterns: Optional fnmatch patterns; matching files are excluded
        nested_gitignore: Compose every .gitignore under root, not just the
            top-level one

    Yields:
        Matching files, sorted by path relative to root.
    """
    root = root if root is not None else directory
    if not directory.is_dir():
        return

    gitignore_matches = _build_gitignore_matcher(
        root,
        nested_gitignore=nested_gitignore,
    )

    matched_files = [
        path
        for suffix in sorted(set(suffixes))
        for path in directory.rglob(f"*{suffix}")
        if _is_within_root(path, directory)
        and _should_include_file(
            path,
            root,
            output_dir=output_dir,
            gitignore_matches=gitignore_matches,
            include_patterns=include_patterns,
            exclude_patterns=exclude_patterns,
        )
    ]

    matched_files.sort(key=lambda p: p.relative_to(root).as_posix())

    yield from matched_files


__all__ = ["find_source_files"]
