from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest

from scan.files import _build_gitignore_matcher, find_source_files

if TYPE_CHECKING:
    from pathlib import Path


def _rel(paths, root: Path) -> list[str]:
    return [path.relative_to(root).as_posix() for path in paths]


@pytest.mark.skipif(
    os.name == "nt",
    reason="Symlink semantics vary on Windows test runners.",
)
def test_find_source_files_skips_symlinked_dirs(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    (repo_root / "contracts").mkdir(parents=True)
    (repo_root / "contracts" / "Token.sol").write_text("contract Token {}\n", encoding="utf-8")

    external_root = tmp_path / "external"
    external_root.mkdir()
    (external_root / "Leak.sol").write_text("contract Leak {}\n", encoding="utf-8")

    (repo_root / "contracts" / "linked").symlink_to(external_root, target_is_directory=True)
    (repo_root / "contracts" / "Alias.sol").symlink_to(external_root / "Leak.sol")

    results = _rel(
        find_source_files(repo_root / "contracts", suffixes=(".sol",), root=repo_root),
        repo_root,
    )

    assert results == ["contracts/Token.sol"]


def test_find_source_files_filters_and_sorts(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    contracts = repo_root / "contracts"
    (contracts / "mocks").mkdir(parents=True)
    (contracts / "b").mkdir()
    (repo_root / ".rebuildmap").mkdir()
    for rel in ("Z.sol", "A.sol", "b/B.sol", "mocks/Mock.sol", "notes.txt", "Ignored.sol"):
        (contracts / rel).write_text("", encoding="utf-8")
    (repo_root / ".rebuildmap" / "Cached.sol").write_text("", encoding="utf-8")
    (repo_root / ".gitignore").write_text("contracts/Ignored.sol\n", encoding="utf-8")

    results = _rel(
        find_source_files(
            contracts,
            suffixes=(".sol",),
            root=repo_root,
            exclude_patterns=["contracts/mocks/*"],
        ),
        repo_root,
    )
    everything = _rel(
        find_source_files(repo_root, suffixes=(".sol",), root=repo_root),
        repo_root,
    )

    assert results == ["contracts/A.sol", "contracts/Z.sol", "contracts/b/B.sol"]
    assert ".rebuildmap/Cached.sol" not in everything
    assert "contracts/Ignored.sol" not in everything


def test_find_source_files_missing_directory(tmp_path: Path) -> None:
    assert list(find_source_files(tmp_path / "absent", suffixes=(".sol",))) == []


@pytest.mark.skipif(
    os.name == "nt",
    reason="Symlink semantics vary on Windows test runners.",
)
def test_nested_gitignore_skips_symlinked_gitignore(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    (repo_root / "contracts").mkdir(parents=True)
    (repo_root / "contracts" / "Token.sol").write_text("", encoding="utf-8")
    (repo_root / ".gitignore").write_text("*.bin\n", encoding="utf-8")

    external_root = tmp_path / "external"
    external_root.mkdir()
    (external_root / "outside.gitignore").write_text("*.sol\n", encoding="utf-8")

    (repo_root / "contracts" / ".gitignore").symlink_to(external_root / "outside.gitignore")

    matcher = _build_gitignore_matcher(repo_root, nested_gitignore=True)
    assert matcher is not None
    assert matcher(str(repo_root / "contracts" / "Token.sol")) is False
