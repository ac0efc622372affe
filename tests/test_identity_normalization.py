from __future__ import annotations

from pathlib import Path, PureWindowsPath

import pytest

from utils import fingerprint, normalize_identity, path_to_module


def test_normalize_identity_collapses_relative_segments() -> None:
    assert normalize_identity("./contracts/Token.sol") == "contracts/Token.sol"
    assert normalize_identity("contracts/../lib/Math.sol") == "lib/Math.sol"
    assert normalize_identity("contracts//nested/") == "contracts/nested"


def test_normalize_identity_accepts_backslashes_and_paths() -> None:
    assert normalize_identity("contracts\\Token.sol") == "contracts/Token.sol"
    assert normalize_identity(Path("contracts") / "Token.sol") == "contracts/Token.sol"
    assert normalize_identity(PureWindowsPath("contracts\\Token.sol")) == "contracts/Token.sol"


def test_normalize_identity_keeps_absolute_paths_absolute() -> None:
    assert normalize_identity("/project/contracts/A.sol") == "/project/contracts/A.sol"
    assert normalize_identity("//project/A.sol") == "/project/A.sol"


@pytest.mark.parametrize("value", ["", "   ", ".", "./"])
def test_normalize_identity_rejects_empty_paths(value: str) -> None:
    with pytest.raises(ValueError, match="non-empty"):
        normalize_identity(value)


def test_fingerprint_is_content_addressed() -> None:
    assert fingerprint("contract A {}") == fingerprint("contract A {}")
    assert fingerprint("contract A {}") != fingerprint("contract A { }")
    assert len(fingerprint("")) == 64


def test_path_to_module_canonical_src_package_rules() -> None:
    assert path_to_module("src/demo/__init__.py") == "demo"
    assert path_to_module("src/demo/cli.py") == "demo.cli"
    assert path_to_module("pkg/module.py") == "pkg.module"
    assert path_to_module(Path("nested/feature/tool.py")) == "nested.feature.tool"


def test_path_to_module_rejects_empty_module_names() -> None:
    with pytest.raises(ValueError, match="non-empty"):
        path_to_module("__init__.py")

    with pytest.raises(ValueError, match="non-empty"):
        path_to_module("src/__init__.py")
