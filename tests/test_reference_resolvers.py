from __future__ import annotations

import pytest

from parse.references import PathResolver, PythonModuleResolver, get_resolver


def test_path_resolver_anchors_relative_references_on_importer() -> None:
    resolver = PathResolver()

    assert resolver("contracts/A.sol", "./B.sol") == "contracts/B.sol"
    assert resolver("contracts/A.sol", "../lib/C.sol") == "lib/C.sol"
    assert resolver("contracts/A.sol", ".\\win\\D.sol") == "contracts/win/D.sol"


def test_path_resolver_tries_roots_in_order() -> None:
    existing = {"node_modules/@oz/D.sol", "lib/E.sol"}
    resolver = PathResolver(roots=("", "node_modules"), exists=existing.__contains__)

    assert resolver("contracts/A.sol", "@oz/D.sol") == "node_modules/@oz/D.sol"
    assert resolver("contracts/A.sol", "lib/E.sol") == "lib/E.sol"
    assert resolver("contracts/A.sol", "@oz/Missing.sol") is None


def test_path_resolver_without_predicate_returns_first_candidate() -> None:
    resolver = PathResolver(roots=("", "node_modules"))

    assert resolver("contracts/A.sol", "@oz/D.sol") == "@oz/D.sol"
    assert resolver("contracts/A.sol", "/abs/X.sol") == "/abs/X.sol"


@pytest.fixture
def python_resolver() -> PythonModuleResolver:
    return PythonModuleResolver(
        [
            "pkg/__init__.py",
            "pkg/core.py",
            "pkg/sub/__init__.py",
            "pkg/sub/leaf.py",
            "src/app/main.py",
            "README.md",
        ]
    )


def test_python_resolver_maps_absolute_names(python_resolver: PythonModuleResolver) -> None:
    assert python_resolver("pkg/core.py", "pkg.sub.leaf") == "pkg/sub/leaf.py"
    assert python_resolver("pkg/core.py", "app.main") == "src/app/main.py"
    assert python_resolver("pkg/core.py", "pkg") == "pkg/__init__.py"


def test_python_resolver_anchors_relative_names(python_resolver: PythonModuleResolver) -> None:
    assert python_resolver("pkg/sub/leaf.py", "..core") == "pkg/core.py"
    assert python_resolver("pkg/sub/__init__.py", ".leaf") == "pkg/sub/leaf.py"
    assert python_resolver("pkg/__init__.py", ".core") == "pkg/core.py"


def test_python_resolver_falls_back_to_parent_package(
    python_resolver: PythonModuleResolver,
) -> None:
    assert python_resolver("pkg/sub/leaf.py", "pkg.core.Greeter") == "pkg/core.py"
    assert python_resolver("pkg/sub/leaf.py", ".helper") == "pkg/sub/__init__.py"


def test_python_resolver_reports_external_modules_as_missing(
    python_resolver: PythonModuleResolver,
) -> None:
    assert python_resolver("pkg/core.py", "requests") is None
    assert python_resolver("pkg/core.py", "os.path") is None


def test_get_resolver_by_language() -> None:
    assert isinstance(get_resolver("python", []), PythonModuleResolver)
    assert isinstance(get_resolver("solidity", []), PathResolver)

    with pytest.raises(ValueError, match="No reference resolver"):
        get_resolver("cobol", [])
