from __future__ import annotations

import logging

import pytest

from contract.errors import UnresolvedImportError
from graph.dependency import DependencyGraph, UnresolvedImport
from parse.ast_imports import PythonImportScanner
from parse.references import PathResolver
from parse.solidity_imports import SolidityImportScanner


def _known(modules: dict[str, str]):
    def resolve(_source: str, reference: str) -> str | None:
        return reference if reference in modules else None

    return resolve


def test_build_creates_edges_between_known_modules() -> None:
    modules = {"A": "import B\nimport C", "B": "import C", "C": "x = 1"}

    graph = DependencyGraph.build(modules, _known(modules), scanner=PythonImportScanner())

    assert graph.all_nodes() == {"A", "B", "C"}
    assert graph.edges() == [("A", "B"), ("A", "C"), ("B", "C")]
    assert graph.imports_of("A") == {"B", "C"}
    assert graph.importers_of("C") == {"A", "B"}
    assert graph.unresolved == ()


def test_reachability_is_cycle_safe() -> None:
    modules = {"A": "import B", "B": "import A", "C": "import C"}

    graph = DependencyGraph.build(modules, _known(modules), scanner=PythonImportScanner())

    assert graph.reachable_from({"A"}) == {"A", "B"}
    assert graph.reachable_from({"C"}) == {"C"}
    assert graph.reverse_reachable_from({"B"}) == {"A", "B"}
    assert graph.cycles() == [["A", "B"], ["C"]]


def test_reachable_from_unknown_seed_raises() -> None:
    graph = DependencyGraph.build({"A": ""}, _known({}), scanner=PythonImportScanner())

    with pytest.raises(KeyError, match="Unknown module"):
        graph.reachable_from({"Z"})


def test_unresolved_imports_are_recorded_and_logged(
    caplog: pytest.LogCaptureFixture,
) -> None:
    modules = {"A": "import B\nimport missing"}

    with caplog.at_level(logging.WARNING, logger="graph.dependency"):
        graph = DependencyGraph.build(modules, _known(modules), scanner=PythonImportScanner())

    assert graph.all_nodes() == {"A"}
    assert graph.edges() == []
    assert graph.unresolved == (
        UnresolvedImport("A", "B", None),
        UnresolvedImport("A", "missing", None),
    )
    assert graph.unresolved_sources() == {"A"}
    assert "Unresolved import 'missing' in A" in caplog.text


def test_unresolved_imports_can_be_fatal() -> None:
    modules = {"A": "import B", "C": "import D"}

    with pytest.raises(UnresolvedImportError) as excinfo:
        DependencyGraph.build(
            modules,
            _known(modules),
            scanner=PythonImportScanner(),
            unresolved="error",
        )

    assert [item.reference for item in excinfo.value.unresolved] == ["B", "D"]


def test_resolved_identity_outside_modules_is_loaded_on_demand() -> None:
    library = {"node_modules/lib/Math.sol": 'import "./Util.sol";', "node_modules/lib/Util.sol": ""}
    modules = {"contracts/A.sol": 'import "lib/Math.sol";'}
    loaded: list[str] = []

    def loader(identity: str) -> str | None:
        loaded.append(identity)
        return library.get(identity)

    graph = DependencyGraph.build(
        modules,
        PathResolver(roots=("node_modules",)),
        scanner=SolidityImportScanner(),
        loader=loader,
    )

    assert graph.reachable_from({"contracts/A.sol"}) == {
        "contracts/A.sol",
        "node_modules/lib/Math.sol",
        "node_modules/lib/Util.sol",
    }
    assert loaded == ["node_modules/lib/Math.sol", "node_modules/lib/Util.sol"]
    assert graph.texts["node_modules/lib/Util.sol"] == ""
    assert graph.remappings == {"lib/Math.sol": "node_modules/lib/Math.sol"}


def test_dangling_resolved_identity_is_unresolved() -> None:
    graph = DependencyGraph.build(
        {"contracts/A.sol": 'import "./Gone.sol";'},
        PathResolver(),
        scanner=SolidityImportScanner(),
        loader=lambda _identity: None,
    )

    assert graph.unresolved == (
        UnresolvedImport("contracts/A.sol", "./Gone.sol", "contracts/Gone.sol"),
    )


def test_build_is_independent_of_input_order() -> None:
    forward = {"A": "import B", "B": "import C", "C": "import A", "D": "import A"}
    backward = dict(reversed(list(forward.items())))

    first = DependencyGraph.build(forward, _known(forward), scanner=PythonImportScanner())
    second = DependencyGraph.build(backward, _known(backward), scanner=PythonImportScanner())

    assert first.identities == second.identities
    assert first.edges() == second.edges()


def test_self_import_is_a_single_node_cycle() -> None:
    modules = {"A": "import A\nimport B", "B": "x = 1"}

    graph = DependencyGraph.build(modules, _known(modules), scanner=PythonImportScanner())

    assert graph.imports_of("A") == {"A", "B"}
    assert graph.reachable_from({"A"}) == {"A", "B"}
    assert graph.reverse_reachable_from({"A"}) == {"A"}
    assert graph.cycles() == [["A"]]
    assert graph.remappings == {}
